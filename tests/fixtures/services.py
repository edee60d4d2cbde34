"""Service fixtures for testing."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from src.inventory.api.http.app import create_app
from src.inventory.api.http.app_data import ApplicationDependencies
from src.inventory.core.services import DbSessionService, ProductService


@pytest.fixture
def database_service(engine: Engine) -> DbSessionService:
    """Database service bound to the in-memory test engine."""
    return DbSessionService(engine)


@pytest.fixture
def product_service(database_service: DbSessionService) -> ProductService:
    return ProductService(database_service)


@pytest.fixture
def app_dependencies(database_service: DbSessionService) -> ApplicationDependencies:
    return ApplicationDependencies.from_database(database_service)


@pytest.fixture
def client(app_dependencies: ApplicationDependencies) -> Iterator[TestClient]:
    """Test client running the full application against the in-memory store."""
    with TestClient(create_app(app_dependencies)) as test_client:
        yield test_client
