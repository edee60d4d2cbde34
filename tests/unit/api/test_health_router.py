"""Tests for the liveness, readiness and startup probes."""

import time
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from src.inventory.api.http.app import create_app
from src.inventory.api.http.app_data import ApplicationDependencies
from src.inventory.core.services import DbSessionService, ProductService
from src.inventory.runtime.context import get_config


def _client_with(database_service: Mock, product_service: Mock | None = None) -> TestClient:
    if product_service is None:
        product_service = Mock(spec=ProductService)
        product_service.total_active_count.return_value = 0
    dependencies = ApplicationDependencies(
        database_service=database_service,
        product_service=product_service,
    )
    return TestClient(create_app(dependencies))


@pytest.fixture
def unreachable_database() -> Mock:
    database_service = Mock(spec=DbSessionService)
    database_service.ping.side_effect = OperationalError(
        "SELECT 1", {}, Exception("connection refused")
    )
    return database_service


@pytest.fixture
def slow_database() -> Mock:
    database_service = Mock(spec=DbSessionService)
    database_service.ping.side_effect = lambda: time.sleep(0.5)
    return database_service


class TestLiveness:
    def test_live_is_always_up(self, client: TestClient):
        response = client.get("/health/live")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "UP"
        assert body["message"] == "Application is running"
        assert "timestamp" in body

    def test_live_ignores_database_state(self, unreachable_database: Mock):
        with _client_with(unreachable_database) as client:
            assert client.get("/health/live").status_code == 200


class TestReadiness:
    def test_ready_with_working_store(self, client: TestClient):
        response = client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "UP"
        assert body["checks"]["database"] == "UP"
        assert body["checks"]["productService"] == "UP"
        assert set(body["checks"]["databasePool"]) == {
            "size",
            "checked_in",
            "checked_out",
            "overflow",
        }

    def test_not_ready_when_store_unreachable(self, unreachable_database: Mock):
        product_service = Mock(spec=ProductService)
        product_service.total_active_count.side_effect = OperationalError(
            "SELECT count(*)", {}, Exception("connection refused")
        )

        with _client_with(unreachable_database, product_service) as client:
            response = client.get("/health/ready")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "DOWN"
        assert body["checks"]["database"] == "DOWN"
        assert body["checks"]["productService"] == "DOWN"
        assert "connection refused" in body["checks"]["databaseError"]
        assert "connection refused" in body["checks"]["serviceError"]

    def test_not_ready_when_store_is_too_slow(self, slow_database: Mock, monkeypatch):
        monkeypatch.setattr(get_config().health, "readiness_timeout_seconds", 0.05)

        with _client_with(slow_database) as client:
            response = client.get("/health/ready")

        assert response.status_code == 503
        checks = response.json()["checks"]
        assert checks["database"] == "DOWN"
        assert checks["databaseError"] == "Timed out waiting for the database"
        assert checks["productService"] == "UP"


class TestStartup:
    def test_started_with_working_store(self, client: TestClient):
        response = client.get("/health/startup")

        assert response.status_code == 200
        assert response.json()["message"] == "Application started successfully"

    def test_not_started_when_store_unreachable(self, unreachable_database: Mock):
        with _client_with(unreachable_database) as client:
            response = client.get("/health/startup")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "DOWN"
        assert body["message"] == "Database connection failed"
        assert "connection refused" in body["error"]

    def test_not_started_when_store_is_too_slow(self, slow_database: Mock, monkeypatch):
        monkeypatch.setattr(get_config().health, "startup_timeout_seconds", 0.05)

        with _client_with(slow_database) as client:
            response = client.get("/health/startup")

        assert response.status_code == 503
        assert response.json()["error"] == "Timed out waiting for the database"
