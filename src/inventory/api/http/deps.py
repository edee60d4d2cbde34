"""FastAPI dependency implementations."""

from __future__ import annotations

import hmac

from fastapi import HTTPException, Request

from src.inventory.api.http.app_data import ApplicationDependencies
from src.inventory.core.services import DbSessionService, ProductService
from src.inventory.runtime.context import get_config


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_database_service(request: Request) -> DbSessionService:
    """Get the database service instance."""
    return get_app_dependencies(request).database_service


def get_product_service(request: Request) -> ProductService:
    """Get the product service instance."""
    return get_app_dependencies(request).product_service


def require_api_key(request: Request) -> None:
    """Reject the request unless it carries a configured API key.

    A no-op while ``security.api_key_enabled`` is false.
    """
    security = get_config().security
    if not security.api_key_enabled:
        return

    presented = request.headers.get(security.api_key_header)
    if not presented:
        raise HTTPException(status_code=401, detail=f"Missing {security.api_key_header} header")

    if not any(hmac.compare_digest(presented, key) for key in security.api_keys):
        raise HTTPException(status_code=401, detail="Invalid API key")
