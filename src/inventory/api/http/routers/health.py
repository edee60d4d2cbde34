"""Health check endpoints consulted by the orchestrator.

- ``/health/live``: the process is running.
- ``/health/ready``: the store answers within the readiness bound and the
  product service can count active products; pool occupancy is reported
  with the checks.
- ``/health/startup``: the store answers within the (longer) startup bound.
"""

import asyncio
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends
from loguru import logger
from starlette.concurrency import run_in_threadpool
from starlette.responses import JSONResponse

from src.inventory.api.http.deps import get_database_service, get_product_service
from src.inventory.core.services import DbSessionService, ProductService
from src.inventory.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


def _now() -> str:
    return datetime.now(UTC).isoformat()


async def _check_store(database_service: DbSessionService, timeout: float) -> None:
    """Ping the store; raises on failure or when ``timeout`` seconds elapse.

    The ping runs on a plain executor thread so a hung connection is abandoned
    once the bound passes instead of holding the probe open.
    """
    await asyncio.wait_for(asyncio.to_thread(database_service.ping), timeout=timeout)


def _describe(exc: BaseException) -> str:
    if isinstance(exc, TimeoutError):
        return "Timed out waiting for the database"
    return str(exc)


@router.get("/live")
async def liveness() -> dict[str, str]:
    """Liveness probe: 200 as long as the process can serve a request."""
    return {
        "status": "UP",
        "timestamp": _now(),
        "message": "Application is running",
    }


@router.get("/ready", response_model=None)
async def readiness(
    database_service: DbSessionService = Depends(get_database_service),
    product_service: ProductService = Depends(get_product_service),
) -> dict[str, Any] | JSONResponse:
    """Readiness probe: 200 when the store and service layer respond, else 503."""
    timeout = get_config().health.readiness_timeout_seconds
    checks: dict[str, Any] = {}
    is_ready = True

    try:
        await _check_store(database_service, timeout)
        checks["database"] = "UP"
        checks["databasePool"] = database_service.get_pool_status()
    except Exception as e:
        logger.error("Database readiness check failed: {}", _describe(e))
        checks["database"] = "DOWN"
        checks["databaseError"] = _describe(e)
        is_ready = False

    try:
        await run_in_threadpool(product_service.total_active_count)
        checks["productService"] = "UP"
    except Exception as e:
        logger.error("Product service readiness check failed: {}", e)
        checks["productService"] = "DOWN"
        checks["serviceError"] = str(e)
        is_ready = False

    response = {
        "status": "UP" if is_ready else "DOWN",
        "timestamp": _now(),
        "checks": checks,
    }
    if not is_ready:
        return JSONResponse(status_code=503, content=response)
    return response


@router.get("/startup", response_model=None)
async def startup_probe(
    database_service: DbSessionService = Depends(get_database_service),
) -> dict[str, Any] | JSONResponse:
    """Startup probe: 200 once the store is reachable, else 503."""
    timeout = get_config().health.startup_timeout_seconds

    try:
        await _check_store(database_service, timeout)
    except Exception as e:
        logger.error("Startup health check failed: {}", _describe(e))
        return JSONResponse(
            status_code=503,
            content={
                "status": "DOWN",
                "timestamp": _now(),
                "message": "Database connection failed",
                "error": _describe(e),
            },
        )

    return {
        "status": "UP",
        "timestamp": _now(),
        "message": "Application started successfully",
    }
