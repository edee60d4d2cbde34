"""FastAPI application factory and setup."""

import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from src.inventory import __version__
from src.inventory.api.http.app_data import ApplicationDependencies
from src.inventory.api.http.routers import health, product
from src.inventory.api.utils.app_startup import configure_logging
from src.inventory.core.services import DbManageService, DbSessionService
from src.inventory.runtime.context import get_config

__all__ = ["app", "create_app", "startup", "shutdown"]


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )
        return response


# --- Request logging middleware ---
async def log_requests(request: Request, call_next) -> Response:
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )


# --- Lifecycle hooks ---
async def startup(app: FastAPI) -> None:
    config = get_config()
    logger.info("Starting up {} in {} environment", config.app.name, config.app.environment)

    if not config.security.api_key_enabled:
        log = logger.warning if config.app.environment == "production" else logger.info
        log("Product API authentication is disabled; every endpoint is open")

    # Injected dependencies arrive ready to use; only a self-built graph needs schema setup
    if getattr(app.state, "app_dependencies", None) is not None:
        return

    database_service = DbSessionService()
    if config.database.create_tables:
        DbManageService(database_service.engine).create_all()
    app.state.app_dependencies = ApplicationDependencies.from_database(database_service)
    app.state.owns_dependencies = True


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    if getattr(app.state, "owns_dependencies", False):
        app.state.app_dependencies.database_service.dispose()
        app.state.app_dependencies = None
        app.state.owns_dependencies = False


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    await startup(app)
    try:
        yield
    finally:
        await shutdown(app)


def create_app(dependencies: ApplicationDependencies | None = None) -> FastAPI:
    """Build the application.

    ``dependencies`` lets callers (tests, embedding code) supply a prepared
    service graph; otherwise one is built from configuration at startup.
    """
    config = get_config()
    is_production = config.app.environment == "production"

    application = FastAPI(
        title="Product Inventory Service",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )
    application.state.app_dependencies = dependencies
    application.state.owns_dependencies = False

    if (
        is_production
        and "*" in config.app.cors.origins
        and config.app.cors.allow_credentials
    ):
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    application.add_middleware(SecurityHeadersMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    application.middleware("http")(log_requests)

    application.include_router(health.router)
    application.include_router(product.router, prefix=config.api.prefix)

    return application


configure_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # Request logging middleware handles access logs
    )
