"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlmodel import Session, create_engine

from src.inventory.runtime.config.config_data import ConfigData
from src.inventory.runtime.context import get_config


def build_engine(main_config: ConfigData) -> Engine:
    """Create the shared engine for the configured database."""
    db_config = main_config.database

    logger.info("Configuring database engine for environment: {}", main_config.app.environment)
    engine_kwargs: dict[str, Any] = {
        "pool_pre_ping": True,  # Validate connections before use
        "echo": False,
        "connect_args": _get_connect_args(main_config),
    }

    if db_config.is_sqlite:
        if main_config.app.environment == "production":
            logger.warning(
                "SQLite is not recommended for production use. "
                "Consider PostgreSQL for better performance and reliability."
            )
    else:
        engine_kwargs.update(
            {
                "pool_size": db_config.pool_size,
                "max_overflow": db_config.max_overflow,
                "pool_timeout": db_config.pool_timeout,
                "pool_recycle": db_config.pool_recycle,
                "pool_reset_on_return": "rollback",
            }
        )

    engine = create_engine(db_config.connection_string, **engine_kwargs)
    logger.info("Database engine initialized for {}", engine.url.render_as_string(hide_password=True))
    return engine


def _get_connect_args(config: ConfigData) -> dict[str, Any]:
    """Get database-specific connection arguments."""
    if config.database.is_sqlite:
        return {
            "check_same_thread": False,  # Sessions cross FastAPI's threadpool
            "timeout": 20,  # Lock timeout
        }

    if config.database.url.startswith("postgresql"):
        return {
            "application_name": f"{config.app.name}-{config.app.environment}",
            "connect_timeout": 30,
        }

    return {}


class DbSessionService:
    """Owns the engine and hands out transaction-scoped sessions."""

    def __init__(self, engine: Engine | None = None):
        if engine is None:
            logger.info("Setting up database engine and session factory")
            engine = build_engine(get_config())
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,  # Returned rows stay readable after commit
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Read-write transaction: commit on success, roll back on error."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(
                "Database transaction failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise
        finally:
            db.close()

    @contextmanager
    def read_only_scope(self) -> Iterator[Session]:
        """Read-only transaction: always rolled back, never committed."""
        db = self.get_session()
        try:
            yield db
        finally:
            db.rollback()
            db.close()

    def ping(self) -> None:
        """Run a trivial query; raises if the store is unreachable."""
        with self._engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def get_pool_status(self) -> dict[str, int]:
        """Get current connection pool status for monitoring."""
        pool = self._engine.pool
        return {
            "size": getattr(pool, "size", lambda: 0)(),
            "checked_in": getattr(pool, "checkedin", lambda: 0)(),
            "checked_out": getattr(pool, "checkedout", lambda: 0)(),
            "overflow": getattr(pool, "overflow", lambda: 0)(),
        }

    def dispose(self) -> None:
        self._engine.dispose()
