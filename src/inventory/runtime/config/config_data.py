"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

import os
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field, field_validator


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(default=["*"])
    allow_credentials: bool = False
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./inventory.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    environment_mode: str = Field(
        default="development", description="Environment mode: development or production"
    )
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    create_tables: bool = Field(
        default=True, description="Create missing tables on application startup"
    )
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @computed_field
    @property
    def password(self) -> str | None:
        """
        Get the database password from the appropriate source.
        1. In development or test mode, parse it from the URL if present
        2. In production mode, read it from the mounted secrets file given by
           `password_file` or the environment variable named by `password_env_var`
        """
        if self.is_sqlite:
            return None

        if self.environment_mode in ("development", "test"):
            from sqlalchemy.engine import make_url

            return make_url(self.url).password

        if self.environment_mode != "production":
            raise ValueError(
                "Invalid environment_mode; must be 'development', 'production', or 'test'"
            )

        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError("Failed to read database password from file.") from e
        if self.password_env_var:
            password = os.getenv(self.password_env_var)
            if password:
                return password
            raise ValueError(f"Environment variable {self.password_env_var} not set")

        # Production URL may still carry its own password
        from sqlalchemy.engine import make_url

        return make_url(self.url).password

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string with password if provided."""
        if self.is_sqlite:
            return self.url

        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)

        if base_url.password and self.environment_mode == "production":
            logger.warning(
                "Database URL contains a password in production mode; "
                "consider using a secrets file or environment variable."
            )

        resolved_password = self.password
        if resolved_password and resolved_password != base_url.password:
            base_url = base_url.set(password=resolved_password)

        # render_as_string keeps the password; str() would mask it
        return base_url.render_as_string(hide_password=False)


class HealthConfig(BaseModel):
    """Probe time bounds."""

    readiness_timeout_seconds: float = Field(
        default=5.0, description="Store validity bound for the readiness probe"
    )
    startup_timeout_seconds: float = Field(
        default=10.0, description="Store validity bound for the startup probe"
    )


class SecurityConfig(BaseModel):
    """Authentication settings for the product API."""

    api_key_enabled: bool = Field(
        default=False, description="Require an API key on product endpoints"
    )
    api_key_header: str = Field(
        default="X-API-Key", description="Header carrying the API key"
    )
    api_keys: list[str] = Field(
        default_factory=list, description="Accepted API keys"
    )

    @field_validator("api_keys", mode="before")
    @classmethod
    def _split_keys(cls, value: object) -> object:
        """Accept a comma-separated string, as substituted from API_KEYS."""
        if value is None:
            return []
        if isinstance(value, list):
            return value
        return [key.strip() for key in str(value).split(",") if key.strip()]


class ApiConfig(BaseModel):
    """Product API paging limits."""

    prefix: str = Field(default="/api/v1", description="Versioned API prefix")
    default_page_size: int = Field(default=10, description="Page size when omitted")
    max_page_size: int = Field(default=100, description="Largest accepted page size")
    default_low_stock_threshold: int = Field(
        default=10, description="Threshold used when low-stock is called without one"
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    name: str = Field(default="product-inventory", description="Service name")
    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="0.0.0.0", description="Application host")
    port: int = Field(default=8080, description="Application port")
    expose_error_details: bool = Field(
        default=True,
        description="Echo store exception messages in 500 responses",
    )
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    health: HealthConfig = Field(
        default_factory=HealthConfig, description="Health probe configuration"
    )
    security: SecurityConfig = Field(
        default_factory=SecurityConfig, description="Security configuration"
    )
    api: ApiConfig = Field(
        default_factory=ApiConfig, description="Product API configuration"
    )
