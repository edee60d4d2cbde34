"""Process-level settings read from environment variables and .env files.

These are the few primitive values needed before config.yaml can be
located and parsed. Everything else lives in ``ConfigData``.
"""

from __future__ import annotations

import os
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = Field(
        default="development", validation_alias="APP_ENVIRONMENT"
    )
    config_file: str = Field(default="config.yaml", validation_alias="APP_CONFIG_FILE")

    @property
    def override_prefix(self) -> str:
        """Prefix of variables promoted for the active environment."""
        return f"{self.environment.upper()}_"

    def environment_overrides(self) -> dict[str, str]:
        """Environment variables prefixed for the active environment, with the prefix removed."""
        prefix = self.override_prefix
        return {
            name[len(prefix):]: value
            for name, value in os.environ.items()
            if name.startswith(prefix) and len(name) > len(prefix)
        }
