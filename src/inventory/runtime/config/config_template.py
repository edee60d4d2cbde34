"""Configuration template substitution utilities."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic import ValidationError

from src.inventory.runtime.config.config_data import ConfigData
from src.inventory.runtime.settings import EnvironmentVariables

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variable placeholders in text.

    Supports formats:
    - ${VAR_NAME} - required variable (raises error if missing)
    - ${VAR_NAME:-default} - optional with default value
    - ${VAR_NAME:?error_message} - required with custom error message
    """

    def replacer(match: re.Match[str]) -> str:
        var_expr = match.group(1)

        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)

        if ":?" in var_expr:
            var_name, error_msg = var_expr.split(":?", 1)
            value = os.getenv(var_name)
            if value is None:
                raise ValueError(f"Required environment variable {var_name}: {error_msg}")
            return value

        value = os.getenv(var_expr)
        if value is None:
            raise ValueError(f"Required environment variable {var_expr} not set")
        return value

    return _PLACEHOLDER.sub(replacer, text)


def parse_config_text(content: str) -> ConfigData:
    """Substitute placeholders in raw YAML text and validate it as ConfigData."""
    substituted_content = substitute_env_vars(content)

    try:
        loaded = yaml.safe_load(substituted_content)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e

    if not loaded:
        raise ValueError("Failed to parse YAML")

    try:
        return ConfigData(**loaded.get("config", {}))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e


def load_templated_yaml(file_path: Path, env: EnvironmentVariables | None = None) -> ConfigData:
    """
    Load a YAML file with environment variable substitution.

    Variables prefixed with the active environment name (e.g. ``PRODUCTION_DATABASE_URL``)
    are promoted to their unprefixed names before substitution.

    Args:
        file_path: Path to the YAML file
        env: Process settings; read from the environment when omitted

    Returns:
        Parsed and validated configuration

    Raises:
        ValueError: If required environment variables are missing or the YAML is invalid
        FileNotFoundError: If the YAML file doesn't exist
    """
    env = env or EnvironmentVariables()
    logger.info("Loading configuration for environment: {}", env.environment)

    with open(file_path) as f:
        content = f.read()

    overrides = env.environment_overrides()
    if overrides:
        logger.info("Applying environment-specific overrides: {}", sorted(overrides))
    for var_name, var_value in overrides.items():
        os.environ[var_name] = var_value

    config = parse_config_text(content)
    config.app.environment = env.environment
    config.database.environment_mode = env.environment
    return config


def load_config(env: EnvironmentVariables | None = None) -> ConfigData:
    """Load the configuration file named by ``APP_CONFIG_FILE``, or defaults when absent."""
    env = env or EnvironmentVariables()
    path = Path(env.config_file)
    if not path.exists():
        logger.warning("Configuration file {} not found; using defaults", path)
        config = ConfigData()
        config.app.environment = env.environment
        config.database.environment_mode = env.environment
        return config
    return load_templated_yaml(path, env)
