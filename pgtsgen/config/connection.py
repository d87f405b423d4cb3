"""Connection configuration management."""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

ENV_PREFIX = 'DB'
CONFIG_DIR_NAME = '.pgtsgen'
CONFIG_FILE_NAME = 'postgres.yaml'
REQUIRED_FIELDS = ('host', 'user', 'password', 'database')


class ConnectionConfigError(ValueError):
    """Raised when connection configuration loading fails."""


class ConnectionConfig(BaseModel):
    """Validated PostgreSQL connection settings."""

    host: str = Field(min_length=1)
    port: int = 5432
    user: str = Field(min_length=1)
    password: str = Field(min_length=1)
    database: str = Field(min_length=1)

    @field_validator('port')
    @classmethod
    def _port_in_range(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise ValueError('port must be between 1 and 65535')
        return value


def default_config_path() -> Path:
    """Location of the per-user connection file."""
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_connection_config(conn_file: Optional[str] = None) -> Dict[str, Any]:
    """Load PostgreSQL connection configuration.

    Loads configuration with the following priority:
    1. Explicit --conn-file path (highest priority)
    2. ~/.pgtsgen/postgres.yaml
    3. DB_* environment variables
    4. Defaults

    Args:
        conn_file: Optional explicit connection file path

    Returns:
        Dictionary with connection configuration

    Raises:
        ConnectionConfigError: If configuration file is invalid
    """
    if conn_file:
        config = _load_yaml_config(conn_file)
        logger.info("Loaded connection config from: %s", conn_file)
        return config

    default_path = default_config_path()
    if default_path.exists():
        config = _load_yaml_config(str(default_path))
        logger.info("Loaded connection config from: %s", default_path)
        return config

    env_config = _load_from_env()
    if env_config:
        logger.info("Loaded connection config from environment variables")
        return {**_get_defaults(), **env_config}

    logger.warning("No connection config found. Using defaults.")
    return _get_defaults()


def _load_yaml_config(file_path: str) -> Dict[str, Any]:
    """Load YAML configuration file.

    Raises:
        ConnectionConfigError: If file is invalid or missing
    """
    try:
        if not os.path.exists(file_path):
            raise ConnectionConfigError(f"Configuration file not found: {file_path}")

        with open(file_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)

        if not isinstance(config, dict):
            raise ConnectionConfigError(
                f"Configuration file must contain a YAML dictionary: {file_path}"
            )

        return config

    except yaml.YAMLError as e:
        raise ConnectionConfigError(
            f"Invalid YAML configuration: {file_path}\n{e}"
        ) from e
    except OSError as e:
        raise ConnectionConfigError(
            f"Error reading configuration file: {file_path}\n{e}"
        ) from e


def _load_from_env() -> Optional[Dict[str, Any]]:
    """Load configuration from DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_DATABASE."""
    config = {}

    for param in ('HOST', 'PORT', 'USER', 'PASSWORD', 'DATABASE'):
        value = os.getenv(f"{ENV_PREFIX}_{param}")
        if value:
            config[param.lower()] = value

    return config if config else None


def _get_defaults() -> Dict[str, Any]:
    return {
        'host': 'localhost',
        'port': 5432,
        'user': 'postgres',
        'password': '',
        'database': '',
    }


def validate_connection_config(config: Dict[str, Any]) -> ConnectionConfig:
    """Validate that required connection parameters are present.

    Args:
        config: Configuration dictionary

    Returns:
        ConnectionConfig built from the dictionary

    Raises:
        ConnectionConfigError: If required parameters are missing or invalid
    """
    missing_fields = [f for f in REQUIRED_FIELDS if f not in config or not config[f]]

    if missing_fields:
        raise ConnectionConfigError(
            f"Missing required connection parameters: {', '.join(missing_fields)}. "
            f"Provide via --conn-file, ~/{CONFIG_DIR_NAME}/{CONFIG_FILE_NAME} "
            f"or {ENV_PREFIX}_* environment variables"
        )

    try:
        known = {k: v for k, v in config.items() if k in ConnectionConfig.model_fields}
        return ConnectionConfig(**known)
    except ValidationError as e:
        issues = "\n".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConnectionConfigError(
            f"Database configuration validation failed:\n{issues}"
        ) from e
