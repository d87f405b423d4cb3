"""Configuration management."""
from pgtsgen.config.connection import (
    ConnectionConfig,
    ConnectionConfigError,
    load_connection_config,
    validate_connection_config,
)

__all__ = [
    'ConnectionConfig',
    'ConnectionConfigError',
    'load_connection_config',
    'validate_connection_config',
]
