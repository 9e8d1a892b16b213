"""Application configuration helpers."""

from __future__ import annotations

from .env import env_float, env_int
from .errors import ConfigurationError
from .health import HealthConfig, get_health_config
from .logging import configure_logging
from .matching import MatchingConfig, get_matching_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "HealthConfig",
    "MatchingConfig",
    "StorageConfig",
    "configure_logging",
    "env_float",
    "env_int",
    "get_database_config",
    "get_health_config",
    "get_matching_config",
    "get_storage_config",
]
