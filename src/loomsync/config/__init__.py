"""Application configuration helpers."""

from __future__ import annotations

from .collector import CollectorConfig, get_collector_config, parse_kinds
from .docker import DockerConfig, DockerHost, get_docker_config, parse_docker_hosts
from .env import env_float, env_int, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CollectorConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "DockerConfig",
    "DockerHost",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "env_float",
    "env_int",
    "get_collector_config",
    "get_database_config",
    "get_docker_config",
    "get_storage_config",
    "optional_env_var",
    "parse_docker_hosts",
    "parse_kinds",
    "require_env_vars",
]
