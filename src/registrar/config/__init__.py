"""Configuration package for registrar."""

from registrar.config.app_config import (
    AppConfig,
    ConfigError,
    DatabaseConfig,
    PaginationConfig,
    SeedConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "ConfigError",
    "DatabaseConfig",
    "PaginationConfig",
    "SeedConfig",
    "clear_config_cache",
    "load_app_config",
]
