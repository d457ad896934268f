"""Application configuration loader.

Loads configuration from data/config/registrar_v1.yaml (or the file named by
REGISTRAR_CONFIG) with fallback to built-in defaults.

Usage:
    from registrar.config.app_config import load_app_config

    config = load_app_config()
    config.database.path
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/registrar_v1.yaml")

CONFIG_ENV = "REGISTRAR_CONFIG"
DB_PATH_ENV = "REGISTRAR_DB_PATH"

SEED_VARIANTS = ("full", "short")


@dataclass
class DatabaseConfig:
    """Connection settings for the embedded store."""

    path: str = ":memory:"
    foreign_keys: bool = True


@dataclass
class SeedConfig:
    """Which sample dataset to load at startup."""

    variant: str = "full"
    skip_existing: bool = True


@dataclass
class PaginationConfig:
    """Accepted page size bounds (inclusive)."""

    min_page_size: int = 1
    max_page_size: int = 5


@dataclass
class AppConfig:
    """Application-wide configuration."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    seed: SeedConfig = field(default_factory=SeedConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    log_level: str = "warning"


class ConfigError(Exception):
    """Configuration file has invalid values."""

    pass


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "database": {
            "path": ":memory:",
            "foreign_keys": True,
        },
        "seed": {
            "variant": "full",
            "skip_existing": True,
        },
        "pagination": {
            "min_page_size": 1,
            "max_page_size": 5,
        },
        "logging": {
            "level": "warning",
        },
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    db_data = {**defaults["database"], **(data.get("database") or {})}
    database = DatabaseConfig(
        path=str(db_data["path"]),
        foreign_keys=bool(db_data["foreign_keys"]),
    )

    seed_data = {**defaults["seed"], **(data.get("seed") or {})}
    variant = str(seed_data["variant"]).lower()
    if variant not in SEED_VARIANTS:
        raise ConfigError(
            f"Unknown seed variant '{variant}' (expected one of: {', '.join(SEED_VARIANTS)})"
        )
    seed = SeedConfig(variant=variant, skip_existing=bool(seed_data["skip_existing"]))

    page_data = {**defaults["pagination"], **(data.get("pagination") or {})}
    pagination = PaginationConfig(
        min_page_size=int(page_data["min_page_size"]),
        max_page_size=int(page_data["max_page_size"]),
    )
    if pagination.min_page_size < 1 or pagination.min_page_size > pagination.max_page_size:
        raise ConfigError(
            f"Invalid page size bounds [{pagination.min_page_size},{pagination.max_page_size}]"
        )

    log_data = {**defaults["logging"], **(data.get("logging") or {})}

    return AppConfig(
        database=database,
        seed=seed,
        pagination=pagination,
        log_level=str(log_data["level"]).lower(),
    )


def _resolve_config_path(config_path: Path | None) -> Path | None:
    """Pick the config file to read, or None to use defaults."""
    if config_path is not None:
        return config_path

    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path)

    if CONFIG_FILE.exists():
        return CONFIG_FILE

    return None


def load_app_config(
    config_path: Path | None = None,
    force_reload: bool = False,
) -> AppConfig:
    """Load application config.

    Args:
        config_path: Explicit YAML file. Overrides REGISTRAR_CONFIG and the
            default location.
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.

    Raises:
        ConfigError: If the file is missing or holds invalid values.
    """
    global _cached_config

    if _cached_config is not None and not force_reload and config_path is None:
        return _cached_config

    path = _resolve_config_path(config_path)

    data: dict[str, Any]
    if path is None:
        logger.debug("using_default_config")
        data = _get_defaults()
    elif not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    else:
        logger.debug("loading_app_config", source=str(path))
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    config = _parse_config(data)

    db_override = os.environ.get(DB_PATH_ENV)
    if db_override:
        config.database.path = db_override

    _cached_config = config
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
