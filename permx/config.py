"""
Permx Configuration Module

Centralized configuration from environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum


class StoreBackend(str, Enum):
    """Supported override store backends."""
    MEMORY = "memory"
    SQLITE = "sqlite"
    REDIS = "redis"


@dataclass
class StoreConfig:
    """Override store configuration."""
    backend: StoreBackend = StoreBackend.SQLITE
    sqlite_path: str = "./permx_permissions.db"
    redis_url: Optional[str] = None
    redis_prefix: str = "permx:"


@dataclass
class PermxConfig:
    """Main configuration container."""
    store: StoreConfig
    allow_caching: bool = True
    modules: List[str] = field(default_factory=list)
    debug: bool = False
    log_level: str = "INFO"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def load_config() -> PermxConfig:
    """
    Load configuration from environment variables.

    Environment Variables:
        PERMX_STORE_BACKEND: Override store backend (memory|sqlite|redis)
        PERMX_SQLITE_PATH: SQLite database path (default: ./permx_permissions.db)
        PERMX_REDIS_URL: Redis URL (e.g., redis://localhost:6379/0)
        PERMX_REDIS_PREFIX: Redis key prefix (default: permx:)
        PERMX_ALLOW_CACHING: Memoize permission checks per manager (default: true)
        PERMX_MODULES: Comma-separated import paths of permission modules
            (e.g., myapp.permissions:ContentModule)
        PERMX_DEBUG: Enable debug mode (default: false)
        PERMX_LOG_LEVEL: Log level (default: INFO)
    """
    backend_str = os.getenv("PERMX_STORE_BACKEND", "sqlite").lower()
    try:
        backend = StoreBackend(backend_str)
    except ValueError:
        backend = StoreBackend.SQLITE

    store = StoreConfig(
        backend=backend,
        sqlite_path=os.getenv("PERMX_SQLITE_PATH", "./permx_permissions.db"),
        redis_url=os.getenv("PERMX_REDIS_URL"),
        redis_prefix=os.getenv("PERMX_REDIS_PREFIX", "permx:"),
    )

    return PermxConfig(
        store=store,
        allow_caching=_env_flag("PERMX_ALLOW_CACHING", "true"),
        modules=[m.strip() for m in os.getenv("PERMX_MODULES", "").split(",") if m.strip()],
        debug=_env_flag("PERMX_DEBUG", "false"),
        log_level=os.getenv("PERMX_LOG_LEVEL", "INFO").upper(),
    )


# Singleton config instance
_config: Optional[PermxConfig] = None


def get_config() -> PermxConfig:
    """Get the global configuration (lazy-loaded singleton)."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset configuration (useful for testing)."""
    global _config
    _config = None
