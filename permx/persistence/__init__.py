"""Permx Persistence Module - Group override storage."""

from .base import OverrideStore
from .memory import InMemoryOverrideStore
from .sqlite import SQLiteOverrideStore

__all__ = [
    "OverrideStore",
    "InMemoryOverrideStore",
    "SQLiteOverrideStore",
    "get_override_store",
]


def get_override_store() -> OverrideStore:
    """
    Get the configured override store based on environment.

    Returns the appropriate store based on PERMX_STORE_BACKEND:
    - memory: In-memory (default for testing)
    - sqlite: SQLite file-based (default for production)
    - redis: Redis (for distributed deployments)
    """
    from ..config import get_config, StoreBackend

    config = get_config()

    if config.store.backend == StoreBackend.MEMORY:
        return InMemoryOverrideStore()
    elif config.store.backend == StoreBackend.SQLITE:
        return SQLiteOverrideStore(config.store.sqlite_path)
    elif config.store.backend == StoreBackend.REDIS:
        from .redis import RedisOverrideStore
        return RedisOverrideStore(
            url=config.store.redis_url,
            prefix=config.store.redis_prefix,
        )
    else:
        return InMemoryOverrideStore()
