"""Permx Access Cache - per-manager memo of single permission results."""

from typing import Dict, Optional, Tuple


CacheKey = Tuple[str, str]


class AccessCache:
    """
    Memo of permission check results keyed by the definition identity key.

    Entries never expire; the owning manager is scoped to one request and
    :meth:`clear` invalidates everything at once.
    """

    def __init__(self):
        self._access: Dict[CacheKey, bool] = {}

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._access

    def __len__(self) -> int:
        return len(self._access)

    def get(self, key: CacheKey) -> Optional[bool]:
        return self._access.get(key)

    def set(self, key: CacheKey, allowed: bool) -> None:
        self._access[key] = allowed

    def clear(self) -> None:
        self._access.clear()
