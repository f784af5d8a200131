"""Permx Permissions Module - Group permission resolution and checks."""

from .cache import AccessCache
from .manager import PermissionManager
from .resolver import StateResolver

__all__ = [
    "AccessCache",
    "PermissionManager",
    "StateResolver",
]
