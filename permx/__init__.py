"""
Permx - Group Permission Resolution Engine

Permx decides whether a subject may use a capability by combining:
- Per-group overrides persisted in an override store
- The default state each permission definition declares

A subject belonging to any group that allows a permission is granted it.
Checks are memoized per manager instance, one manager per request.

Permx does NOT:
- Authenticate users or manage sessions
- Render permission matrices
- Serve remote permission checks
"""

__version__ = "0.1.0"

from .exceptions import PermxError, ResolutionError, OverrideStoreError
from .schemas.permission import (
    BasePermission,
    PermissionState,
    GroupOverride,
    Group,
    Subject,
    PermissionDescriptor,
)
from .catalog import PermissionModule, ModuleCatalog, PermissionRegistry
from .identity import IdentityProvider, StaticIdentityProvider, ContextIdentityProvider
from .persistence import OverrideStore, InMemoryOverrideStore, SQLiteOverrideStore
from .permissions import PermissionManager, StateResolver, AccessCache

__all__ = [
    # Errors
    "PermxError",
    "ResolutionError",
    "OverrideStoreError",
    # Schemas
    "BasePermission",
    "PermissionState",
    "GroupOverride",
    "Group",
    "Subject",
    "PermissionDescriptor",
    # Catalog
    "PermissionModule",
    "ModuleCatalog",
    "PermissionRegistry",
    # Identity
    "IdentityProvider",
    "StaticIdentityProvider",
    "ContextIdentityProvider",
    # Persistence
    "OverrideStore",
    "InMemoryOverrideStore",
    "SQLiteOverrideStore",
    # Engine
    "PermissionManager",
    "StateResolver",
    "AccessCache",
]
