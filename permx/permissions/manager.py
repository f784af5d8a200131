"""
Permx Permission Manager

Public surface of the permission engine: single and batch permission
checks with per-manager memoization, group state reads and writes, and
catalog listing.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Union
import logging

from ..catalog.modules import ModuleCatalog
from ..catalog.registry import PermissionRegistry
from ..identity import IdentityProvider
from ..persistence.base import OverrideStore
from ..schemas.permission import (
    BasePermission,
    PermissionDescriptor,
    PermissionRefs,
    PermissionState,
    Subject,
)
from .cache import AccessCache
from .resolver import StateResolver


logger = logging.getLogger(__name__)


class PermissionManager:
    """
    Verifies permissions of a subject against its groups.

    A manager owns its access cache, so one instance should serve one
    logical request. Use :meth:`for_subject` to derive a fresh instance
    that shares the store, catalog and identity provider.

    Usage:
        manager = PermissionManager(store, catalog, identity=ContextIdentityProvider())
        if await manager.can("content.create_post"):
            ...
        if await manager.can(["admin.manage_users", "admin.view_audit"], {"all": True}):
            ...

    Overrides written with :meth:`set_group_state` are not reflected by
    already cached results; call :meth:`clear` after mutating if the same
    manager must observe the change.
    """

    def __init__(
        self,
        store: OverrideStore,
        catalog: Optional[ModuleCatalog] = None,
        identity: Optional[IdentityProvider] = None,
        subject: Optional[Subject] = None,
        registry: Optional[PermissionRegistry] = None,
        caching_enabled: bool = True,
    ):
        self.store = store
        self.catalog = catalog if catalog is not None else ModuleCatalog()
        self.registry = registry if registry is not None else self.catalog.registry
        self.identity = identity
        self.subject = subject
        self.caching_enabled = caching_enabled

        self.resolver = StateResolver(store)
        self._access = AccessCache()
        self._permissions: Optional[List[BasePermission]] = None

    def for_subject(self, subject: Optional[Subject] = None) -> "PermissionManager":
        """
        Create a manager with an empty cache bound to another subject.

        The catalog is flattened once on this manager and the list is shared
        with every derived manager.
        """
        manager = PermissionManager(
            store=self.store,
            catalog=self.catalog,
            identity=self.identity,
            subject=subject,
            registry=self.registry,
            caching_enabled=self.caching_enabled,
        )
        manager._permissions = self.get_permissions()
        return manager

    # =========================================================================
    # Permission Checks
    # =========================================================================

    async def can(
        self,
        permission: PermissionRefs,
        params: Optional[Dict[str, Any]] = None,
        allow_caching: bool = True,
    ) -> bool:
        """
        Verify a permission or a list of permissions for the subject.

        With a list, ``params["all"]`` selects the combinator: by default
        one passing permission is enough, with ``all`` every permission has
        to pass. Both modes stop at the first element that decides the
        outcome. An empty list is never granted.

        Args:
            permission: Definition, BasePermission subclass, registered
                identifier, or a list of these
            params: Batch options, currently only ``all``
            allow_caching: Read and write the access cache

        Raises:
            ResolutionError: If a permission reference is unknown
        """
        params = params or {}

        if isinstance(permission, (list, tuple)):
            verify_all = bool(params.get("all", False))
            for current in permission:
                allowed = await self.can(current, params, allow_caching)
                if allowed and not verify_all:
                    return True
                if not allowed and verify_all:
                    return False
            # An exhausted ALL batch passed every element; an empty one did not.
            return verify_all and len(permission) > 0

        resolved = self.registry.resolve(permission)

        if not (allow_caching and self.caching_enabled):
            return await self.verify(resolved)

        key = resolved.key
        if key in self._access:
            logger.debug(f"Access cache hit for {key[0]}.{key[1]}")
            return self._access.get(key)

        allowed = await self.verify(resolved)
        self._access.set(key, allowed)
        return allowed

    async def verify(self, permission: BasePermission) -> bool:
        """Verify a single permission for the subject without caching."""
        subject = self.get_subject()
        if subject is None:
            logger.debug(f"No subject to verify {permission.module_id}.{permission.id}")
            return False

        state = await self.resolver.resolve_group_set(subject.groups, permission)
        return state == PermissionState.ALLOW

    def get_subject(self) -> Optional[Subject]:
        """Return the bound subject, else the identity provider's current subject."""
        if self.subject is not None:
            return self.subject
        if self.identity is not None:
            return self.identity.current_subject()
        return None

    def clear(self) -> None:
        """Clear the access cache."""
        self._access.clear()

    # =========================================================================
    # Group States
    # =========================================================================

    async def set_group_state(
        self,
        group_id: str,
        permission: BasePermission,
        state: Union[PermissionState, str, None],
    ) -> None:
        """Set or clear (empty state) a group override."""
        await self.store.set(group_id, permission, state)

    async def get_group_state(
        self,
        groups: Any,
        permission: BasePermission,
        use_default_fallback: bool = True,
    ) -> PermissionState:
        """
        Return the state of a permission for one group or a group set.

        A group id or an object with an ``id`` is a single group; any other
        iterable (list, tuple, set, generator) is a group set, where an
        ALLOW of any group wins; see :meth:`StateResolver.resolve_group_set`.
        """
        if isinstance(groups, str) or hasattr(groups, "id"):
            return await self.resolver.resolve_single_group(groups, permission, use_default_fallback)
        return await self.resolver.resolve_group_set(groups, permission, use_default_fallback)

    # =========================================================================
    # Catalog
    # =========================================================================

    def get_by_id(self, permission_id: str, module_id: str) -> Optional[BasePermission]:
        """Return a module's permission by id, or None if either is unknown."""
        for permission in self.catalog.permissions_of(module_id):
            if permission.has_id(permission_id):
                return permission
        return None

    def get_permissions(self) -> List[BasePermission]:
        """Return all permissions of all modules (built once)."""
        if self._permissions is None:
            self._permissions = self.catalog.build_permissions()
        return self._permissions

    def invalidate_permissions(self) -> None:
        """Drop the built permission list after the module set changed."""
        self._permissions = None

    async def describe_permissions(self, group_id: str) -> List[PermissionDescriptor]:
        """Describe every permission for a group, without default fallback."""
        descriptors = []
        for permission in self.get_permissions():
            state = await self.get_group_state(group_id, permission, False)
            descriptors.append(PermissionDescriptor.build(permission, group_id, state))
        return descriptors

    async def create_permission_array(self, group_id: str) -> List[Dict[str, Any]]:
        """Serializable permission records for a group's admin view."""
        return [d.to_dict() for d in await self.describe_permissions(group_id)]
