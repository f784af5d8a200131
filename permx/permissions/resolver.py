"""
Permx State Resolver

Resolves the effective state of a permission for one group or an ordered
group set, combining persisted overrides with the definition's default.
"""

from __future__ import annotations
from typing import Any, Iterable
import logging

from ..persistence.base import OverrideStore
from ..schemas.permission import BasePermission, PermissionState, group_id_of


logger = logging.getLogger(__name__)


class StateResolver:
    """Combines group overrides and permission defaults."""

    def __init__(self, store: OverrideStore):
        self.store = store

    async def resolve_single_group(
        self,
        group: Any,
        permission: BasePermission,
        use_default_fallback: bool = True,
    ) -> PermissionState:
        """
        Resolve the state of a permission for one group.

        Args:
            group: Group id or an object with an ``id`` attribute
            permission: The permission definition
            use_default_fallback: Return the definition's default when no
                override exists; otherwise return DEFAULT

        Returns:
            The stored override state, the default state, or DEFAULT
        """
        group_id = group_id_of(group)

        override = await self.store.get(group_id, permission.module_id, permission.id)
        if override is not None:
            return override.state

        if use_default_fallback:
            return permission.get_default_state(group_id)

        return PermissionState.DEFAULT

    async def resolve_group_set(
        self,
        groups: Iterable[Any],
        permission: BasePermission,
        use_default_fallback: bool = True,
    ) -> PermissionState:
        """
        Resolve the state of a permission for an ordered group set.

        Membership is additive: the first group resolving to ALLOW wins and
        the remaining groups are not evaluated. Without an ALLOW the state
        of the last evaluated group is returned. An empty set is DEFAULT.
        """
        state = PermissionState.DEFAULT
        for group in groups:
            state = await self.resolve_single_group(group, permission, use_default_fallback)
            if state == PermissionState.ALLOW:
                logger.debug(f"Group {group_id_of(group)} allows {permission.module_id}.{permission.id}")
                return state
        return state
