"""
OverrideStore Base Interface

Abstract interface for group permission override persistence.
One row per (group, module, permission); a missing row means the group
inherits the permission's default state.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Union
import logging

from ..schemas.permission import BasePermission, GroupOverride, PermissionState


logger = logging.getLogger(__name__)


class OverrideStore(ABC):
    """
    Abstract interface for group override persistence.

    Implementations:
    - InMemoryOverrideStore: For testing (no persistence)
    - SQLiteOverrideStore: File-based persistence (default)
    - RedisOverrideStore: Distributed persistence (production)

    Writes must be atomic per row. No cross-row transaction is required.
    """

    @abstractmethod
    async def get(
        self,
        group_id: str,
        module_id: str,
        permission_id: str,
    ) -> Optional[GroupOverride]:
        """Get the override for a (group, permission) pair."""
        pass

    @abstractmethod
    async def save(self, override: GroupOverride) -> None:
        """Insert or replace an override row."""
        pass

    @abstractmethod
    async def delete(self, group_id: str, module_id: str, permission_id: str) -> bool:
        """Delete an override. Returns True if a row was deleted."""
        pass

    @abstractmethod
    async def list_for_group(self, group_id: str) -> List[GroupOverride]:
        """List all overrides of a group."""
        pass

    async def set(
        self,
        group_id: str,
        permission: BasePermission,
        state: Union[PermissionState, str, None],
    ) -> None:
        """
        Set the state of a permission for a group.

        An empty state (None, "" or DEFAULT) removes the override instead of
        persisting it; the default is never stored.

        Raises:
            ValueError: If state is not a known permission state
        """
        state = PermissionState.normalize(state)

        if state == PermissionState.DEFAULT:
            deleted = await self.delete(group_id, permission.module_id, permission.id)
            if deleted:
                logger.info(f"Cleared {permission.module_id}.{permission.id} override for group {group_id}")
            return

        await self.save(GroupOverride(
            group_id=group_id,
            module_id=permission.module_id,
            permission_id=permission.id,
            state=state,
            permission_class=permission.class_name,
        ))
        logger.info(f"Set {permission.module_id}.{permission.id} to {state.value} for group {group_id}")
