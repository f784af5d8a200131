"""
In-Memory Override Store

Fast, non-persistent storage for testing and development.
"""

from typing import Dict, List, Optional, Tuple

from .base import OverrideStore
from ..schemas.permission import GroupOverride


class InMemoryOverrideStore(OverrideStore):
    """
    In-memory override store (no persistence).

    Use for:
    - Unit testing
    - Development
    - Single-process deployments with seeded overrides

    WARNING: All data is lost on server restart.
    """

    def __init__(self):
        self._overrides: Dict[Tuple[str, str, str], GroupOverride] = {}

    async def get(
        self,
        group_id: str,
        module_id: str,
        permission_id: str,
    ) -> Optional[GroupOverride]:
        """Get the override for a (group, permission) pair."""
        return self._overrides.get((group_id, module_id, permission_id))

    async def save(self, override: GroupOverride) -> None:
        """Insert or replace an override row."""
        self._overrides[override.key] = override

    async def delete(self, group_id: str, module_id: str, permission_id: str) -> bool:
        """Delete an override."""
        return self._overrides.pop((group_id, module_id, permission_id), None) is not None

    async def list_for_group(self, group_id: str) -> List[GroupOverride]:
        """List all overrides of a group."""
        return [o for o in self._overrides.values() if o.group_id == group_id]

    def __len__(self) -> int:
        return len(self._overrides)

    def clear(self) -> None:
        """Clear all overrides (for testing)."""
        self._overrides.clear()
