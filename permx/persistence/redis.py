"""
Redis Override Store

Distributed persistent storage for group permission overrides.
For multi-server deployments.
"""

from typing import Any, List, Optional
import json
import logging

from redis.exceptions import RedisError

from .base import OverrideStore
from ..exceptions import OverrideStoreError
from ..schemas.permission import GroupOverride

logger = logging.getLogger(__name__)


class RedisOverrideStore(OverrideStore):
    """
    Redis-backed override store.

    Layout: one hash per group (``<prefix>group:<group_id>``) with one field
    per permission (JSON array ``["<module_id>", "<permission_id>"]``). HSET/HDEL give the
    row-level atomicity the store contract requires.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        prefix: str = "permx:",
        client: Any = None,
    ):
        self.prefix = prefix
        self._redis = client
        self._url = url or "redis://localhost:6379/0"

    def _get_redis(self):
        """Lazy-load Redis connection."""
        if self._redis is None:
            import redis.asyncio as redis
            self._redis = redis.from_url(self._url)
        return self._redis

    def _key(self, group_id: str) -> str:
        """Generate Redis key for a group's overrides."""
        return f"{self.prefix}group:{group_id}"

    @staticmethod
    def _field(module_id: str, permission_id: str) -> str:
        """Hash field of a permission; JSON keeps ids containing separators apart."""
        return json.dumps([module_id, permission_id])

    async def get(
        self,
        group_id: str,
        module_id: str,
        permission_id: str,
    ) -> Optional[GroupOverride]:
        """Get the override for a (group, permission) pair."""
        redis = self._get_redis()
        try:
            data = await redis.hget(self._key(group_id), self._field(module_id, permission_id))
        except RedisError as e:
            raise OverrideStoreError(f"Redis override store error: {e}") from e

        if not data:
            return None

        override = GroupOverride.from_dict(json.loads(data))
        if (override.module_id, override.permission_id) != (module_id, permission_id):
            logger.warning(
                f"Ignoring override stored for {override.module_id}.{override.permission_id} "
                f"under {module_id}.{permission_id} in group {group_id}"
            )
            return None
        return override

    async def save(self, override: GroupOverride) -> None:
        """Insert or replace an override row."""
        redis = self._get_redis()
        try:
            await redis.hset(
                self._key(override.group_id),
                self._field(override.module_id, override.permission_id),
                json.dumps(override.to_dict()),
            )
        except RedisError as e:
            raise OverrideStoreError(f"Redis override store error: {e}") from e

    async def delete(self, group_id: str, module_id: str, permission_id: str) -> bool:
        """Delete an override."""
        redis = self._get_redis()
        try:
            result = await redis.hdel(self._key(group_id), self._field(module_id, permission_id))
        except RedisError as e:
            raise OverrideStoreError(f"Redis override store error: {e}") from e
        return result > 0

    async def list_for_group(self, group_id: str) -> List[GroupOverride]:
        """List all overrides of a group."""
        redis = self._get_redis()
        try:
            rows = await redis.hgetall(self._key(group_id))
        except RedisError as e:
            raise OverrideStoreError(f"Redis override store error: {e}") from e

        overrides = []
        for field_name in sorted(rows):
            data = rows[field_name]
            if isinstance(data, bytes):
                data = data.decode()
            overrides.append(GroupOverride.from_dict(json.loads(data)))
        return overrides
