"""
SQLite Override Store

File-based persistent storage for group permission overrides.
"""

import sqlite3
import asyncio
from contextlib import closing, contextmanager
from typing import Callable, Iterator, List, Optional, TypeVar
from datetime import datetime, timezone
from pathlib import Path

from .base import OverrideStore
from ..exceptions import OverrideStoreError
from ..schemas.permission import GroupOverride, PermissionState


T = TypeVar("T")


class SQLiteOverrideStore(OverrideStore):
    """
    SQLite-backed override store.

    Features:
    - File-based persistence (survives server restarts)
    - Automatic table creation
    - One row per (group, module, permission) enforced by the primary key
    - Blocking calls run in the default executor

    Use for:
    - Single-server production deployments
    - Development with persistence
    """

    CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS group_permissions (
        group_id TEXT NOT NULL,
        module_id TEXT NOT NULL,
        permission_id TEXT NOT NULL,
        class TEXT,
        state TEXT NOT NULL CHECK (state IN ('allow', 'deny')),
        created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
        updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
        PRIMARY KEY (group_id, module_id, permission_id)
    );

    CREATE INDEX IF NOT EXISTS idx_group_permissions_group ON group_permissions(group_id);
    """

    def __init__(self, db_path: str = "./permx_permissions.db"):
        self.db_path = db_path
        self._ensure_db()

    def _ensure_db(self) -> None:
        """Ensure database and tables exist."""
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        try:
            with closing(sqlite3.connect(self.db_path)) as conn:
                conn.executescript(self.CREATE_TABLE_SQL)
        except sqlite3.Error as e:
            raise OverrideStoreError(f"Cannot initialize {self.db_path}: {e}") from e

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Open a connection for one transaction and close it afterwards."""
        with closing(self._get_connection()) as conn:
            with conn:
                yield conn

    async def _run(self, fn: Callable[[], T]) -> T:
        """Run a blocking call in the executor, wrapping driver errors."""
        def _call():
            try:
                return fn()
            except sqlite3.Error as e:
                raise OverrideStoreError(f"SQLite override store error: {e}") from e

        return await asyncio.get_running_loop().run_in_executor(None, _call)

    async def get(
        self,
        group_id: str,
        module_id: str,
        permission_id: str,
    ) -> Optional[GroupOverride]:
        """Get the override for a (group, permission) pair."""
        def _get():
            with self._connection() as conn:
                row = conn.execute(
                    "SELECT * FROM group_permissions "
                    "WHERE group_id = ? AND module_id = ? AND permission_id = ?",
                    (group_id, module_id, permission_id)
                ).fetchone()
                return self._row_to_override(row) if row else None

        return await self._run(_get)

    async def save(self, override: GroupOverride) -> None:
        """Insert or replace an override row."""
        def _save():
            with self._connection() as conn:
                conn.execute("""
                    INSERT INTO group_permissions
                    (group_id, module_id, permission_id, class, state, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    ON CONFLICT (group_id, module_id, permission_id)
                    DO UPDATE SET class = excluded.class,
                                  state = excluded.state,
                                  updated_at = excluded.updated_at
                """, (
                    override.group_id,
                    override.module_id,
                    override.permission_id,
                    override.permission_class,
                    override.state.value,
                    datetime.now(timezone.utc).isoformat(),
                ))

        await self._run(_save)

    async def delete(self, group_id: str, module_id: str, permission_id: str) -> bool:
        """Delete an override."""
        def _delete():
            with self._connection() as conn:
                cursor = conn.execute(
                    "DELETE FROM group_permissions "
                    "WHERE group_id = ? AND module_id = ? AND permission_id = ?",
                    (group_id, module_id, permission_id)
                )
                return cursor.rowcount > 0

        return await self._run(_delete)

    async def list_for_group(self, group_id: str) -> List[GroupOverride]:
        """List all overrides of a group."""
        def _list():
            with self._connection() as conn:
                rows = conn.execute(
                    "SELECT * FROM group_permissions WHERE group_id = ? "
                    "ORDER BY module_id, permission_id",
                    (group_id,)
                ).fetchall()
                return [self._row_to_override(row) for row in rows]

        return await self._run(_list)

    def _row_to_override(self, row: sqlite3.Row) -> GroupOverride:
        """Convert a database row to a GroupOverride."""
        return GroupOverride(
            group_id=row["group_id"],
            module_id=row["module_id"],
            permission_id=row["permission_id"],
            state=PermissionState(row["state"]),
            permission_class=row["class"],
        )
