"""SQLite execution adapter for local development and tests."""
from __future__ import annotations

import asyncio
import sqlite3
import threading
from collections.abc import Sequence
from typing import Any

from ledgerql.execute.base import SQLExecutor


class SQLiteExecutor(SQLExecutor):
    """Runs statements on one ``sqlite3`` connection in a worker thread.

    Each statement is committed immediately.  Requires SQLite 3.35+ for
    ``RETURNING``.

    Args:
        database: Path or ``":memory:"``.
        connection: An existing connection to use instead.
    """

    dialect = "sqlite"

    def __init__(self, database: str = ":memory:", *, connection: sqlite3.Connection | None = None) -> None:
        self._conn = connection or sqlite3.connect(database, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()

    def executescript(self, script: str) -> None:
        """Run a multi-statement script (DDL, seed data) synchronously."""
        with self._lock:
            self._conn.executescript(script)

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self._execute_sync, sql, list(params))

    def _execute_sync(self, sql: str, params: list[Any]) -> list[dict[str, Any]]:
        with self._lock:
            try:
                cursor = self._conn.execute(sql, params)
                rows = [dict(row) for row in cursor.fetchall()]
                self._conn.commit()
            except sqlite3.Error:
                self._conn.rollback()
                raise
        return rows

    async def close(self) -> None:
        self._conn.close()
