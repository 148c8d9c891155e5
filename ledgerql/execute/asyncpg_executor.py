"""PostgreSQL execution adapter backed by an ``asyncpg`` pool."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

import asyncpg

from ledgerql.config import get_settings
from ledgerql.errors import ConfigError
from ledgerql.execute.base import SQLExecutor

logger = logging.getLogger(__name__)


class AsyncpgExecutor(SQLExecutor):
    """Runs statements on a lazily created ``asyncpg`` pool.

    The pool is created on first use, so importing and constructing a
    client never touches the network.  A missing connection string raises
    :class:`~ledgerql.errors.ConfigError` at that point.

    Args:
        dsn: Connection string.  Defaults to ``Settings.database_url``.
        pool: An existing pool to use instead of creating one.
        min_size: Minimum pool size.
        max_size: Maximum pool size.
    """

    dialect = "postgres"

    def __init__(
        self,
        dsn: str | None = None,
        *,
        pool: asyncpg.Pool | None = None,
        min_size: int = 1,
        max_size: int = 10,
    ) -> None:
        self._dsn = dsn
        self._pool = pool
        self._min_size = min_size
        self._max_size = max_size
        self._lock: asyncio.Lock | None = None

    async def _get_pool(self) -> asyncpg.Pool:
        if self._pool is not None:
            return self._pool
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            if self._pool is None:
                dsn = self._dsn or get_settings().database_url
                if not dsn:
                    raise ConfigError(
                        "DATABASE_URL environment variable is not set",
                        setting="database_url",
                    )
                logger.info("Creating asyncpg pool (min=%d, max=%d)", self._min_size, self._max_size)
                self._pool = await asyncpg.create_pool(
                    dsn, min_size=self._min_size, max_size=self._max_size
                )
        return self._pool

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            records = await conn.fetch(sql, *params)
        return [dict(record) for record in records]

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
