"""SQL execution adapter interface."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any


class SQLExecutor(ABC):
    """Owns a database connection (or pool) and runs one statement at a time.

    Executors know nothing about query construction: they receive finished
    SQL with positional placeholders and return rows as plain dicts.
    """

    #: Dialect the executor speaks; picks the SQL compiler when none is given.
    dialect: str | None = None

    @abstractmethod
    async def execute(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Execute ``sql`` with ``params`` and return the result rows.

        Statements without a result set (e.g. ``DELETE`` with no
        ``RETURNING``) return an empty list.
        """

    async def close(self) -> None:
        """Release the underlying connection or pool."""
