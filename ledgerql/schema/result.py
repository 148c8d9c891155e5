"""The result envelope returned by every awaited builder."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class QueryResult:
    """Uniform ``{data, error, count}`` envelope.

    Exactly one of ``data`` / ``error`` is meaningful: ``data`` is ``None``
    when ``error`` is set, and ``error`` is ``None`` on success.

    Attributes:
        data: A list of rows, a single row, or ``None``.
        error: The failure, wrapped as a LedgerQL error.
        count: Row count; only set when ``count="exact"`` was requested.
    """

    data: Any = None
    error: Exception | None = None
    count: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> QueryResult:
        """Raise ``error`` if set, otherwise return ``self`` for chaining."""
        if self.error is not None:
            raise self.error
        return self
