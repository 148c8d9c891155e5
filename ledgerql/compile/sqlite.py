"""SQLite dialect compiler."""
from __future__ import annotations

from ledgerql.compile.base import SQLCompiler


class SQLiteCompiler(SQLCompiler):
    """Compiles descriptors to SQLite-flavoured parameterized SQL.

    Parameter style: ``?1, ?2, …`` – numbered positional parameters, bound
    from a sequence by Python's built-in ``sqlite3`` module.

    Note: SQLite does not support ``ILIKE``; it is mapped to ``LIKE``.
    SQLite's ``LIKE`` is case-insensitive for ASCII by default.
    """

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    def param_placeholder(self, index: int) -> str:
        return f"?{index}"

    def like_operator(self, op: str) -> str:
        return "LIKE"  # SQLite has no ILIKE; fall back to LIKE
