"""PostgreSQL dialect compiler."""

from __future__ import annotations

from ledgerql.compile.base import SQLCompiler


class PostgresCompiler(SQLCompiler):
    """Compiles descriptors to PostgreSQL-flavoured parameterized SQL.

    Parameter style: ``$1, $2, …`` – the native positional style of
    ``asyncpg`` and of the PostgreSQL wire protocol.
    """

    @property
    def dialect_name(self) -> str:
        return "postgres"

    def param_placeholder(self, index: int) -> str:
        return f"${index}"

    def like_operator(self, op: str) -> str:
        return op  # 'LIKE' or 'ILIKE' - PostgreSQL supports both natively
