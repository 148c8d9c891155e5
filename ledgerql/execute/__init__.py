"""LedgerQL execution adapters."""
from ledgerql.execute.asyncpg_executor import AsyncpgExecutor
from ledgerql.execute.base import SQLExecutor
from ledgerql.execute.sqlite_executor import SQLiteExecutor

__all__ = ["AsyncpgExecutor", "SQLExecutor", "SQLiteExecutor"]
