"""LedgerQL – Supabase-style fluent queries over PostgreSQL or internal REST routes.

Public API
----------
``create_client``
    Server-side client: compiles queries to parameterized SQL and runs them
    on an asyncpg pool (or any :class:`~ledgerql.execute.base.SQLExecutor`).

``create_http_client``
    Client-side client: compiles the same queries to ``/api/<table>``
    requests scoped to the signed-in user's ``user_id``.

Both return a client whose ``from_(table)`` starts an awaitable builder::

    client = ledgerql.create_client()
    result = await client.from_("invoices").select().eq("status", "sent")
    if result.error:
        ...

Extensibility
-------------
New SQL dialects can be registered via::

    from ledgerql.compile.registry import CompilerFactory

    @CompilerFactory.register("cockroach")
    class CockroachCompiler(PostgresCompiler):
        ...
"""

from __future__ import annotations

import logging

from ledgerql.client import (
    Client,
    DeleteQueryBuilder,
    HTTPClient,
    QueryBuilder,
    SingleQueryBuilder,
    SQLClient,
    UpsertQueryBuilder,
    create_client,
    create_http_client,
)
from ledgerql.compile.base import CompiledSQL, SQLCompiler
from ledgerql.compile.builder import StatementBuilder
from ledgerql.compile.http import HttpCompiler, HttpRequest
from ledgerql.compile.postgres import PostgresCompiler
from ledgerql.compile.registry import CompilerFactory
from ledgerql.compile.sqlite import SQLiteCompiler
from ledgerql.config import Settings, configure_logging, get_settings
from ledgerql.errors import (
    BackendError,
    CompilationError,
    ConfigError,
    InvalidFilterError,
    LedgerQLError,
    MissingSessionError,
    QueryStateError,
)
from ledgerql.execute import AsyncpgExecutor, SQLExecutor, SQLiteExecutor
from ledgerql.schema import (
    Condition,
    FilterOp,
    QueryDescriptor,
    QueryResult,
    Session,
    static_session,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

# ---------------------------------------------------------------------------
# Register built-in compilers with CompilerFactory
# ---------------------------------------------------------------------------

CompilerFactory.register_class("postgres", PostgresCompiler)
CompilerFactory.register_class("sqlite", SQLiteCompiler)

__all__ = [
    # Entry points
    "create_client",
    "create_http_client",
    "Client",
    "SQLClient",
    "HTTPClient",
    # Builders
    "QueryBuilder",
    "SingleQueryBuilder",
    "UpsertQueryBuilder",
    "DeleteQueryBuilder",
    # Schema types
    "Condition",
    "FilterOp",
    "QueryDescriptor",
    "QueryResult",
    "Session",
    "static_session",
    # Compilation
    "CompiledSQL",
    "CompilerFactory",
    "HttpCompiler",
    "HttpRequest",
    "PostgresCompiler",
    "SQLCompiler",
    "SQLiteCompiler",
    "StatementBuilder",
    # Execution
    "AsyncpgExecutor",
    "SQLExecutor",
    "SQLiteExecutor",
    # Configuration
    "Settings",
    "get_settings",
    "configure_logging",
    # Errors
    "LedgerQLError",
    "ConfigError",
    "CompilationError",
    "InvalidFilterError",
    "QueryStateError",
    "MissingSessionError",
    "BackendError",
]
