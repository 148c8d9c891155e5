"""Supabase-compatible clients.

``SQLClient``
    Server side.  Holds database credentials and compiles to SQL; adds
    ``execute_sql``.

``HTTPClient``
    Client side.  Holds only a session and compiles to ``/api/<table>``
    requests; adds ``rpc``.

Both expose ``from_`` / ``table``, ``auth`` and ``storage``.  Use
:func:`create_client` / :func:`create_http_client` rather than the
constructors.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from ledgerql.client.auth import AuthInterface
from ledgerql.client.backends import HTTPBackend, QueryBackend, SQLBackend, guarded, send_json
from ledgerql.client.query import DeleteQueryBuilder, QueryBuilder
from ledgerql.client.storage import StorageInterface
from ledgerql.compile.builder import StatementBuilder
from ledgerql.compile.http import TENANT_COLUMN, HttpCompiler
from ledgerql.compile.registry import CompilerFactory
from ledgerql.config import Settings, get_settings
from ledgerql.execute.asyncpg_executor import AsyncpgExecutor
from ledgerql.execute.base import SQLExecutor
from ledgerql.schema.descriptor import DeleteOperation, QueryDescriptor
from ledgerql.schema.result import QueryResult
from ledgerql.schema.session import Session, SessionProvider, static_session

logger = logging.getLogger(__name__)


class Client:
    """Entry point shared by both variants.

    Args:
        backend: Where awaited builders are executed.
        storage_http: Client for the ``/api/storage`` routes.
        session_provider: Source of the current session for ``auth``.
        api_prefix: Path prefix of the API routes.
    """

    def __init__(
        self,
        backend: QueryBackend,
        storage_http: httpx.AsyncClient,
        session_provider: SessionProvider | None = None,
        api_prefix: str = "/api",
    ) -> None:
        self._backend = backend
        self._storage_http = storage_http
        self.auth = AuthInterface(session_provider or static_session(None))
        self.storage = StorageInterface(storage_http, api_prefix)

    def from_(self, table: str) -> QueryBuilder:
        """Start a query on ``table`` (a SELECT until a mutation is chained)."""
        return QueryBuilder(self._backend, QueryDescriptor(table=table))

    def table(self, table: str) -> QueryBuilder:
        """Alias of :meth:`from_`."""
        return self.from_(table)

    def delete(self, table: str) -> DeleteQueryBuilder:
        """Start a DELETE on ``table`` directly; chain filters before awaiting."""
        descriptor = QueryDescriptor(table=table, operation=DeleteOperation())
        return DeleteQueryBuilder(self._backend, descriptor)

    async def close(self) -> None:
        await self._backend.close()

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


class SQLClient(Client):
    """Direct-SQL client."""

    _backend: SQLBackend

    @property
    def dialect(self) -> str:
        return self._backend.statement_builder.dialect

    async def execute_sql(self, query: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Run hand-written SQL on the same executor.

        Unlike awaited builders this raises on failure.
        """
        return await self._backend.executor.execute(query, params)

    async def close(self) -> None:
        await super().close()
        await self._storage_http.aclose()


class HTTPClient(Client):
    """REST client scoped to the session's user."""

    _backend: HTTPBackend

    def __init__(self, backend: HTTPBackend, api_prefix: str = "/api") -> None:
        super().__init__(backend, backend.http, backend.session_provider, api_prefix)

    async def rpc(self, function_name: str, params: dict[str, Any] | None = None) -> QueryResult:
        """Call ``POST /api/rpc/<function_name>`` with the session's ``user_id``."""

        async def _call() -> QueryResult:
            session = await self._backend.require_session()
            payload = await send_json(
                self._backend.http,
                "POST",
                self._backend.compiler.path_for(f"rpc/{function_name}"),
                json={**(params or {}), TENANT_COLUMN: session.user_id},
                failure="RPC call failed",
            )
            return QueryResult(data=payload.get("data") if isinstance(payload, dict) else payload)

        return await guarded("rpc", function_name, _call)


def create_client(
    database_url: str | None = None,
    *,
    executor: SQLExecutor | None = None,
    dialect: str | None = None,
    settings: Settings | None = None,
    session_provider: SessionProvider | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> SQLClient:
    """Create a direct-SQL client.

    Nothing connects until the first query runs; a missing connection
    string surfaces then as :class:`~ledgerql.errors.ConfigError`.

    Args:
        database_url: Connection string; defaults to ``DATABASE_URL``.
        executor: Execution adapter; defaults to an :class:`AsyncpgExecutor`.
        dialect: SQL dialect; defaults to the executor's dialect, then to
            ``Settings.sql_dialect``.
        settings: Settings override (mainly for tests).
        session_provider: Optional session source for ``client.auth``.
        http_client: Client for the storage routes; defaults to one on
            ``Settings.api_base_url``.
    """
    settings = settings or get_settings()
    if executor is None:
        executor = AsyncpgExecutor(database_url or settings.database_url)
    dialect = dialect or executor.dialect or settings.sql_dialect
    builder = StatementBuilder(
        CompilerFactory.create(dialect),
        strict_insert_columns=settings.strict_insert_columns,
    )
    if http_client is None:
        http_client = httpx.AsyncClient(base_url=settings.api_base_url)
    logger.debug("Created SQL client (dialect=%s, executor=%s)", dialect, type(executor).__name__)
    return SQLClient(SQLBackend(executor, builder), http_client, session_provider)


def create_http_client(
    session: Session | SessionProvider | None,
    *,
    base_url: str | None = None,
    http_client: httpx.AsyncClient | None = None,
    api_prefix: str = "/api",
    settings: Settings | None = None,
) -> HTTPClient:
    """Create a client that talks to the application's API routes.

    Args:
        session: The signed-in session, or an async provider of it.  Every
            request is scoped to its ``user_id``.
        base_url: Application origin; defaults to ``Settings.api_base_url``.
        http_client: Pre-configured client (e.g. with a mock transport).
        api_prefix: Path prefix of the per-table routes.
        settings: Settings override (mainly for tests).
    """
    if session is None or isinstance(session, Session):
        provider = static_session(session)
    else:
        provider = session
    if http_client is None:
        settings = settings or get_settings()
        http_client = httpx.AsyncClient(base_url=base_url or settings.api_base_url)
    backend = HTTPBackend(http_client, provider, HttpCompiler(api_prefix))
    return HTTPClient(backend, api_prefix)
