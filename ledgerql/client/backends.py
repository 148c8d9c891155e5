"""Query backends: where an awaited descriptor actually goes.

``SQLBackend``
    Compiles with :class:`~ledgerql.compile.builder.StatementBuilder` and
    runs the statement on a :class:`~ledgerql.execute.base.SQLExecutor`.

``HTTPBackend``
    Compiles with :class:`~ledgerql.compile.http.HttpCompiler` and sends
    the request through an ``httpx.AsyncClient``, scoped to the user of
    the explicitly supplied session provider.

Both backends fold every failure into the result envelope, except
:class:`~ledgerql.errors.ConfigError`, which propagates to the caller.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from pydantic_core import to_jsonable_python

from ledgerql.client.normalizer import ResultNormalizer
from ledgerql.compile.builder import StatementBuilder
from ledgerql.compile.http import HttpCompiler
from ledgerql.errors import BackendError, ConfigError, MissingSessionError
from ledgerql.execute.base import SQLExecutor
from ledgerql.schema.descriptor import QueryDescriptor
from ledgerql.schema.result import QueryResult
from ledgerql.schema.session import Session, SessionProvider

logger = logging.getLogger(__name__)

_FAILURE_MESSAGES = {
    "select": "Fetch failed",
    "insert": "Insert failed",
    "upsert": "Upsert failed",
    "update": "Update failed",
    "delete": "Delete failed",
}


async def guarded(action: str, target: str, call: Callable[[], Awaitable[QueryResult]]) -> QueryResult:
    """Run ``call`` and convert any failure into an error envelope.

    Args:
        action: Operation name, for logging.
        target: Table, bucket or function name, for logging.
        call: Zero-argument coroutine factory producing the envelope.

    Raises:
        ConfigError: Configuration problems are not folded into the envelope.
    """
    try:
        return await call()
    except ConfigError:
        raise
    except Exception as exc:
        logger.warning("%s on %r failed: %s", action, target, exc)
        return ResultNormalizer.from_error(exc)


async def send_json(
    http: httpx.AsyncClient,
    method: str,
    path: str,
    *,
    params: dict[str, str] | None = None,
    json: Any = None,
    files: Any = None,
    data: dict[str, str] | None = None,
    failure: str = "Request failed",
) -> Any:
    """Send one API request and return its decoded JSON body.

    Raises:
        BackendError: On a non-2xx status, carrying the route's ``error``
            message (or ``failure`` when the body has none).
    """
    body = to_jsonable_python(json) if json is not None else None
    response = await http.request(method, path, params=params, json=body, files=files, data=data)
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if response.is_error:
        message = payload.get("error") if isinstance(payload, dict) else None
        raise BackendError(message or failure, status_code=response.status_code)
    return payload


class QueryBackend(ABC):
    """Executes descriptors and returns normalized envelopes."""

    async def run(self, descriptor: QueryDescriptor) -> QueryResult:
        """Compile and execute ``descriptor`` exactly once.

        Inserts and upserts without rows short-circuit to ``data=[]``.
        """
        if descriptor.is_vacuous:
            logger.debug("Skipping %s on %r: no rows", descriptor.kind, descriptor.table)
            return ResultNormalizer.vacuous()
        return await guarded(descriptor.kind, descriptor.table, lambda: self._run(descriptor))

    @abstractmethod
    async def _run(self, descriptor: QueryDescriptor) -> QueryResult:
        """Backend-specific compile + execute; may raise."""

    async def close(self) -> None:
        """Release backend resources."""


class SQLBackend(QueryBackend):
    """Direct SQL backend.

    Args:
        executor: Execution adapter owning the connection.
        statement_builder: Compiler for the executor's dialect.
    """

    def __init__(self, executor: SQLExecutor, statement_builder: StatementBuilder) -> None:
        self.executor = executor
        self.statement_builder = statement_builder

    async def _run(self, descriptor: QueryDescriptor) -> QueryResult:
        compiled = self.statement_builder.build(descriptor)
        logger.debug("[%s] %s (%d params)", compiled.dialect, compiled.sql, len(compiled.params))
        rows = await self.executor.execute(compiled.sql, compiled.params)
        return ResultNormalizer.from_rows(descriptor, rows)

    async def close(self) -> None:
        await self.executor.close()


class HTTPBackend(QueryBackend):
    """REST backend for code that holds session credentials only.

    Args:
        http: Client whose ``base_url`` points at the application.
        session_provider: Async callable returning the current session.
        compiler: Request compiler; defaults to ``HttpCompiler()``.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        session_provider: SessionProvider,
        compiler: HttpCompiler | None = None,
    ) -> None:
        self.http = http
        self.session_provider = session_provider
        self.compiler = compiler or HttpCompiler()

    async def require_session(self) -> Session:
        session = await self.session_provider()
        if session is None:
            raise MissingSessionError()
        return session

    async def _run(self, descriptor: QueryDescriptor) -> QueryResult:
        session = await self.require_session()
        request = self.compiler.build(descriptor, session.user_id)
        logger.debug("%s %s params=%s", request.method, request.path, sorted(request.params))
        payload = await send_json(
            self.http,
            request.method,
            request.path,
            params=request.params or None,
            json=request.json,
            failure=_FAILURE_MESSAGES.get(descriptor.kind, "Request failed"),
        )
        return ResultNormalizer.from_payload(descriptor, payload)

    async def close(self) -> None:
        await self.http.aclose()
