"""Result normalizer.

Shapes raw driver rows and API payloads into the uniform
:class:`~ledgerql.schema.result.QueryResult` envelope, so callers see the
same contract whichever backend ran the query.
"""
from __future__ import annotations

from typing import Any

from ledgerql.errors import BackendError, LedgerQLError
from ledgerql.schema.descriptor import QueryDescriptor
from ledgerql.schema.result import QueryResult


class ResultNormalizer:
    """Builds result envelopes for one descriptor."""

    @staticmethod
    def vacuous() -> QueryResult:
        """Envelope for a write with nothing to write."""
        return QueryResult(data=[], error=None)

    @staticmethod
    def from_rows(descriptor: QueryDescriptor, rows: list[dict[str, Any]]) -> QueryResult:
        """Envelope for rows returned by a SQL executor."""
        if descriptor.kind == "delete":
            return QueryResult(data=None)
        count = len(rows) if ResultNormalizer._wants_count(descriptor) else None
        if descriptor.single:
            return QueryResult(data=rows[0] if rows else None, count=count)
        return QueryResult(data=rows, count=count)

    @staticmethod
    def from_payload(descriptor: QueryDescriptor, payload: Any) -> QueryResult:
        """Envelope for a JSON body returned by an API route.

        Routes answer ``{"data": …}``; a body without ``data`` is taken as
        the data itself.
        """
        if descriptor.kind == "delete":
            return QueryResult(data=None)
        data = payload.get("data") if isinstance(payload, dict) and "data" in payload else payload
        if data is None and descriptor.kind == "select" and not descriptor.single:
            data = []
        count = None
        if ResultNormalizer._wants_count(descriptor):
            count = len(data) if isinstance(data, list) else 0
        if descriptor.single and isinstance(data, list):
            data = data[0] if data else None
        return QueryResult(data=data, count=count)

    @staticmethod
    def from_error(exc: Exception) -> QueryResult:
        """Envelope for a failure; foreign exceptions become :class:`BackendError`."""
        if isinstance(exc, LedgerQLError):
            return QueryResult(data=None, error=exc)
        error = BackendError(str(exc) or type(exc).__name__)
        error.__cause__ = exc
        return QueryResult(data=None, error=error)

    @staticmethod
    def _wants_count(descriptor: QueryDescriptor) -> bool:
        return descriptor.count == "exact" and not descriptor.is_mutation
