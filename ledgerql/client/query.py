"""Fluent, awaitable query builders.

The builders mirror the Supabase client's chain-and-await shape::

    result = await (
        client.from_("invoices")
        .select("id, total")
        .eq("customer_id", 42)
        .order("issue_date", ascending=False)
        .limit(20)
    )
    if result.error:
        ...

Every chained call returns a **new** builder over an updated, frozen
:class:`~ledgerql.schema.descriptor.QueryDescriptor`; the receiver is
left unchanged.  Awaiting a builder (or calling :meth:`execute`) runs one
compile + execute cycle on the bound backend and never raises except for
configuration errors.

Builder types
-------------
QueryBuilder        — everything; returned by ``client.from_()``
SingleQueryBuilder  — after ``single()``: only ``select()`` remains
UpsertQueryBuilder  — after ``upsert()``: ``select()`` and ``single()``
DeleteQueryBuilder  — after ``delete()``: filters only
"""
from __future__ import annotations

from collections.abc import Generator, Sequence
from typing import TYPE_CHECKING, Any, Literal, TypeVar

from ledgerql.errors import InvalidFilterError
from ledgerql.schema.conditions import Condition, FilterOp
from ledgerql.schema.descriptor import (
    DeleteOperation,
    InsertOperation,
    OrderBy,
    QueryDescriptor,
    Row,
    UpdateOperation,
    UpsertOperation,
    as_rows,
)
from ledgerql.schema.result import QueryResult

if TYPE_CHECKING:
    from ledgerql.client.backends import QueryBackend

_B = TypeVar("_B", bound="_BaseBuilder")


class _BaseBuilder:
    """Holds a backend and a descriptor; awaitable."""

    def __init__(self, backend: QueryBackend, descriptor: QueryDescriptor) -> None:
        self._backend = backend
        self._descriptor = descriptor

    @property
    def descriptor(self) -> QueryDescriptor:
        """The accumulated query state."""
        return self._descriptor

    def _derive(self: _B, descriptor: QueryDescriptor) -> _B:
        return type(self)(self._backend, descriptor)

    async def execute(self) -> QueryResult:
        """Compile and run the query; return the result envelope."""
        return await self._backend.run(self._descriptor)

    def __await__(self) -> Generator[Any, None, QueryResult]:
        return self.execute().__await__()

    def __repr__(self) -> str:
        d = self._descriptor
        return f"<{type(self).__name__} {d.kind} {d.table!r} conditions={len(d.conditions)}>"


class _FilterMixin(_BaseBuilder):
    """Filter methods; each appends one AND-ed condition."""

    def _filter(
        self: _B,
        column: str,
        operator: FilterOp,
        value: Any,
        negated: FilterOp | None = None,
    ) -> _B:
        condition = Condition(column=column, operator=operator, value=value, negated=negated)
        return self._derive(self._descriptor.with_condition(condition))

    def eq(self: _B, column: str, value: Any) -> _B:
        return self._filter(column, FilterOp.EQ, value)

    def neq(self: _B, column: str, value: Any) -> _B:
        return self._filter(column, FilterOp.NEQ, value)

    def gt(self: _B, column: str, value: Any) -> _B:
        return self._filter(column, FilterOp.GT, value)

    def gte(self: _B, column: str, value: Any) -> _B:
        return self._filter(column, FilterOp.GTE, value)

    def lt(self: _B, column: str, value: Any) -> _B:
        return self._filter(column, FilterOp.LT, value)

    def lte(self: _B, column: str, value: Any) -> _B:
        return self._filter(column, FilterOp.LTE, value)

    def like(self: _B, column: str, pattern: str) -> _B:
        return self._filter(column, FilterOp.LIKE, pattern)

    def ilike(self: _B, column: str, pattern: str) -> _B:
        return self._filter(column, FilterOp.ILIKE, pattern)

    def is_(self: _B, column: str, value: bool | None) -> _B:
        return self._filter(column, FilterOp.IS, value)

    def in_(self: _B, column: str, values: Sequence[Any]) -> _B:
        return self._filter(column, FilterOp.IN, values)

    def not_(self: _B, column: str, operator: str, value: Any) -> _B:
        """Negate ``operator``: ``not_("deleted_at", "is", None)`` → IS NOT NULL."""
        try:
            op = FilterOp(operator.lower())
        except ValueError:
            raise InvalidFilterError(
                f"Unknown operator '{operator}' for not_().", column=column, operator=operator
            ) from None
        if op is FilterOp.IS:
            return self._filter(column, FilterOp.IS_NOT, value)
        return self._filter(column, FilterOp.NOT, value, negated=op)


class QueryBuilder(_FilterMixin):
    """Builder returned by ``client.from_(table)``."""

    def select(self, columns: str = "*", *, count: Literal["exact"] | None = None) -> QueryBuilder:
        """Set the projection (or the RETURNING list of a pending mutation)."""
        return self._derive(self._descriptor.with_options(columns=columns, count=count))

    def order(self, column: str, *, ascending: bool = True) -> QueryBuilder:
        return self._derive(
            self._descriptor.with_options(order=OrderBy(column=column, ascending=ascending))
        )

    def limit(self, count: int) -> QueryBuilder:
        """Cap the number of rows a SELECT returns; mutations ignore it."""
        return self._derive(self._descriptor.with_options(limit=int(count)))

    def single(self) -> SingleQueryBuilder:
        """Expect one row: forces ``LIMIT 1`` and unwraps the result."""
        descriptor = self._descriptor.with_options(single=True, limit=1)
        return SingleQueryBuilder(self._backend, descriptor)

    def insert(self, rows: Row | list[Row]) -> QueryBuilder:
        operation = InsertOperation(rows=as_rows(rows), bulk=not isinstance(rows, dict))
        return self._derive(self._descriptor.with_operation(operation))

    def update(self, patch: Row) -> QueryBuilder:
        return self._derive(self._descriptor.with_operation(UpdateOperation(patch=dict(patch))))

    def upsert(
        self,
        rows: Row | list[Row],
        *,
        on_conflict: str | None = None,
        ignore_duplicates: bool = False,
    ) -> UpsertQueryBuilder:
        operation = UpsertOperation(
            rows=as_rows(rows),
            bulk=not isinstance(rows, dict),
            on_conflict=on_conflict,
            ignore_duplicates=ignore_duplicates,
        )
        return UpsertQueryBuilder(self._backend, self._descriptor.with_operation(operation))

    def delete(self) -> DeleteQueryBuilder:
        """Delete matching rows; filters chained so far carry over."""
        descriptor = self._descriptor.with_operation(DeleteOperation())
        return DeleteQueryBuilder(self._backend, descriptor)


class SingleQueryBuilder(_BaseBuilder):
    """Builder after ``single()``; resolves to one row or ``None``."""

    def select(self, columns: str = "*") -> SingleQueryBuilder:
        return self._derive(self._descriptor.with_options(columns=columns))


class UpsertQueryBuilder(_BaseBuilder):
    """Builder after ``upsert()``."""

    def select(self, columns: str = "*") -> UpsertQueryBuilder:
        """Set the RETURNING list."""
        return self._derive(self._descriptor.with_options(columns=columns))

    def single(self) -> UpsertQueryBuilder:
        return self._derive(self._descriptor.with_options(single=True))


class DeleteQueryBuilder(_FilterMixin):
    """Builder after ``delete()``; exposes filters only."""
