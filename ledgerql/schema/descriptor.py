"""Pydantic models for the LedgerQL query descriptor.

A ``QueryDescriptor`` is the accumulated, not-yet-executed state of one
database operation.  The pending operation is a tagged union keyed on
``kind``; a descriptor holds exactly one of them and starts as a SELECT.

Descriptors are frozen.  The fluent builder derives a new descriptor per
chained call with the ``with_*`` helpers below, so a builder can be
shared or branched without leaking filters between branches.
"""
from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ledgerql.errors import QueryStateError
from ledgerql.schema.conditions import Condition, FilterOp

_FROZEN = ConfigDict(frozen=True, extra="forbid")

Row = dict[str, Any]


class OrderBy(BaseModel):
    """A single ORDER BY key."""

    model_config = _FROZEN

    column: str
    ascending: bool = True

    @property
    def direction(self) -> Literal["ASC", "DESC"]:
        return "ASC" if self.ascending else "DESC"


# ---------------------------------------------------------------------------
# Operation variants
# ---------------------------------------------------------------------------


class SelectOperation(BaseModel):
    model_config = _FROZEN

    kind: Literal["select"] = "select"


class InsertOperation(BaseModel):
    """INSERT of one or more rows.

    Attributes:
        rows: Rows to insert.  Column order is taken from the first row.
        bulk: The caller passed a list rather than a single mapping.
    """

    model_config = _FROZEN

    kind: Literal["insert"] = "insert"
    rows: list[Row]
    bulk: bool = True


class UpdateOperation(BaseModel):
    model_config = _FROZEN

    kind: Literal["update"] = "update"
    patch: Row


class UpsertOperation(BaseModel):
    """INSERT … ON CONFLICT.

    Attributes:
        rows: Rows to insert or merge.
        bulk: The caller passed a list rather than a single mapping.
        on_conflict: Conflict target column.  Defaults to the first column
            of the first row when omitted.
        ignore_duplicates: Emit ``DO NOTHING`` instead of ``DO UPDATE``.
    """

    model_config = _FROZEN

    kind: Literal["upsert"] = "upsert"
    rows: list[Row]
    bulk: bool = True
    on_conflict: str | None = None
    ignore_duplicates: bool = False


class DeleteOperation(BaseModel):
    model_config = _FROZEN

    kind: Literal["delete"] = "delete"


Operation = Annotated[
    Union[SelectOperation, InsertOperation, UpdateOperation, UpsertOperation, DeleteOperation],
    Field(discriminator="kind"),
]


def as_rows(payload: Row | list[Row]) -> list[Row]:
    """Normalise a single-row or multi-row payload to a list of rows."""
    if isinstance(payload, dict):
        return [payload]
    return list(payload)


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------


class QueryDescriptor(BaseModel):
    """Everything needed to compile one query.

    Attributes:
        table: Target table name.
        columns: Projection for SELECT, RETURNING list for mutations.
        conditions: Filters, AND-ed in this order.
        order: Optional ordering key (SELECT only).
        limit: Optional row cap (SELECT only).
        single: Unwrap the result list to its first row.
        count: ``"exact"`` to include a row count in the result.
        operation: The pending operation.
    """

    model_config = _FROZEN

    table: str
    columns: str = "*"
    conditions: tuple[Condition, ...] = ()
    order: OrderBy | None = None
    limit: int | None = None
    single: bool = False
    count: Literal["exact"] | None = None
    operation: Operation = Field(default_factory=SelectOperation)

    @property
    def kind(self) -> str:
        return self.operation.kind

    @property
    def is_mutation(self) -> bool:
        return not isinstance(self.operation, SelectOperation)

    @property
    def is_vacuous(self) -> bool:
        """True for an INSERT / UPSERT with no rows; nothing needs to run."""
        return isinstance(self.operation, (InsertOperation, UpsertOperation)) and not self.operation.rows

    def find_condition(self, column: str) -> Condition | None:
        """Return the first ``eq`` condition on ``column``, if any."""
        for cond in self.conditions:
            if cond.column == column and cond.operator is FilterOp.EQ:
                return cond
        return None

    # ------------------------------------------------------------------
    # Derivation helpers (each returns a new descriptor)
    # ------------------------------------------------------------------

    def with_condition(self, condition: Condition) -> QueryDescriptor:
        return self.model_copy(update={"conditions": (*self.conditions, condition)})

    def with_operation(self, operation: Operation) -> QueryDescriptor:
        if self.is_mutation:
            raise QueryStateError(
                f"Cannot set a {operation.kind} on a builder that already has a "
                f"pending {self.kind} for table '{self.table}'."
            )
        return self.model_copy(update={"operation": operation})

    def with_options(self, **changes: Any) -> QueryDescriptor:
        return self.model_copy(update=changes)
