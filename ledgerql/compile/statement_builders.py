"""Statement-level SQL builders.

Each class renders exactly one kind of statement from a
:class:`~ledgerql.schema.descriptor.QueryDescriptor`.  All of them share
the per-statement :class:`~ledgerql.compile.context.RuntimeContext`, so
placeholder numbers run continuously from the first clause to the last.

Classes
-------
SelectStatementBuilder  — ``SELECT … FROM … WHERE … ORDER BY … LIMIT``
InsertStatementBuilder  — ``INSERT INTO … VALUES … RETURNING``
UpdateStatementBuilder  — ``UPDATE … SET … WHERE … RETURNING``
UpsertStatementBuilder  — ``INSERT … ON CONFLICT … RETURNING``
DeleteStatementBuilder  — ``DELETE FROM … WHERE``
ValuesBuilder           — shared column list + ``VALUES`` tuples
"""
from __future__ import annotations

import logging

from ledgerql.compile.condition_builder import ConditionBuilder
from ledgerql.compile.context import CompilationContext, RuntimeContext
from ledgerql.errors import CompilationError
from ledgerql.schema.descriptor import (
    InsertOperation,
    QueryDescriptor,
    Row,
    UpdateOperation,
    UpsertOperation,
)

logger = logging.getLogger(__name__)


def _join(*parts: str) -> str:
    return " ".join(p for p in parts if p)


class ValuesBuilder:
    """Builds ``(<columns>) VALUES (…), (…)`` for INSERT and UPSERT.

    Columns come from the keys of the **first** row.  Later rows are read
    in that column order: a missing key binds ``None`` and an extra key is
    dropped.  With ``strict_insert_columns`` the mismatch is an error.
    """

    def __init__(self, ctx: CompilationContext, runtime: RuntimeContext) -> None:
        self._ctx = ctx
        self._runtime = runtime

    def columns_for(self, table: str, rows: list[Row]) -> list[str]:
        if not rows:
            raise CompilationError(f"No rows to write into '{table}'.", clause="VALUES")
        columns = list(rows[0])
        if not columns:
            raise CompilationError(f"First row for '{table}' has no columns.", clause="VALUES")
        self._check_uniform(table, columns, rows)
        return columns

    def build(self, columns: list[str], rows: list[Row]) -> str:
        quote = self._ctx.compiler.quote_identifier
        column_list = ", ".join(quote(c) for c in columns)
        tuples = []
        for row in rows:
            placeholders = ", ".join(self._runtime.add_value(row.get(c)) for c in columns)
            tuples.append(f"({placeholders})")
        return f"({column_list}) VALUES {', '.join(tuples)}"

    def _check_uniform(self, table: str, columns: list[str], rows: list[Row]) -> None:
        expected = set(columns)
        mismatched = [i for i, row in enumerate(rows) if set(row) != expected]
        if not mismatched:
            return
        if self._ctx.strict_insert_columns:
            raise CompilationError(
                f"Rows {mismatched} for '{table}' do not share the columns of row 0: {columns}.",
                clause="VALUES",
            )
        logger.warning(
            "Rows %s for table %r have keys differing from row 0 %s; "
            "missing keys are written as NULL and extra keys are dropped",
            mismatched,
            table,
            columns,
        )


class SelectStatementBuilder:
    """Builds a ``SELECT`` statement."""

    def __init__(self, ctx: CompilationContext, runtime: RuntimeContext) -> None:
        self._ctx = ctx
        self._runtime = runtime

    def build(self, desc: QueryDescriptor) -> str:
        quote = self._ctx.compiler.quote_identifier
        where = ConditionBuilder(self._ctx, self._runtime).build_where(desc.conditions)
        order = ""
        if desc.order is not None:
            order = f"ORDER BY {quote(desc.order.column)} {desc.order.direction}"
        limit = f"LIMIT {int(desc.limit)}" if desc.limit is not None else ""
        return _join(f"SELECT {desc.columns} FROM {quote(desc.table)}", where, order, limit)


class InsertStatementBuilder:
    """Builds a multi-row ``INSERT … RETURNING``."""

    def __init__(self, ctx: CompilationContext, runtime: RuntimeContext) -> None:
        self._ctx = ctx
        self._runtime = runtime

    def build(self, desc: QueryDescriptor) -> str:
        op = desc.operation
        if not isinstance(op, InsertOperation):
            raise CompilationError(f"Expected an insert, got {op.kind}.", clause="INSERT")
        values = ValuesBuilder(self._ctx, self._runtime)
        columns = values.columns_for(desc.table, op.rows)
        table = self._ctx.compiler.quote_identifier(desc.table)
        return _join(
            f"INSERT INTO {table}",
            values.build(columns, op.rows),
            f"RETURNING {desc.columns}",
        )


class UpdateStatementBuilder:
    """Builds ``UPDATE … SET … WHERE … RETURNING``.

    SET placeholders come first; WHERE placeholders continue the numbering.
    """

    def __init__(self, ctx: CompilationContext, runtime: RuntimeContext) -> None:
        self._ctx = ctx
        self._runtime = runtime

    def build(self, desc: QueryDescriptor) -> str:
        op = desc.operation
        if not isinstance(op, UpdateOperation):
            raise CompilationError(f"Expected an update, got {op.kind}.", clause="UPDATE")
        if not op.patch:
            raise CompilationError(f"Empty update patch for '{desc.table}'.", clause="SET")
        quote = self._ctx.compiler.quote_identifier
        assignments = ", ".join(
            f"{quote(col)} = {self._runtime.add_value(val)}" for col, val in op.patch.items()
        )
        where = ConditionBuilder(self._ctx, self._runtime).build_where(desc.conditions)
        return _join(
            f"UPDATE {quote(desc.table)} SET {assignments}",
            where,
            f"RETURNING {desc.columns}",
        )


class UpsertStatementBuilder:
    """Builds ``INSERT … ON CONFLICT ("<col>") DO UPDATE | DO NOTHING``."""

    def __init__(self, ctx: CompilationContext, runtime: RuntimeContext) -> None:
        self._ctx = ctx
        self._runtime = runtime

    def build(self, desc: QueryDescriptor) -> str:
        op = desc.operation
        if not isinstance(op, UpsertOperation):
            raise CompilationError(f"Expected an upsert, got {op.kind}.", clause="UPSERT")
        values = ValuesBuilder(self._ctx, self._runtime)
        columns = values.columns_for(desc.table, op.rows)
        table = self._ctx.compiler.quote_identifier(desc.table)
        return _join(
            f"INSERT INTO {table}",
            values.build(columns, op.rows),
            self._build_conflict(op, columns),
            f"RETURNING {desc.columns}",
        )

    def _build_conflict(self, op: UpsertOperation, columns: list[str]) -> str:
        quote = self._ctx.compiler.quote_identifier
        target = op.on_conflict or columns[0]
        head = f"ON CONFLICT ({quote(target)})"
        updates = [c for c in columns if c != target]
        if op.ignore_duplicates or not updates:
            return f"{head} DO NOTHING"
        assignments = ", ".join(f"{quote(c)} = EXCLUDED.{quote(c)}" for c in updates)
        return f"{head} DO UPDATE SET {assignments}"


class DeleteStatementBuilder:
    """Builds ``DELETE FROM … [WHERE …]`` (no RETURNING)."""

    def __init__(self, ctx: CompilationContext, runtime: RuntimeContext) -> None:
        self._ctx = ctx
        self._runtime = runtime

    def build(self, desc: QueryDescriptor) -> str:
        table = self._ctx.compiler.quote_identifier(desc.table)
        where = ConditionBuilder(self._ctx, self._runtime).build_where(desc.conditions)
        return _join(f"DELETE FROM {table}", where)
