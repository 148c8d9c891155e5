"""Condition → SQL predicate compiler.

``ConditionBuilder`` renders :class:`~ledgerql.schema.conditions.Condition`
objects into AND-joined predicates.  Every literal goes through the shared
:class:`~ledgerql.compile.context.RuntimeContext`, so placeholders are
numbered in the order conditions were appended.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ledgerql.compile.context import CompilationContext, RuntimeContext
from ledgerql.errors import CompilationError
from ledgerql.schema.conditions import IS_LITERALS, Condition, FilterOp


class ConditionBuilder:
    """Compiles conditions to SQL predicates.

    Args:
        ctx: Static compilation context.
        runtime: Shared parameter accumulator.
    """

    _CMP: dict[FilterOp, str] = {
        FilterOp.EQ: "=",
        FilterOp.NEQ: "!=",
        FilterOp.GT: ">",
        FilterOp.GTE: ">=",
        FilterOp.LT: "<",
        FilterOp.LTE: "<=",
    }

    #: SQL spelling of each entry of ``IS_LITERALS``, in the same order.
    _IS_SQL: tuple[str, ...] = ("NULL", "TRUE", "FALSE")

    def __init__(self, ctx: CompilationContext, runtime: RuntimeContext) -> None:
        self._ctx = ctx
        self._runtime = runtime

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build_where(self, conditions: Iterable[Condition]) -> str:
        """Return ``WHERE p1 AND p2 …`` or ``""`` when there are no conditions."""
        parts = [self.build(c) for c in conditions]
        if not parts:
            return ""
        return f"WHERE {' AND '.join(parts)}"

    def build(self, cond: Condition) -> str:
        """Compile a single condition to a SQL fragment."""
        col = self._ctx.compiler.quote_identifier(cond.column)
        if cond.operator is FilterOp.NOT:
            inner = self._dispatch(col, cond.negated, cond)
            return f"NOT ({inner})"
        return self._dispatch(col, cond.operator, cond)

    # ------------------------------------------------------------------
    # Operator dispatch
    # ------------------------------------------------------------------

    def _dispatch(self, col: str, op: FilterOp | None, cond: Condition) -> str:
        value = cond.value
        if op in self._CMP:
            return f"{col} {self._CMP[op]} {self._runtime.add_value(value)}"

        if op in (FilterOp.LIKE, FilterOp.ILIKE):
            sql_op = self._ctx.compiler.like_operator(op.value.upper())
            return f"{col} {sql_op} {self._runtime.add_value(value)}"

        if op is FilterOp.IN:
            if not cond.values:
                return "FALSE"
            placeholders = ", ".join(self._runtime.add_value(v) for v in cond.values)
            return f"{col} IN ({placeholders})"

        # NULL cannot be bound as a typed parameter; IS takes a literal.
        if op is FilterOp.IS:
            return f"{col} IS {self._is_literal(value)}"

        if op is FilterOp.IS_NOT:
            return f"{col} IS NOT {self._is_literal(value)}"

        raise CompilationError(f"Unknown filter operator '{op}'.", clause="WHERE")

    def _is_literal(self, value: Any) -> str:
        for literal, sql in zip(IS_LITERALS, self._IS_SQL):
            if value is literal:
                return sql
        raise CompilationError(f"IS accepts only None, True or False, got {value!r}.", clause="WHERE")
