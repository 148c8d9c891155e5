"""Core descriptor → SQL compilation logic.

``StatementBuilder`` is the top-level orchestrator.  It picks the
statement-level sub-builder for the descriptor's operation variant and
drives it with a fresh :class:`~ledgerql.compile.context.RuntimeContext`.
All dialect-specific behaviour is delegated to the injected
``SQLCompiler``.

Sub-builder hierarchy
---------------------
StatementBuilder
  ├── SelectStatementBuilder   (statement_builders.py)
  ├── InsertStatementBuilder   (statement_builders.py)
  ├── UpdateStatementBuilder   (statement_builders.py)
  ├── UpsertStatementBuilder   (statement_builders.py)
  ├── DeleteStatementBuilder   (statement_builders.py)
  └── ConditionBuilder         (condition_builder.py, used by the above)
"""

from __future__ import annotations

from ledgerql.compile.base import CompiledSQL, SQLCompiler
from ledgerql.compile.context import CompilationContext, RuntimeContext
from ledgerql.compile.statement_builders import (
    DeleteStatementBuilder,
    InsertStatementBuilder,
    SelectStatementBuilder,
    UpdateStatementBuilder,
    UpsertStatementBuilder,
)
from ledgerql.errors import CompilationError
from ledgerql.schema.descriptor import QueryDescriptor

_STATEMENT_BUILDERS = {
    "select": SelectStatementBuilder,
    "insert": InsertStatementBuilder,
    "update": UpdateStatementBuilder,
    "upsert": UpsertStatementBuilder,
    "delete": DeleteStatementBuilder,
}


class StatementBuilder:
    """Compiles a :class:`QueryDescriptor` to parameterized SQL.

    Args:
        compiler: Dialect-specific compiler instance.
        strict_insert_columns: Reject heterogeneous bulk-insert rows.
    """

    def __init__(self, compiler: SQLCompiler, strict_insert_columns: bool = False) -> None:
        self._ctx = CompilationContext(
            compiler=compiler, strict_insert_columns=strict_insert_columns
        )

    @property
    def dialect(self) -> str:
        return self._ctx.compiler.dialect_name

    def build(self, descriptor: QueryDescriptor) -> CompiledSQL:
        """Compile ``descriptor`` to one SQL statement.

        Args:
            descriptor: The accumulated query state.

        Returns:
            :class:`~ledgerql.compile.base.CompiledSQL` with the ``sql``
            string and positional ``params``.

        Raises:
            CompilationError: If the descriptor cannot be rendered (e.g. an
                insert with no rows).
        """
        builder_cls = _STATEMENT_BUILDERS.get(descriptor.kind)
        if builder_cls is None:
            raise CompilationError(f"Unsupported operation '{descriptor.kind}'.")
        runtime = RuntimeContext(compiler=self._ctx.compiler)
        sql = builder_cls(self._ctx, runtime).build(descriptor)
        return CompiledSQL(sql=sql, params=runtime.params, dialect=self.dialect)
