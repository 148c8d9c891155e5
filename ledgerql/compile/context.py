"""Compilation context value objects.

``CompilationContext`` packages the static ``(compiler, strictness)`` pair
shared by every statement builder.  ``RuntimeContext`` accumulates the
positional parameters of one statement.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ledgerql.compile.base import SQLCompiler


@dataclass(frozen=True)
class CompilationContext:
    """Immutable context for a single compilation run.

    Attributes:
        compiler: Dialect-specific SQL compiler instance.
        strict_insert_columns: Reject bulk-insert rows whose keys differ
            from the first row instead of warning.
    """

    compiler: SQLCompiler
    strict_insert_columns: bool = False


@dataclass
class RuntimeContext:
    """Accumulates positional parameters during a single compilation run.

    One instance is threaded through every clause of a statement so that
    placeholder numbering continues across clauses (``SET`` then
    ``WHERE`` in an UPDATE).
    """

    compiler: SQLCompiler
    params: list[Any] = field(default_factory=list)

    def add_value(self, value: Any) -> str:
        """Store a literal value and return its placeholder."""
        self.params.append(value)
        return self.compiler.param_placeholder(len(self.params))
