"""Compiler abstractions: CompiledSQL and the SQLCompiler ABC.

The Template Method pattern is used:
- ``SQLCompiler`` defines the dialect hooks every statement builder needs.
- ``PostgresCompiler`` and ``SQLiteCompiler`` override the dialect-specific
  steps (positional placeholder style, ILIKE support, quoting).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class CompiledSQL:
    """The output of a successful compilation.

    Attributes:
        sql: The compiled SQL string with positional placeholders.
        params: Values for the placeholders, in placeholder order.
        dialect: The target dialect (``'postgres'`` or ``'sqlite'``).
    """

    sql: str
    params: list[Any]
    dialect: str


class SQLCompiler(ABC):
    """Abstract base for dialect-specific SQL compilers.

    Subclasses implement the dialect-specific methods; the
    ``StatementBuilder`` uses this interface via the Strategy / Template
    Method patterns.
    """

    @abstractmethod
    def param_placeholder(self, index: int) -> str:
        """Return the SQL placeholder for the ``index``-th parameter.

        Args:
            index: 1-based parameter position.

        Returns:
            Dialect-specific placeholder string.
        """

    @abstractmethod
    def like_operator(self, op: str) -> str:
        """Return the SQL keyword for a LIKE / ILIKE operator.

        Args:
            op: ``'LIKE'`` or ``'ILIKE'``.

        Returns:
            SQL operator keyword.
        """

    def quote_identifier(self, name: str) -> str:
        """Return a double-quoted SQL identifier."""
        escaped = name.replace('"', '""')
        return f'"{escaped}"'

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (``'postgres'`` or ``'sqlite'``)."""
