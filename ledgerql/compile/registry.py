"""Compiler registry (Open/Closed Principle).

``CompilerFactory`` is the central registry for
:class:`~ledgerql.compile.base.SQLCompiler` implementations.  Register a
new dialect once; clients look it up by the ``sql_dialect`` setting.

Usage::

    from ledgerql.compile.registry import CompilerFactory

    @CompilerFactory.register("cockroach")
    class CockroachCompiler(PostgresCompiler):
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

from ledgerql.compile.base import SQLCompiler
from ledgerql.errors import ConfigError


class CompilerFactory:
    """Registry mapping dialect names to :class:`SQLCompiler` classes.

    Example::

        compiler = CompilerFactory.create("postgres")
    """

    _compilers: ClassVar[dict[str, type[SQLCompiler]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[SQLCompiler]], type[SQLCompiler]]:
        """Decorator that registers a compiler class under ``name``.

        Args:
            name: The dialect name (e.g. ``"postgres"``).

        Returns:
            A decorator that registers and returns the compiler class.
        """

        def decorator(compiler_cls: type[SQLCompiler]) -> type[SQLCompiler]:
            cls._compilers[name] = compiler_cls
            return compiler_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, compiler_cls: type[SQLCompiler]) -> None:
        """Register a compiler class without using the decorator form."""
        cls._compilers[name] = compiler_cls

    @classmethod
    def unregister(cls, name: str) -> None:
        """Forget the compiler registered under ``name``; unknown names are ignored."""
        cls._compilers.pop(name, None)

    @classmethod
    def create(cls, name: str) -> SQLCompiler:
        """Instantiate the compiler registered for ``name``.

        Raises:
            ConfigError: If no compiler is registered for ``name``.
        """
        compiler_cls = cls._compilers.get(name)
        if compiler_cls is None:
            registered = sorted(cls._compilers)
            raise ConfigError(
                f"Unsupported SQL dialect: '{name}'. Registered dialects: {registered}.",
                setting="sql_dialect",
            )
        return compiler_cls()

    @classmethod
    def registered_targets(cls) -> list[str]:
        """Return the sorted list of registered dialect names."""
        return sorted(cls._compilers)
