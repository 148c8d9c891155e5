"""LedgerQL compilation layer: QueryDescriptor → parameterized SQL or HTTP."""
from ledgerql.compile.base import CompiledSQL, SQLCompiler
from ledgerql.compile.builder import StatementBuilder
from ledgerql.compile.http import HttpCompiler, HttpRequest
from ledgerql.compile.postgres import PostgresCompiler
from ledgerql.compile.sqlite import SQLiteCompiler

__all__ = [
    "CompiledSQL",
    "SQLCompiler",
    "StatementBuilder",
    "HttpCompiler",
    "HttpRequest",
    "PostgresCompiler",
    "SQLiteCompiler",
]
