"""LedgerQL schema models: conditions, descriptors, sessions and results."""
from ledgerql.schema.conditions import Condition, FilterOp
from ledgerql.schema.descriptor import (
    DeleteOperation,
    InsertOperation,
    Operation,
    OrderBy,
    QueryDescriptor,
    Row,
    SelectOperation,
    UpdateOperation,
    UpsertOperation,
)
from ledgerql.schema.result import QueryResult
from ledgerql.schema.session import Session, SessionProvider, static_session

__all__ = [
    "Condition",
    "FilterOp",
    "DeleteOperation",
    "InsertOperation",
    "Operation",
    "OrderBy",
    "QueryDescriptor",
    "Row",
    "SelectOperation",
    "UpdateOperation",
    "UpsertOperation",
    "QueryResult",
    "Session",
    "SessionProvider",
    "static_session",
]
