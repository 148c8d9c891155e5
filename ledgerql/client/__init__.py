"""LedgerQL clients and fluent builders."""
from ledgerql.client.auth import AuthInterface
from ledgerql.client.backends import HTTPBackend, QueryBackend, SQLBackend
from ledgerql.client.client import (
    Client,
    HTTPClient,
    SQLClient,
    create_client,
    create_http_client,
)
from ledgerql.client.normalizer import ResultNormalizer
from ledgerql.client.query import (
    DeleteQueryBuilder,
    QueryBuilder,
    SingleQueryBuilder,
    UpsertQueryBuilder,
)
from ledgerql.client.storage import BucketClient, StorageInterface

__all__ = [
    "AuthInterface",
    "HTTPBackend",
    "QueryBackend",
    "SQLBackend",
    "Client",
    "HTTPClient",
    "SQLClient",
    "create_client",
    "create_http_client",
    "ResultNormalizer",
    "DeleteQueryBuilder",
    "QueryBuilder",
    "SingleQueryBuilder",
    "UpsertQueryBuilder",
    "BucketClient",
    "StorageInterface",
]
