"""Shared pytest fixtures for LedgerQL unit and integration tests."""
from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio

import ledgerql
from ledgerql.config import Settings
from ledgerql.execute.sqlite_executor import SQLiteExecutor
from ledgerql.schema.session import Session
from tests.fixtures import load_ddl

USER = "user-1"
OTHER = "user-2"

SEED_SQL = """
INSERT INTO customers (id, user_id, name, email, city, archived_at) VALUES
    (1, 'user-1', 'Acme', 'billing@acme.test', 'Berlin', NULL),
    (2, 'user-1', 'Globex', 'ap@globex.test', 'Paris', '2024-01-01T00:00:00'),
    (3, 'user-2', 'Initech', 'finance@initech.test', NULL, NULL);

INSERT INTO invoices (id, user_id, customer_id, number, status, total, paid, notes) VALUES
    (1, 'user-1', 1, 'INV-001', 'sent', 120.0, 0, NULL),
    (2, 'user-1', 1, 'INV-002', 'paid', 80.5, 1, 'early'),
    (3, 'user-1', 2, 'INV-003', 'draft', 0.0, 0, NULL),
    (4, 'user-2', 3, 'INV-004', 'sent', 300.0, 0, NULL);
"""


@pytest.fixture()
def settings() -> Settings:
    """Settings isolated from any ``.env`` file in the working directory."""
    return Settings(_env_file=None)


@pytest.fixture()
def session() -> Session:
    return Session(user_id=USER, email="owner@acme.test", full_name="Ada Owner")


@pytest.fixture()
def sqlite_executor() -> SQLiteExecutor:
    """In-memory SQLite database with the billing schema and seed rows."""
    executor = SQLiteExecutor()
    executor.executescript(load_ddl("sqlite"))
    executor.executescript(SEED_SQL)
    return executor


@pytest_asyncio.fixture()
async def sql_client(
    sqlite_executor: SQLiteExecutor, settings: Settings
) -> AsyncIterator[ledgerql.SQLClient]:
    client = ledgerql.create_client(
        executor=sqlite_executor,
        settings=settings,
        http_client=httpx.AsyncClient(base_url="http://app.test"),
    )
    yield client
    await client.close()
