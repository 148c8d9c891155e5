"""End-to-end tests: builder → SQL → SQLite, plus SQLBackend envelope rules."""

from __future__ import annotations

import sqlite3

import httpx
import pytest

import ledgerql
from ledgerql.compile.postgres import PostgresCompiler
from ledgerql.compile.registry import CompilerFactory
from ledgerql.config import Settings
from ledgerql.errors import BackendError, CompilationError, ConfigError
from ledgerql.execute.asyncpg_executor import AsyncpgExecutor
from tests.conftest import OTHER, USER
from tests.fixtures.executors import FailingExecutor, RecordingExecutor


def _client(executor, settings: Settings) -> ledgerql.SQLClient:
    return ledgerql.create_client(
        executor=executor,
        settings=settings,
        http_client=httpx.AsyncClient(base_url="http://app.test"),
    )


# ---------------------------------------------------------------------------
# SELECT
# ---------------------------------------------------------------------------


class TestSelect:
    @pytest.mark.asyncio
    async def test_filtered_and_ordered(self, sql_client):
        result = await (
            sql_client.from_("invoices")
            .select("id, number")
            .eq("user_id", USER)
            .order("id", ascending=False)
        )
        assert result.error is None
        assert [r["number"] for r in result.data] == ["INV-003", "INV-002", "INV-001"]
        assert result.count is None

    @pytest.mark.asyncio
    async def test_in_and_not(self, sql_client):
        result = await (
            sql_client.from_("invoices")
            .select("number")
            .eq("user_id", USER)
            .not_("status", "in", ["draft", "paid"])
        )
        assert result.data == [{"number": "INV-001"}]

    @pytest.mark.asyncio
    async def test_empty_in_matches_nothing(self, sql_client):
        result = await sql_client.from_("invoices").in_("id", [])
        assert result.data == []
        assert result.error is None

    @pytest.mark.asyncio
    async def test_is_null_and_is_not_null(self, sql_client):
        archived = await sql_client.from_("customers").select("id").not_("archived_at", "is", None)
        active = await sql_client.from_("customers").select("id").is_("archived_at", None).order("id")
        assert archived.data == [{"id": 2}]
        assert active.data == [{"id": 1}, {"id": 3}]

    @pytest.mark.asyncio
    async def test_is_true(self, sql_client):
        result = await sql_client.from_("invoices").select("number").is_("paid", True)
        assert result.data == [{"number": "INV-002"}]

    @pytest.mark.asyncio
    async def test_ilike_falls_back_to_like(self, sql_client):
        result = await sql_client.from_("customers").select("name").ilike("name", "acme%")
        assert result.data == [{"name": "Acme"}]

    @pytest.mark.asyncio
    async def test_range_and_limit(self, sql_client):
        result = await (
            sql_client.from_("invoices")
            .select("id")
            .gt("total", 0)
            .lt("total", 1000)
            .order("total")
            .limit(2)
        )
        assert result.data == [{"id": 2}, {"id": 1}]

    @pytest.mark.asyncio
    async def test_single_found(self, sql_client):
        result = await sql_client.from_("customers").select("name").eq("id", 1).single()
        assert result.data == {"name": "Acme"}

    @pytest.mark.asyncio
    async def test_single_on_zero_rows(self, sql_client):
        result = await sql_client.from_("customers").eq("id", 999).single()
        assert result.data is None
        assert result.error is None

    @pytest.mark.asyncio
    async def test_exact_count(self, sql_client):
        result = await sql_client.from_("invoices").select("*", count="exact").eq("status", "sent")
        assert result.count == 2
        assert len(result.data) == 2

    @pytest.mark.asyncio
    async def test_table_alias(self, sql_client):
        result = await sql_client.table("customers").select("id").eq("user_id", OTHER)
        assert result.data == [{"id": 3}]


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


class TestMutations:
    @pytest.mark.asyncio
    async def test_insert_returns_rows(self, sql_client):
        result = await sql_client.from_("invoices").insert(
            [
                {"user_id": USER, "number": "INV-010", "total": 10.0},
                {"user_id": USER, "number": "INV-011", "total": 11.0},
            ]
        )
        assert result.error is None
        assert [r["number"] for r in result.data] == ["INV-010", "INV-011"]
        assert all(r["status"] == "draft" for r in result.data)

    @pytest.mark.asyncio
    async def test_insert_with_returning_projection(self, sql_client):
        result = await (
            sql_client.from_("invoices")
            .insert({"user_id": USER, "number": "INV-012"})
            .select("number, status")
        )
        assert result.data == [{"number": "INV-012", "status": "draft"}]

    @pytest.mark.asyncio
    async def test_insert_missing_key_binds_null(self, sql_client):
        result = await sql_client.from_("invoices").insert(
            [
                {"user_id": USER, "number": "INV-020", "notes": "first"},
                {"user_id": USER, "number": "INV-021"},
            ]
        )
        assert [r["notes"] for r in result.data] == ["first", None]

    @pytest.mark.asyncio
    async def test_insert_nothing_runs_no_query(self, settings):
        executor = RecordingExecutor()
        async with _client(executor, settings) as client:
            result = await client.from_("invoices").insert([])
        assert result.data == []
        assert result.error is None
        assert executor.calls == []

    @pytest.mark.asyncio
    async def test_update_returns_changed_rows(self, sql_client):
        result = await (
            sql_client.from_("invoices")
            .update({"status": "paid", "paid": True})
            .eq("id", 1)
            .select("id, status, paid")
        )
        assert result.data == [{"id": 1, "status": "paid", "paid": 1}]

    @pytest.mark.asyncio
    async def test_update_single(self, sql_client):
        result = await sql_client.from_("invoices").update({"notes": "n"}).eq("id", 3).single()
        assert result.data["notes"] == "n"

    @pytest.mark.asyncio
    async def test_delete(self, sql_client):
        deleted = await sql_client.from_("invoices").delete().eq("id", 3)
        assert deleted.data is None
        assert deleted.error is None
        remaining = await sql_client.from_("invoices").select("id").eq("user_id", USER)
        assert [r["id"] for r in remaining.data] == [1, 2]

    @pytest.mark.asyncio
    async def test_client_delete_entry_point(self, sql_client):
        result = await sql_client.delete("invoices").eq("user_id", OTHER)
        assert result.error is None
        rows = await sql_client.execute_sql("SELECT COUNT(*) AS n FROM invoices WHERE user_id = ?", [OTHER])
        assert rows == [{"n": 0}]

    @pytest.mark.asyncio
    async def test_upsert_updates_on_conflict(self, sql_client):
        result = await sql_client.from_("customers").upsert(
            {"email": "billing@acme.test", "name": "Acme GmbH", "user_id": USER},
            on_conflict="email",
        )
        assert result.error is None
        assert result.data[0]["id"] == 1
        assert result.data[0]["name"] == "Acme GmbH"

    @pytest.mark.asyncio
    async def test_upsert_ignore_duplicates_returns_database_output(self, sql_client):
        result = await sql_client.from_("customers").upsert(
            [
                {"email": "billing@acme.test", "name": "Ignored", "user_id": USER},
                {"email": "new@acme.test", "name": "Fresh", "user_id": USER},
            ],
            ignore_duplicates=True,
        )
        assert [r["name"] for r in result.data] == ["Fresh"]
        acme = await sql_client.from_("customers").select("name").eq("id", 1).single()
        assert acme.data == {"name": "Acme"}

    @pytest.mark.asyncio
    async def test_count_is_not_reported_for_mutations(self, sql_client):
        result = await (
            sql_client.from_("invoices")
            .update({"status": "void"})
            .eq("id", 1)
            .select("id", count="exact")
        )
        assert result.count is None


# ---------------------------------------------------------------------------
# Envelope and errors
# ---------------------------------------------------------------------------


class TestErrors:
    @pytest.mark.asyncio
    async def test_sql_error_is_wrapped(self, sql_client):
        result = await sql_client.from_("no_such_table").select()
        assert result.data is None
        assert isinstance(result.error, BackendError)
        assert "no such table" in str(result.error)
        assert isinstance(result.error.__cause__, sqlite3.OperationalError)

    @pytest.mark.asyncio
    async def test_constraint_violation_is_wrapped(self, sql_client):
        result = await sql_client.from_("invoices").insert({"user_id": USER, "number": "INV-001"})
        assert result.data is None
        assert "UNIQUE" in str(result.error)

    @pytest.mark.asyncio
    async def test_driver_failure(self, settings):
        async with _client(FailingExecutor(RuntimeError("connection reset")), settings) as client:
            result = await client.from_("invoices").eq("id", 1)
        assert result.data is None
        assert str(result.error) == "connection reset"
        with pytest.raises(BackendError):
            result.raise_for_error()

    @pytest.mark.asyncio
    async def test_compilation_error_is_returned(self, settings):
        settings.strict_insert_columns = True
        executor = RecordingExecutor()
        async with _client(executor, settings) as client:
            result = await client.from_("invoices").insert([{"a": 1}, {"b": 2}])
        assert isinstance(result.error, CompilationError)
        assert executor.calls == []

    @pytest.mark.asyncio
    async def test_missing_database_url_propagates(self, settings, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("LEDGERQL_DATABASE_URL", raising=False)
        ledgerql.get_settings.cache_clear()
        settings.database_url = None
        try:
            async with _client(AsyncpgExecutor(), settings) as client:
                with pytest.raises(ConfigError) as exc_info:
                    await client.from_("invoices").select()
        finally:
            ledgerql.get_settings.cache_clear()
        assert exc_info.value.setting == "database_url"

    @pytest.mark.asyncio
    async def test_raise_for_error_on_success(self, sql_client):
        result = await sql_client.from_("customers").eq("id", 1)
        assert result.raise_for_error() is result
        assert result.ok


# ---------------------------------------------------------------------------
# Client wiring
# ---------------------------------------------------------------------------


class TestClientWiring:
    def test_dialect_follows_executor(self, sql_client):
        assert sql_client.dialect == "sqlite"

    def test_explicit_dialect_wins(self, settings):
        client = ledgerql.create_client(executor=RecordingExecutor(), dialect="sqlite", settings=settings)
        assert client.dialect == "sqlite"

    def test_unknown_dialect(self, settings):
        with pytest.raises(ConfigError):
            ledgerql.create_client(executor=RecordingExecutor(), dialect="oracle", settings=settings)

    @pytest.mark.asyncio
    async def test_custom_dialect_registered_by_decorator(self, settings):
        @CompilerFactory.register("postgres_qmark")
        class QmarkCompiler(PostgresCompiler):
            @property
            def dialect_name(self) -> str:
                return "postgres_qmark"

            def param_placeholder(self, index: int) -> str:
                return "?"

        try:
            executor = RecordingExecutor()
            async with ledgerql.create_client(
                executor=executor,
                dialect="postgres_qmark",
                settings=settings,
                http_client=httpx.AsyncClient(base_url="http://app.test"),
            ) as client:
                assert client.dialect == "postgres_qmark"
                await client.from_("invoices").eq("id", 1)
        finally:
            CompilerFactory.unregister("postgres_qmark")
        assert executor.calls == [('SELECT * FROM "invoices" WHERE "id" = ?', [1])]
        assert "postgres_qmark" not in CompilerFactory.registered_targets()

    @pytest.mark.asyncio
    async def test_execute_sql_raises(self, sql_client):
        with pytest.raises(sqlite3.OperationalError):
            await sql_client.execute_sql("SELECT * FROM missing")

    @pytest.mark.asyncio
    async def test_close_closes_executor(self, settings):
        executor = RecordingExecutor()
        client = _client(executor, settings)
        await client.close()
        assert executor.closed

    @pytest.mark.asyncio
    async def test_statement_sent_to_executor(self, settings):
        executor = RecordingExecutor(rows=[{"id": 1}])
        async with _client(executor, settings) as client:
            result = await client.from_("invoices").select("id").eq("a", 1).eq("b", 2)
        assert executor.calls == [('SELECT id FROM "invoices" WHERE "a" = $1 AND "b" = $2', [1, 2])]
        assert result.data == [{"id": 1}]
