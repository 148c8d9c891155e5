"""Unit tests for the fluent builder: immutability, chaining rules, awaiting."""

from __future__ import annotations

import pytest

from ledgerql.client.backends import QueryBackend
from ledgerql.client.query import (
    DeleteQueryBuilder,
    QueryBuilder,
    SingleQueryBuilder,
    UpsertQueryBuilder,
)
from ledgerql.compile.builder import StatementBuilder
from ledgerql.compile.postgres import PostgresCompiler
from ledgerql.errors import QueryStateError
from ledgerql.schema.descriptor import QueryDescriptor
from ledgerql.schema.result import QueryResult


class _CountingBackend(QueryBackend):
    def __init__(self) -> None:
        self.seen: list[QueryDescriptor] = []

    async def _run(self, descriptor: QueryDescriptor) -> QueryResult:
        self.seen.append(descriptor)
        return QueryResult(data=[{"kind": descriptor.kind}])


@pytest.fixture()
def backend() -> _CountingBackend:
    return _CountingBackend()


@pytest.fixture()
def qb(backend) -> QueryBuilder:
    return QueryBuilder(backend, QueryDescriptor(table="invoices"))


def test_chaining_leaves_receiver_unchanged(qb):
    filtered = qb.eq("status", "sent")
    assert qb.descriptor.conditions == ()
    assert len(filtered.descriptor.conditions) == 1


def test_branches_do_not_share_filters(qb):
    base = qb.eq("user_id", "u")
    a = base.eq("status", "sent")
    b = base.eq("status", "paid")
    assert [c.value for c in a.descriptor.conditions] == ["u", "sent"]
    assert [c.value for c in b.descriptor.conditions] == ["u", "paid"]


def test_in_list_mutation_does_not_leak(qb):
    ids = [1]
    query = qb.in_("id", ids)
    builder = StatementBuilder(PostgresCompiler())
    before = builder.build(query.descriptor)
    ids.append(2)
    after = builder.build(query.descriptor)
    assert after.sql == before.sql == 'SELECT * FROM "invoices" WHERE "id" IN ($1)'
    assert after.params == [1]


def test_default_operation_is_select(qb):
    assert qb.descriptor.kind == "select"
    assert not qb.descriptor.is_mutation


def test_builder_types(qb):
    assert isinstance(qb.single(), SingleQueryBuilder)
    assert isinstance(qb.upsert({"id": 1}), UpsertQueryBuilder)
    assert isinstance(qb.delete(), DeleteQueryBuilder)
    assert isinstance(qb.insert({"id": 1}), QueryBuilder)
    assert isinstance(qb.update({"status": "x"}), QueryBuilder)


def test_restricted_builders_hide_methods(qb):
    single = qb.single()
    assert hasattr(single, "select")
    assert not hasattr(single, "eq")
    assert not hasattr(single, "insert")

    upsert = qb.upsert({"id": 1})
    assert hasattr(upsert, "single")
    assert not hasattr(upsert, "eq")

    delete = qb.delete()
    assert hasattr(delete, "in_")
    assert not hasattr(delete, "select")
    assert not hasattr(delete, "order")


def test_single_sets_flag_and_limit(qb):
    desc = qb.limit(50).single().descriptor
    assert desc.single is True
    assert desc.limit == 1


def test_second_mutation_raises(qb):
    pending = qb.insert({"number": "A"})
    with pytest.raises(QueryStateError):
        pending.update({"number": "B"})
    with pytest.raises(QueryStateError):
        pending.delete()


def test_insert_records_bulk_shape(qb):
    assert qb.insert({"a": 1}).descriptor.operation.bulk is False
    assert qb.insert([{"a": 1}]).descriptor.operation.bulk is True


def test_select_after_mutation_sets_returning(qb):
    desc = qb.update({"status": "paid"}).eq("id", 1).select("id, status").descriptor
    assert desc.kind == "update"
    assert desc.columns == "id, status"


@pytest.mark.asyncio
async def test_await_runs_once_per_await(qb, backend):
    query = qb.eq("status", "sent")
    first = await query
    second = await query
    assert first.data == [{"kind": "select"}]
    assert second.data == first.data
    assert len(backend.seen) == 2
    assert backend.seen[0] is backend.seen[1]


@pytest.mark.asyncio
async def test_execute_matches_await(qb, backend):
    result = await qb.delete().eq("id", 1).execute()
    assert result.data == [{"kind": "delete"}]
    assert backend.seen[0].kind == "delete"


@pytest.mark.asyncio
async def test_vacuous_writes_skip_backend(qb, backend):
    assert (await qb.insert([])).data == []
    assert (await qb.upsert([])).data == []
    assert backend.seen == []


def test_repr_mentions_kind_and_table(qb):
    text = repr(qb.eq("id", 1).delete())
    assert "DeleteQueryBuilder" in text
    assert "delete" in text
    assert "'invoices'" in text
