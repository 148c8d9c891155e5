"""Descriptor → REST request compiler.

Used where code runs without database credentials and reaches the
database through the application's ``/api/<table>`` routes instead.

Query-string encoding
---------------------
* ``eq`` filters become ``column=value``.
* Every other operator becomes ``column__<operator>=value``; a ``NOT``
  filter becomes ``column__not_<operator>=value``.
* ``order=column.asc|desc`` and ``limit=n``.

Tenant scoping
--------------
The ``user_id`` of the authenticated session is stamped onto **every**
request (query string for reads and deletes, JSON body for writes).  Any
``user_id`` filter or payload key supplied by the caller is overridden.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any

from ledgerql.errors import CompilationError
from ledgerql.schema.conditions import Condition, FilterOp
from ledgerql.schema.descriptor import (
    InsertOperation,
    QueryDescriptor,
    UpdateOperation,
    UpsertOperation,
)

TENANT_COLUMN = "user_id"


@dataclass
class HttpRequest:
    """One compiled API call.

    Attributes:
        method: HTTP verb.
        path: Request path relative to the API base URL.
        params: Query-string parameters, in insertion order.
        json: JSON body, or ``None`` for body-less requests.
    """

    method: str
    path: str
    params: dict[str, str] = field(default_factory=dict)
    json: Any = None


def format_param(value: Any) -> str:
    """Render a filter value for a query string."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return ",".join(format_param(v) for v in value)
    return str(value)


class HttpCompiler:
    """Compiles descriptors to :class:`HttpRequest` objects.

    Args:
        api_prefix: Path prefix of the per-table API routes.
    """

    def __init__(self, api_prefix: str = "/api") -> None:
        self._prefix = api_prefix.rstrip("/")

    def path_for(self, name: str) -> str:
        return f"{self._prefix}/{name}"

    def build(self, descriptor: QueryDescriptor, user_id: str) -> HttpRequest:
        """Compile ``descriptor`` for the session owned by ``user_id``.

        Raises:
            CompilationError: If the operation needs a filter the API route
                cannot do without (``id`` for update and delete).
        """
        if not user_id:
            raise CompilationError("HTTP requests require a user_id.", clause="user_id")
        op = descriptor.operation
        path = self.path_for(descriptor.table)

        if isinstance(op, InsertOperation):
            return HttpRequest("POST", path, json=self._stamp(op.rows, user_id, single=not op.bulk))

        if isinstance(op, UpsertOperation):
            body = self._stamp(op.rows, user_id, single=not op.bulk)
            return HttpRequest("POST", path, json=self._mark_upsert(body, op))

        if isinstance(op, UpdateOperation):
            row_id = self._require_id(descriptor, "update")
            return HttpRequest("PUT", path, json={**op.patch, TENANT_COLUMN: user_id, "id": row_id})

        if descriptor.kind == "delete":
            row_id = self._require_id(descriptor, "delete")
            params = {"id": format_param(row_id), TENANT_COLUMN: user_id}
            return HttpRequest("DELETE", path, params=params)

        return HttpRequest("GET", path, params=self._build_read_params(descriptor, user_id))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _build_read_params(self, descriptor: QueryDescriptor, user_id: str) -> dict[str, str]:
        params: dict[str, str] = {TENANT_COLUMN: user_id}
        for cond in descriptor.conditions:
            if cond.column == TENANT_COLUMN:
                continue
            params[self._param_key(cond)] = format_param(cond.value)
        if descriptor.order is not None:
            direction = "asc" if descriptor.order.ascending else "desc"
            params["order"] = f"{descriptor.order.column}.{direction}"
        if descriptor.limit is not None:
            params["limit"] = str(descriptor.limit)
        return params

    @staticmethod
    def _param_key(cond: Condition) -> str:
        if cond.operator is FilterOp.EQ:
            return cond.column
        if cond.operator is FilterOp.NOT:
            return f"{cond.column}__not_{cond.negated.value}"
        return f"{cond.column}__{cond.operator.value}"

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @staticmethod
    def _stamp(rows: list[dict[str, Any]], user_id: str, single: bool) -> Any:
        stamped = [{**row, TENANT_COLUMN: user_id} for row in rows]
        return stamped[0] if single else stamped

    @staticmethod
    def _mark_upsert(body: Any, op: UpsertOperation) -> Any:
        markers: dict[str, Any] = {"_upsert": True}
        if op.on_conflict:
            markers["_onConflict"] = op.on_conflict
        if op.ignore_duplicates:
            markers["_ignoreDuplicates"] = True
        if isinstance(body, dict):
            return {**body, **markers}
        return [{**row, **markers} for row in body]

    @staticmethod
    def _require_id(descriptor: QueryDescriptor, action: str) -> Any:
        cond = descriptor.find_condition("id")
        if cond is None:
            raise CompilationError(
                f"HTTP {action} on '{descriptor.table}' requires an eq('id', …) filter.",
                clause="id",
            )
        return cond.value
