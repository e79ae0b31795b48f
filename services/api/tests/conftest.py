"""Shared fixtures: an in-memory stand-in for the database REST gateway.

FakeGateway answers the subset of PostgREST the client speaks (eq, ilike,
gte, not.is.null filters, order, offset/limit, exact counts, HEAD, inserts)
through httpx.MockTransport, so services run against real HTTP requests.
"""

from datetime import datetime
import json
import re
from typing import Any

import httpx
from postgrest import AsyncPostgrestClient
import pytest

from reciters_api.stores.cache import TTLCache
from reciters_api.stores.supabase import create_client

RESERVED_PARAMS = {"select", "order", "offset", "limit", "columns"}
OBJECT_MEDIA_TYPE = "application/vnd.pgrst.object+json"


def _like_to_regex(pattern: str) -> re.Pattern[str]:
    out: list[str] = []
    chars = iter(pattern)
    for ch in chars:
        if ch == "\\":
            out.append(re.escape(next(chars, "\\")))
        elif ch in "%*":
            out.append(".*")
        elif ch == "_":
            out.append(".")
        else:
            out.append(re.escape(ch))
    return re.compile("".join(out), re.IGNORECASE | re.DOTALL)


def _matches(value: Any, expr: str) -> bool:
    op, _, arg = expr.partition(".")
    if op == "eq":
        return value is not None and str(value) == arg
    if op == "ilike":
        return value is not None and _like_to_regex(arg).fullmatch(str(value)) is not None
    if op == "gte":
        return value is not None and datetime.fromisoformat(str(value)) >= datetime.fromisoformat(arg)
    if op == "is" and arg == "null":
        return value is None
    if op == "not":
        return not _matches(value, arg)
    raise AssertionError(f"unsupported filter: {expr}")


def _sort_key(value: Any) -> tuple[bool, Any]:
    return (value is None, value if value is not None else 0)


class FakeGateway:
    """In-memory tables served over httpx.MockTransport."""

    def __init__(self, tables: dict[str, list[dict[str, Any]]] | None = None):
        self.tables: dict[str, list[dict[str, Any]]] = tables or {}
        self.requests: list[httpx.Request] = []
        self.failure: tuple[int, dict[str, Any]] | None = None
        self.transport_error: Exception | None = None
        self._next_id = 1000

    def fail(self, status: int = 500, message: str = "boom", code: str = "XX000") -> None:
        """Make every following request fail with a PostgREST-style error body."""
        self.failure = (status, {"message": message, "code": code, "details": None, "hint": None})

    def client(self) -> AsyncPostgrestClient:
        return create_client(
            "http://gateway.test/rest/v1",
            "test-key",
            transport=httpx.MockTransport(self.handler),
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.transport_error is not None:
            raise self.transport_error
        if self.failure is not None:
            status, body = self.failure
            return httpx.Response(status, json=body)

        table = request.url.path.rsplit("/", 1)[-1]
        if request.method == "POST":
            return self._insert(request, table)
        return self._select(request, table)

    def _insert(self, request: httpx.Request, table: str) -> httpx.Response:
        created = []
        payload = json.loads(request.content)
        for row in payload if isinstance(payload, list) else [payload]:
            stored = {"id": self._next_id, "created_at": "2026-10-19T09:00:00+00:00", **row}
            self._next_id += 1
            self.tables.setdefault(table, []).append(stored)
            created.append(stored)
        if request.headers.get("accept") == OBJECT_MEDIA_TYPE:
            return httpx.Response(201, json=created[0])
        return httpx.Response(201, json=created)

    def _select(self, request: httpx.Request, table: str) -> httpx.Response:
        params = request.url.params
        rows = list(self.tables.get(table, []))
        for key, value in params.multi_items():
            if key not in RESERVED_PARAMS:
                rows = [row for row in rows if _matches(row.get(key), value)]

        order = params.get("order")
        if order:
            for part in reversed(order.split(",")):
                column, direction = part.rsplit(".", 1)
                rows.sort(key=lambda row: _sort_key(row.get(column)), reverse=direction == "desc")

        total = len(rows)
        offset = int(params.get("offset", 0))
        if "limit" in params:
            rows = rows[offset : offset + int(params["limit"])]
        else:
            rows = rows[offset:]

        columns = params.get("select", "*")
        if columns != "*":
            wanted = columns.split(",")
            rows = [{c: row.get(c) for c in wanted} for row in rows]

        headers = {}
        if "count=exact" in request.headers.get("prefer", ""):
            span = f"{offset}-{offset + len(rows) - 1}" if rows else "*"
            headers["Content-Range"] = f"{span}/{total}"

        if request.method == "HEAD":
            return httpx.Response(200, headers=headers)
        return httpx.Response(200, json=rows, headers=headers)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
async def db(gateway: FakeGateway):
    client = gateway.client()
    yield client
    await client.aclose()


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TTLCache:
    return TTLCache(clock=clock)
