"""
Shared test fixtures.

The mock Supabase client keeps rows in memory per table and applies
eq/ilike/or_ filters, so writes made by one query are visible to the next.
"""

import os
import sys
from pathlib import Path

# Add project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import json
import re
import pytest
import requests
from unittest.mock import MagicMock
from datetime import datetime, timezone
from itertools import count
from typing import Optional

from postgrest.exceptions import APIError

from config.database import NO_ROWS_ERROR_CODE

_ids = count(1)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data=None, count: Optional[int] = None):
        self.data = data if data is not None else []
        self.count = count if count is not None else (
            len(self.data) if isinstance(self.data, list) else 1
        )


# column.ilike.value, where value is either bare or "double-quoted"
_OR_CLAUSE = re.compile(r'(\w+)\.ilike\.("(?:[^"\\]|\\.)*"|[^,]*)')
_UNESCAPE = re.compile(r"\\(.)")


def _ilike(value, pattern: str) -> bool:
    needle = pattern.strip("%").lower()
    return needle in str(value or "").lower()


class MockSupabaseQuery:
    """Mock query builder with chainable methods over an in-memory table."""

    def __init__(self, client: "MockSupabaseClient", table: str):
        self._client = client
        self._table = table
        self._operation = "select"
        self._payload = None
        self._filters = []
        self._order: Optional[tuple[str, bool]] = None
        self._is_single = False
        self._limit: Optional[int] = None

    @property
    def _rows(self) -> list:
        return self._client.rows(self._table)

    # Operations

    def select(self, *args, **kwargs):
        self._operation = "select"
        return self

    def insert(self, data):
        self._operation = "insert"
        self._payload = data
        return self

    def update(self, data):
        self._operation = "update"
        self._payload = data
        return self

    def delete(self):
        self._operation = "delete"
        return self

    # Filters

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self._filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column, values):
        self._filters.append(lambda row: row.get(column) in values)
        return self

    def ilike(self, column, pattern):
        self._filters.append(lambda row: _ilike(row.get(column), pattern))
        return self

    def or_(self, expression: str):
        self._client.or_expressions.append(expression)
        clauses = []
        for column, value in _OR_CLAUSE.findall(expression):
            if value.startswith('"'):
                value = _UNESCAPE.sub(r"\1", value[1:-1])
            clauses.append((column, value))
        self._filters.append(
            lambda row: any(_ilike(row.get(c), p) for c, p in clauses)
        )
        return self

    # Modifiers

    def order(self, column, desc: bool = False, **kwargs):
        self._order = (column, desc)
        return self

    def limit(self, size):
        self._limit = size
        return self

    def range(self, start, end):
        return self

    def single(self):
        self._is_single = True
        return self

    def _matches(self, row: dict) -> bool:
        return all(f(row) for f in self._filters)

    def execute(self) -> MockSupabaseResponse:
        self._client.executed.append((self._table, self._operation))

        if self._table in self._client.failing_tables:
            raise APIError({"message": "connection refused", "code": "08006"})

        if self._operation == "insert":
            rows = self._payload if isinstance(self._payload, list) else [self._payload]
            inserted = []
            for row in rows:
                stored = {
                    **row,
                    "id": f"{self._table}-{next(_ids)}",
                    "created_at": _now(),
                    "updated_at": _now(),
                }
                self._rows.append(stored)
                inserted.append(dict(stored))
            return MockSupabaseResponse(inserted)

        if self._operation == "update":
            updated = []
            for row in self._rows:
                if self._matches(row):
                    row.update(self._payload)
                    updated.append(dict(row))
            return MockSupabaseResponse(updated)

        if self._operation == "delete":
            removed = [dict(row) for row in self._rows if self._matches(row)]
            self._rows[:] = [row for row in self._rows if not self._matches(row)]
            return MockSupabaseResponse(removed)

        data = [dict(row) for row in self._rows if self._matches(row)]
        if self._order:
            column, desc = self._order
            data.sort(key=lambda row: row.get(column) or "", reverse=desc)
        if self._limit is not None:
            data = data[:self._limit]

        if self._is_single:
            # PostgREST rejects single() unless exactly one row matches
            if len(data) != 1:
                raise APIError({
                    "message": "JSON object requested, multiple (or no) rows returned",
                    "code": NO_ROWS_ERROR_CODE,
                    "details": f"The result contains {len(data)} rows",
                    "hint": None,
                })
            return MockSupabaseResponse(data[0], 1)

        return MockSupabaseResponse(data)


class MockSupabaseClient:
    """Mock Supabase client with in-memory tables and a mocked auth API."""

    def __init__(self):
        self._tables: dict[str, list] = {}
        self.failing_tables: set[str] = set()
        self.executed: list[tuple[str, str]] = []
        self.or_expressions: list[str] = []
        self.auth = MagicMock()

    def set_table_data(self, table_name: str, data: list):
        """Configure mock data for a table."""
        self._tables[table_name] = [dict(row) for row in data]

    def rows(self, table_name: str) -> list:
        return self._tables.setdefault(table_name, [])

    def fail_table(self, table_name: str):
        """Make every query against table_name raise a non-absence APIError."""
        self.failing_tables.add(table_name)

    def table(self, name: str) -> MockSupabaseQuery:
        return MockSupabaseQuery(self, name)


# ===================
# MOCK HTTP
# ===================

def make_response(status_code: int, body=None, url: str = "http://sp-api.test") -> requests.Response:
    """Build a real requests.Response with a JSON (or text) body."""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    if body is None:
        response._content = b""
    elif isinstance(body, str):
        response._content = body.encode()
    else:
        response._content = json.dumps(body).encode()
    return response


class FakeClock:
    """Manual clock; sleep() advances time and records the delay."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("products", [
                {"id": "1", "asin": "B0TEST", ...}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase, monkeypatch):
    """
    Patch the database client with mock in every service module.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("products", [...])
            # Now any service created gets the mock
    """
    for module in (
        "config.database",
        "services.product_service",
        "services.shipment_service",
        "services.settings_service",
        "services.auth_service",
    ):
        monkeypatch.setattr(f"{module}.get_supabase_client", lambda: mock_supabase)
    yield mock_supabase


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_http() -> MagicMock:
    """A stand-in for requests.Session; configure request/post/get per test."""
    return MagicMock(spec=requests.Session)
