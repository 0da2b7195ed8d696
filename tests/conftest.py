"""
Pytest configuration for the farm finance backend tests.

Sets up test environment and global fixtures.
"""
import copy
import os
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest
from unittest.mock import MagicMock

# Disable config validation during tests
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_PUBLISHABLE_KEY", "test-publishable-key")


class FakeResult:
    """Mimics the postgrest APIResponse (only .data is used)."""

    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data


class FakeQuery:
    """
    Minimal postgrest query builder over an in-memory table.

    Supports the calls the finance service makes:
    select/eq/limit, upsert(on_conflict=...), insert and delete/eq.
    """

    def __init__(self, table: "FakeTable"):
        self.table = table
        self.action = "select"
        self.payload: Optional[Dict[str, Any]] = None
        self.columns = "*"
        self.filters: Dict[str, Any] = {}
        self.row_limit: Optional[int] = None
        self.on_conflict: Optional[str] = None

    def select(self, columns: str = "*"):
        self.action = "select"
        self.columns = columns
        return self

    def eq(self, column: str, value: Any):
        self.filters[column] = value
        return self

    def limit(self, count: int):
        self.row_limit = count
        return self

    def upsert(self, payload: Dict[str, Any], on_conflict: str = ""):
        self.action = "upsert"
        self.payload = payload
        self.on_conflict = on_conflict
        return self

    def insert(self, payload: Dict[str, Any]):
        self.action = "insert"
        self.payload = payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(row.get(k) == v for k, v in self.filters.items())

    def execute(self) -> FakeResult:
        self.table.calls.append(self.action)
        rows = self.table.rows

        if self.action == "select":
            found = [row for row in rows if self._matches(row)]
            if self.row_limit is not None:
                found = found[: self.row_limit]
            if self.columns != "*":
                wanted = [c.strip() for c in self.columns.split(",")]
                found = [{c: row.get(c) for c in wanted} for row in found]
            return FakeResult(copy.deepcopy(found))

        now = datetime.now(timezone.utc).isoformat()

        if self.action == "upsert":
            key = self.on_conflict
            for row in rows:
                if key and row.get(key) == self.payload.get(key):
                    row.update(copy.deepcopy(self.payload))
                    row["updated_at"] = now
                    return FakeResult([copy.deepcopy(row)])
            return self._insert(now)

        if self.action == "insert":
            return self._insert(now)

        if self.action == "delete":
            removed = [row for row in rows if self._matches(row)]
            self.table.rows = [row for row in rows if not self._matches(row)]
            return FakeResult(copy.deepcopy(removed))

        raise AssertionError(f"unsupported action {self.action}")

    def _insert(self, now: str) -> FakeResult:
        row = {
            "id": str(uuid.uuid4()),
            **copy.deepcopy(self.payload),
            "created_at": now,
            "updated_at": now,
        }
        self.table.rows.append(row)
        return FakeResult([copy.deepcopy(row)])


class FakeTable:
    def __init__(self):
        self.rows: List[Dict[str, Any]] = []
        self.calls: List[str] = []


class FakeSupabaseClient:
    """In-memory stand-in for supabase.Client (table() access only)."""

    def __init__(self):
        self.tables: Dict[str, FakeTable] = {}

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.tables.setdefault(name, FakeTable()))

    def rows(self, name: str = "farm_finances") -> List[Dict[str, Any]]:
        return self.tables.setdefault(name, FakeTable()).rows


@pytest.fixture
def supabase_client():
    """
    Mock Supabase client for error-path tests.
    Returns a MagicMock that simulates Supabase client behavior.
    """
    mock_client = MagicMock()
    return mock_client


@pytest.fixture
def fake_store():
    """Stateful in-memory Supabase client shared by every request in a test."""
    return FakeSupabaseClient()


@pytest.fixture
def sample_record():
    """The example body from the API docs: a first-time user's sheet."""
    return {
        "expense_categories": [
            {"id": "1", "name": "Seeds", "amount": 100, "isRequired": True}
        ],
        "other_expenses": [],
        "total_expense": 100,
    }
