# tests/conftest.py
import os
from typing import Any

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

# Settings are read at import time, so configure the env first
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.pop("GEMINI_API_KEY", None)

from ecoquest.main import app  # noqa: E402
from ecoquest.services.supabase_client import get_supabase  # noqa: E402

USER_ID = "8a1f4c1e-0000-4000-8000-000000000001"
TOKEN = "valid-token"


class FakeSupabase:
    """In-memory stand-in for SupabaseClient used through dependency overrides."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict]] = {}
        self.rows: dict[str, dict | None] = {"users": {"id": USER_ID}}
        self.rpc_results: dict[str, Any] = {}
        self.rpc_failures: set[str] = set()
        self.calls: list[tuple] = []

    def for_session(self, session):
        return self

    def calls_to(self, op: str, table: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == op and c[1] == table]

    async def get_user(self, access_token: str) -> dict:
        if access_token != TOKEN:
            raise HTTPException(status_code=401, detail="Invalid or expired session")
        return {"id": USER_ID, "email": "eco@example.com"}

    async def select(self, table, columns="*", filters=(), order=None, limit=None):
        self.calls.append(("select", table, list(filters), order, limit))
        rows = list(self.tables.get(table, []))
        return rows[:limit] if limit else rows

    async def select_one(self, table, columns="*", filters=()):
        self.calls.append(("select_one", table, list(filters)))
        return self.rows.get(table)

    async def insert(self, table, rows):
        self.calls.append(("insert", table, rows))
        if isinstance(rows, dict):
            return [{"id": 1, **rows}]
        return [{"id": i, **r} for i, r in enumerate(rows, start=1)]

    async def upsert(self, table, rows, on_conflict):
        self.calls.append(("upsert", table, rows, on_conflict))
        return [rows]

    async def delete(self, table, filters):
        self.calls.append(("delete", table, list(filters)))
        return []

    async def rpc(self, function, args):
        self.calls.append(("rpc", function, args))
        if function in self.rpc_failures:
            raise HTTPException(status_code=502, detail="Supabase request failed")
        return self.rpc_results.get(function)


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def fake_supabase():
    fake = FakeSupabase()
    app.dependency_overrides[get_supabase] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_supabase, None)


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TOKEN}"}
