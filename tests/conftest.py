"""Shared test fixtures for the Tvog AI test suite.

Supabase is replaced by an in-memory fake of the PostgREST query builder:
responses are queued per table (a queued exception is raised by execute) and
every chained call is recorded so tests can assert on the filters a service
applied.
"""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock

import pytest

from fastapi.testclient import TestClient

USER_ID = "550e8400-e29b-41d4-a716-446655440000"
EMAIL = "user@example.com"
ACCESS_TOKEN = "access_token_123"
CONVERSATION_ID = "c0ffee00-0000-4000-8000-000000000001"
TIMESTAMP = "2025-11-14T14:33:51+00:00"


class FakeResult:
    def __init__(self, data: Any) -> None:
        self.data = data


class FakeQuery:
    def __init__(self, db: FakeSupabase, table: str) -> None:
        self.db = db
        self.table = table
        self.calls: list[tuple[str, tuple, dict]] = []
        db.queries.append(self)

    def __getattr__(self, name: str):
        def record(*args: Any, **kwargs: Any) -> FakeQuery:
            self.calls.append((name, args, kwargs))
            return self

        return record

    @property
    def not_(self) -> FakeQuery:
        self.calls.append(("not_", (), {}))
        return self

    def execute(self) -> FakeResult:
        queued = self.db.responses[self.table]
        data = queued.popleft() if queued else []
        if isinstance(data, Exception):
            raise data
        return FakeResult(data)

    def called(self, name: str) -> list[tuple]:
        return [args for call, args, _ in self.calls if call == name]

    @property
    def operation(self) -> str | None:
        for call, _, _ in self.calls:
            if call in ("select", "insert", "update", "upsert", "delete"):
                return call
        return None

    def payload(self) -> Any:
        for call, args, _ in self.calls:
            if call in ("insert", "update", "upsert"):
                return args[0]
        return None


class FakeSupabase:
    def __init__(self) -> None:
        self.responses: dict[str, deque] = defaultdict(deque)
        self.queries: list[FakeQuery] = []
        self.storage = MagicMock()
        self.bucket = self.storage.from_.return_value
        self.auth = MagicMock()
        self.rpc = MagicMock()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def queue(self, table: str, *data: Any) -> None:
        self.responses[table].extend(data)

    def queries_for(self, table: str, operation: str | None = None) -> list[FakeQuery]:
        return [
            q for q in self.queries
            if q.table == table and (operation is None or q.operation == operation)
        ]


def make_conversation(**overrides: Any) -> dict:
    row = {
        "id": CONVERSATION_ID,
        "user_id": USER_ID,
        "title": "New Chat",
        "created_at": TIMESTAMP,
        "updated_at": TIMESTAMP,
    }
    row.update(overrides)
    return row


def make_message(**overrides: Any) -> dict:
    row = {
        "id": "m-1",
        "conversation_id": CONVERSATION_ID,
        "role": "user",
        "content": "Hello",
        "created_at": TIMESTAMP,
        "file_url": None,
        "file_name": None,
        "file_type": None,
        "file_size": None,
    }
    row.update(overrides)
    return row


@pytest.fixture
def current_user() -> dict:
    return {
        "id": USER_ID,
        "email": EMAIL,
        "is_anonymous": False,
        "email_confirmed_at": TIMESTAMP,
        "user_metadata": {},
        "app_metadata": {},
        "created_at": TIMESTAMP,
        "updated_at": TIMESTAMP,
        "access_token": ACCESS_TOKEN,
    }


@pytest.fixture
def fake_db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def app(fake_db: FakeSupabase, current_user: dict) -> Generator:
    from tvog.core.dependencies import get_current_user, get_user_supabase
    from tvog.main import app

    app.dependency_overrides[get_current_user] = lambda: current_user
    app.dependency_overrides[get_user_supabase] = lambda: fake_db
    app.state.limiter.reset()
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_auth_cache() -> Generator[None, None, None]:
    from tvog.modules.auth.service import clear_auth_cache

    clear_auth_cache()
    yield
    clear_auth_cache()
