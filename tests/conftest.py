from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from app.dependencies.auth import get_supabase
from app.main import app


def _like_to_regex(pattern: str) -> re.Pattern:
    out = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\" and i + 1 < len(pattern):
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if ch in ("%", "*"):
            out.append(".*")
        elif ch == "_":
            out.append(".")
        else:
            out.append(re.escape(ch))
        i += 1
    return re.compile("^" + "".join(out) + "$", re.IGNORECASE | re.DOTALL)


@dataclass
class _Query:
    client: "FakeSupabase"
    table: str
    calls: list = field(default_factory=list)
    _single: bool = False

    def _record(self, name: str, *args, **kwargs) -> "_Query":
        self.calls.append((name, args, kwargs))
        return self

    def select(self, columns: str = "*") -> "_Query":
        return self._record("select", columns)

    def eq(self, column: str, value: Any) -> "_Query":
        return self._record("eq", column, value)

    def ilike(self, column: str, pattern: str) -> "_Query":
        return self._record("ilike", column, pattern)

    def order(self, column: str, desc: bool = False) -> "_Query":
        return self._record("order", column, desc=desc)

    def limit(self, size: int) -> "_Query":
        return self._record("limit", size)

    def maybe_single(self) -> "_Query":
        self._single = True
        return self._record("maybe_single")

    def execute(self):
        self.client.executed.append(self)
        failure = self.client.failures.get(self.table)
        if failure is not None:
            raise failure

        rows = list(self.client.rows.get(self.table, []))
        for name, args, kwargs in self.calls:
            if name == "eq":
                column, value = args
                rows = [r for r in rows if r.get(column) == value]
            elif name == "ilike":
                column, pattern = args
                regex = _like_to_regex(pattern)
                rows = [r for r in rows if regex.match(str(r.get(column, "")))]
            elif name == "order":
                rows.sort(key=lambda r: r.get(args[0]) or "", reverse=kwargs["desc"])
            elif name == "limit":
                rows = rows[: args[0]]

        if self._single:
            if not rows:
                return self.client.single_miss_response
            if len(rows) > 1:
                raise APIError({"message": "Multiple rows returned", "code": "PGRST116"})
            return SimpleNamespace(data=rows[0])
        return SimpleNamespace(data=rows)


class _FakeAuth:
    def __init__(self, client: "FakeSupabase"):
        self.client = client

    def get_user(self, token: str):
        self.client.auth_calls.append(token)
        if isinstance(self.client.users_by_token.get(token), Exception):
            raise self.client.users_by_token[token]
        user_id = self.client.users_by_token.get(token)
        user = SimpleNamespace(id=user_id) if user_id else None
        return SimpleNamespace(user=user)


class FakeSupabase:
    """In-memory stand-in for the Supabase client used by the profile page."""

    def __init__(self):
        self.rows: dict[str, list[dict]] = {}
        self.failures: dict[str, Exception] = {}
        self.users_by_token: dict[str, Any] = {}
        self.executed: list[_Query] = []
        self.auth_calls: list[str] = []
        # Some client versions return a response with data=None instead of None
        self.single_miss_response = None
        self.auth = _FakeAuth(self)

    def table(self, name: str) -> _Query:
        return _Query(self, name)

    def queried_tables(self) -> list[str]:
        return [q.table for q in self.executed]


@pytest.fixture
def supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def client(supabase: FakeSupabase):
    app.dependency_overrides[get_supabase] = lambda: supabase
    try:
        yield TestClient(app, follow_redirects=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def alice(supabase: FakeSupabase) -> dict:
    profile = {
        "id": "u-alice",
        "username": "alice",
        "full_name": "Alice A",
        "avatar_url": None,
        "university": "State University",
        "major": "Physics",
        "bio": "Likes lasers.",
    }
    supabase.rows["user_profiles"] = [profile]
    return profile
