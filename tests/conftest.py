"""
pytest configuration and fixtures
In-memory stand-in for the asyncpg pool so the API runs without PostgreSQL.
"""

import re
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

import asyncpg
import pytest
from fastapi.testclient import TestClient

from users_api.app import create_app
from users_api.config.settings import Settings

_SET_COLUMN = re.compile(r"(\w+) = \$(\d+)")
_UPDATE = re.compile(r"^UPDATE users SET (?P<set>.+) WHERE id = \$(?P<id>\d+)")


def _normalize(query: str) -> str:
    return " ".join(query.split())


class FakeDatabase:
    """Holds the users table and records every statement run against it"""

    def __init__(self):
        self.rows: Dict[int, Dict[str, Any]] = {}
        self.next_id = 1
        self.table_created = False
        self.available = True
        self.statements: List[str] = []

    def _check_unique_email(self, email: str, ignore_id: Optional[int] = None) -> None:
        for row_id, row in self.rows.items():
            if row_id != ignore_id and row["email"] == email:
                raise asyncpg.UniqueViolationError(
                    'duplicate key value violates unique constraint "users_email_key"'
                )

    def insert(self, name: str, email: str, age: Optional[int]) -> Dict[str, Any]:
        self._check_unique_email(email)
        row = {
            "id": self.next_id,
            "name": name,
            "email": email,
            "age": age,
            "created_at": datetime(2024, 1, 1, 12, 0, 0),
        }
        self.rows[self.next_id] = row
        self.next_id += 1
        return dict(row)

    def update(self, query: str, args) -> Optional[Dict[str, Any]]:
        match = _UPDATE.match(query)
        assert match, f"Unexpected UPDATE: {query}"
        user_id = args[int(match.group("id")) - 1]
        row = self.rows.get(user_id)
        if row is None:
            return None
        changes = {
            column: args[int(position) - 1]
            for column, position in _SET_COLUMN.findall(match.group("set"))
        }
        if "email" in changes:
            self._check_unique_email(changes["email"], ignore_id=user_id)
        row.update(changes)
        return dict(row)


class FakeConnection:
    def __init__(self, db: FakeDatabase):
        self.db = db

    @asynccontextmanager
    async def transaction(self):
        snapshot = ({k: dict(v) for k, v in self.db.rows.items()}, self.db.next_id)
        try:
            yield
        except Exception:
            self.db.rows, self.db.next_id = snapshot
            raise

    async def execute(self, query: str, *args) -> str:
        q = _normalize(query)
        self.db.statements.append(q)
        if q.startswith("CREATE TABLE IF NOT EXISTS users"):
            self.db.table_created = True
            return "CREATE TABLE"
        if q.startswith("INSERT INTO users"):
            self.db.insert(*args)
            return "INSERT 0 1"
        if q.startswith("DELETE FROM users WHERE id = $1"):
            removed = self.db.rows.pop(args[0], None)
            return f"DELETE {1 if removed else 0}"
        raise AssertionError(f"Unexpected execute: {q}")

    async def fetch(self, query: str, *args) -> List[Dict[str, Any]]:
        q = _normalize(query)
        self.db.statements.append(q)
        if q.startswith("SELECT id, name, email, age, created_at FROM users ORDER BY id"):
            return [dict(self.db.rows[k]) for k in sorted(self.db.rows)]
        raise AssertionError(f"Unexpected fetch: {q}")

    async def fetchrow(self, query: str, *args) -> Optional[Dict[str, Any]]:
        q = _normalize(query)
        self.db.statements.append(q)
        if q.startswith("SELECT id, name, email, age, created_at FROM users WHERE id = $1"):
            row = self.db.rows.get(args[0])
            return dict(row) if row else None
        if q.startswith("INSERT INTO users"):
            return self.db.insert(*args)
        if q.startswith("UPDATE users"):
            return self.db.update(q, args)
        raise AssertionError(f"Unexpected fetchrow: {q}")

    async def fetchval(self, query: str, *args):
        q = _normalize(query)
        self.db.statements.append(q)
        if q == "SELECT 1":
            return 1
        if q == "SELECT COUNT(*) FROM users":
            return len(self.db.rows)
        raise AssertionError(f"Unexpected fetchval: {q}")


class FakePool:
    """Mimics the parts of ``asyncpg.Pool`` the service uses"""

    def __init__(self, db: FakeDatabase):
        self.db = db
        self.closed = False
        self.acquired = 0

    @asynccontextmanager
    async def acquire(self):
        if not self.db.available:
            raise ConnectionRefusedError("Connection refused")
        self.acquired += 1
        yield FakeConnection(self.db)

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def fake_pool(fake_db):
    return FakePool(fake_db)


@pytest.fixture
def client(fake_pool):
    """API client; entering the context runs startup (schema + seed data)"""
    app = create_app(Settings(), db_pool=fake_pool)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def jane():
    return {"name": "Jane Doe", "email": "jane@example.com", "age": 40}
