# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Replaces the Supabase client with an in-memory fake (tables + storage)
# - Provides an API client and bearer-token headers for two users
# =============================================================================

import os
import re
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("ELEVENLABS_API_KEY", "test-elevenlabs-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-0123456789abcdef")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.pop("REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient


# =============================================================================
# In-memory Supabase
# =============================================================================

# Parent table, child table -> foreign key column on the child
RELATIONS = {
    ("collections", "study_items"): "collection_id",
    ("flashcard_sets", "flashcards"): "set_id",
}

# Column defaults the real schema fills in
TABLE_DEFAULTS = {
    "users": lambda: {
        "avatar_url": None,
        "last_login": None,
        "preferences": {"theme": "light", "emailNotifications": True, "studyReminders": True},
    },
    "study_items": lambda: {"tags": [], "audio_url": None, "study_count": 0, "last_studied": None},
    "flashcard_sets": lambda: {"description": None, "study_count": 0, "last_studied": None},
    "flashcards": lambda: {"tags": [], "difficulty": None, "review_count": 0, "last_reviewed": None},
}

EMBED_PATTERN = re.compile(r"^(?:(?P<alias>\w+):)?(?P<table>\w+)\((?P<inner>[^)]*)\)$")


class FakeQuery:
    """Just enough of the PostgREST query builder for SupabaseClient."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.operation = None
        self.columns = "*"
        self.payload = None
        self.filters = []
        self.order_column = None
        self.order_desc = False
        self.row_limit = None

    def select(self, columns="*"):
        self.operation = "select"
        self.columns = columns
        return self

    def insert(self, payload):
        self.operation = "insert"
        self.payload = payload
        return self

    def update(self, values):
        self.operation = "update"
        self.payload = values
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_column = column
        self.order_desc = desc
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def _matches(self, row):
        return all(str(row.get(column)) == str(value) for column, value in self.filters)

    def execute(self):
        if self.table in self.db.failing_tables:
            raise RuntimeError(f"simulated failure on {self.table}")

        rows = self.db.tables.setdefault(self.table, [])

        if self.operation == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = [self.db.new_row(self.table, row) for row in payload]
            rows.extend(inserted)
            return SimpleNamespace(data=[dict(row) for row in inserted])

        matched = [row for row in rows if self._matches(row)]

        if self.operation == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(row) for row in matched])

        if self.operation == "delete":
            self.db.tables[self.table] = [row for row in rows if row not in matched]
            return SimpleNamespace(data=[dict(row) for row in matched])

        if self.order_column:
            matched = sorted(matched, key=lambda r: r.get(self.order_column) or "", reverse=self.order_desc)
        if self.row_limit is not None:
            matched = matched[: self.row_limit]
        return SimpleNamespace(data=[self.db.project(self.table, row, self.columns) for row in matched])


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        if self.storage.fail_uploads:
            raise RuntimeError("simulated upload failure")
        self.storage.files[(self.name, path)] = {"content": file, "options": file_options or {}}
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://test-project.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        for path in paths:
            self.storage.files.pop((self.name, path), None)
        return [{"name": path} for path in paths]


class FakeStorage:
    def __init__(self):
        self.files = {}
        self.fail_uploads = False

    def from_(self, bucket):
        return FakeBucket(self, bucket)

    def list_buckets(self):
        return [SimpleNamespace(name="audio")]


class FakeSupabase:
    """In-memory stand-in for supabase.Client."""

    def __init__(self):
        self.tables = {}
        self.storage = FakeStorage()
        self.failing_tables = set()
        self._clock = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)

    def table(self, name):
        return FakeQuery(self, name)

    def _tick(self):
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def new_row(self, table, values):
        now = self._tick()
        row = {"id": str(uuid.uuid4()), "created_at": now}
        if table in {"collections", "study_items", "flashcard_sets"}:
            row["updated_at"] = now
        row.update(TABLE_DEFAULTS.get(table, dict)())
        row.update(values)
        return row

    def rows(self, table):
        return self.tables.get(table, [])

    def project(self, table, row, columns):
        result = {}
        for part in (p.strip() for p in columns.split(",")):
            if part == "*":
                result.update(row)
                continue
            embed = EMBED_PATTERN.match(part)
            if embed is None:
                result[part] = row.get(part)
                continue
            child = embed.group("table")
            key = RELATIONS[(table, child)]
            children = [dict(c) for c in self.rows(child) if str(c.get(key)) == str(row["id"])]
            alias = embed.group("alias") or child
            if embed.group("inner").strip() == "count":
                result[alias] = [{"count": len(children)}]
            else:
                result[alias] = children
        return result


@pytest.fixture(autouse=True)
def fake_supabase(monkeypatch):
    """Every test talks to a fresh in-memory database."""
    from lib.supabase_client import SupabaseClient

    fake = FakeSupabase()
    monkeypatch.setattr(SupabaseClient, "_instance", fake)
    return fake


# =============================================================================
# API Fixtures
# =============================================================================

@pytest.fixture
def app():
    from app.main import app as fastapi_app

    fastapi_app.state.disable_rate_limits = True
    yield fastapi_app
    fastapi_app.state.disable_rate_limits = False


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def register(client, name="Ada Lovelace", email="ada@example.com", password="correct-horse"):
    """Register through the API and return the auth payload."""
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def user(client):
    return register(client)


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {user['token']}"}


@pytest.fixture
def other_user(client):
    return register(client, name="Grace Hopper", email="grace@example.com", password="cobol-rules")


@pytest.fixture
def other_auth_headers(other_user):
    return {"Authorization": f"Bearer {other_user['token']}"}


@pytest.fixture
def collection(client, auth_headers):
    response = client.post(
        "/api/collections",
        json={"title": "Biology", "description": "Cells and energy", "color": "#22c55e"},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]
