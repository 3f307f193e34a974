# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import copy
import uuid
from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from main import create_app
from core.config import settings
from core.errors import StoreError
from core.notifications import NotificationDispatcher
from core.store import EntityStore, get_store
from dependencies.auth import CurrentUser, get_current_user
from services.lifecycle_engine import RequestLifecycleEngine


# ============================================================
# In-memory EntityStore
# ============================================================
class MemoryStore(EntityStore):
    """Dict-backed store with the same filter and conditional-update rules."""

    OPS = {
        "eq": lambda a, b: a == b,
        "neq": lambda a, b: a != b,
        "gt": lambda a, b: a is not None and a > b,
        "gte": lambda a, b: a is not None and a >= b,
        "lt": lambda a, b: a is not None and a < b,
        "lte": lambda a, b: a is not None and a <= b,
    }

    def __init__(self):
        self.collections = {}
        self.failing = set()

    def _table(self, collection):
        if collection in self.failing:
            raise StoreError(f"Failed to write {collection}")
        return self.collections.setdefault(collection, {})

    def _prepare(self, collection, document):
        doc = copy.deepcopy(dict(document))
        doc.setdefault("id", str(uuid.uuid4()))
        return doc

    def create(self, collection, document):
        table = self._table(collection)
        doc = self._prepare(collection, document)
        table[doc["id"]] = doc
        return doc["id"]

    def create_many(self, collection, documents):
        table = self._table(collection)
        # Stage every row first so a failure leaves the table untouched
        staged = [self._prepare(collection, document) for document in documents]
        for doc in staged:
            table[doc["id"]] = doc
        return [doc["id"] for doc in staged]

    def get(self, collection, doc_id):
        doc = self.collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc) if doc else None

    def query(self, collection, filters=(), order_by=None, descending=False):
        rows = [
            doc for doc in self.collections.get(collection, {}).values()
            if all(self.OPS[op](doc.get(field), value) for field, op, value in filters)
        ]
        if order_by:
            rows.sort(key=lambda d: (d.get(order_by) is not None, d.get(order_by)), reverse=descending)
        return copy.deepcopy(rows)

    def update(self, collection, doc_id, partial, expected=None):
        table = self._table(collection)
        doc = table.get(doc_id)
        if doc is None:
            return None
        for field, value in (expected or {}).items():
            if doc.get(field) != value:
                return None
        doc.update(copy.deepcopy(dict(partial)))
        return copy.deepcopy(doc)

    def delete(self, collection, doc_id):
        return self._table(collection).pop(doc_id, None) is not None

    def all(self, collection):
        return list(self.collections.get(collection, {}).values())


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


# ============================================================
# Engine fixtures
# ============================================================
@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def clock():
    # 12:00 in Johannesburg
    return FixedClock(datetime(2025, 3, 10, 10, 0, tzinfo=timezone.utc))


@pytest.fixture
def notifier(store, clock):
    return NotificationDispatcher(store, clock)


@pytest.fixture
def engine(store, notifier, clock):
    return RequestLifecycleEngine(store, notifier=notifier, config=settings, clock=clock)


# ============================================================
# Users
# ============================================================
@pytest.fixture
def student_user():
    return CurrentUser(
        id="student-1",
        email="student@example.com",
        role="student",
        display_name="Thandi Mokoena",
        room_number="A101",
        tenant_code="T-001",
    )


@pytest.fixture
def other_student():
    return CurrentUser(
        id="student-2",
        email="other@example.com",
        role="student",
        room_number="B202",
    )


@pytest.fixture
def admin_user():
    return CurrentUser(id="admin-1", email="admin@example.com", role="admin", display_name="Res Admin")


@pytest.fixture
def maintenance_admin():
    return CurrentUser(id="admin-2", email="fixit@example.com", role="admin-maintenance")


@pytest.fixture
def newbie_user():
    return CurrentUser(id="newbie-1", email="new@example.com", role="newbie")


# ============================================================
# App fixtures
# ============================================================
@pytest.fixture(scope="function")
def app(store):
    """Create a test FastAPI application backed by the in-memory store."""
    application = create_app()
    application.dependency_overrides[get_store] = lambda: store
    yield application
    application.dependency_overrides = {}


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login_as(app):
    """Pretend auth already succeeded as the given user."""

    def _login(user: CurrentUser):
        app.dependency_overrides[get_current_user] = lambda: user

    return _login
