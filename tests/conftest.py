from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_TO_FILE"] = "false"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("REFRESH_SECRET_KEY", "test-refresh-secret-key")

import pytest
from fastapi.testclient import TestClient

from formwave.config.database_config import Base, SessionLocal, engine
from formwave.config.env_config import settings
from formwave.main import app
from formwave.models.user_model import Profile
from formwave.schema.user_schema import RequestContext
from formwave.services.builder_session_service import builder_sessions
from formwave.services.table_store import TableStore
from formwave.utils.auth_utils import generate_jwt, hash_password


class RecordingStore(TableStore):
    """TableStore that remembers every call made through it"""

    def __init__(self, db):
        super().__init__(db)
        self.calls = []

    def select(self, table_name, **kwargs):
        self.calls.append(("select", table_name, kwargs))
        return super().select(table_name, **kwargs)

    def insert(self, table_name, rows):
        rows = list(rows)
        self.calls.append(("insert", table_name, {"rows": rows}))
        return super().insert(table_name, rows)

    def update(self, table_name, values, eq):
        self.calls.append(("update", table_name, {"values": values, "eq": eq}))
        return super().update(table_name, values, eq)

    def delete(self, table_name, eq, not_in=None):
        self.calls.append(("delete", table_name, {"eq": eq, "not_in": not_in}))
        return super().delete(table_name, eq, not_in=not_in)

    def calls_to(self, operation, table_name):
        return [kwargs for op, table, kwargs in self.calls if op == operation and table == table_name]


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    builder_sessions.clear()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return RecordingStore(db)


@pytest.fixture
def client():
    return TestClient(app)


def _make_profile(db, email, name):
    profile = Profile(email=email, full_name=name, password=hash_password("password123"))
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def _context(profile):
    return RequestContext(caller_id=profile.id, email=profile.email, full_name=profile.full_name)


def _headers(context):
    token = generate_jwt(
        data={"caller_id": context.caller_id, "email": context.email, "full_name": context.full_name},
        expire_minutes=5,
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner(db):
    return _context(_make_profile(db, "owner@example.com", "Olive Owner"))


@pytest.fixture
def outsider(db):
    return _context(_make_profile(db, "outsider@example.com", "Oscar Outsider"))


@pytest.fixture
def auth_headers(owner):
    return _headers(owner)


@pytest.fixture
def outsider_headers(outsider):
    return _headers(outsider)
