import os

# Settings are read at import time; point them at throwaway values first.
os.environ["SUPABASE_URL"] = "https://example.supabase.co"
os.environ["SUPABASE_KEY"] = "test-anon-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_SECRET"] = "test-session-secret"

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from vegist.core.errors import QuotaError, RemoteError
from vegist.database import get_session
from vegist.main import app
from vegist.models.category import Category
from vegist.models.product import Product
from vegist.repositories.category_repo import CategoryRepository
from vegist.repositories.product_repo import ProductRepository
from vegist.schemas.product import ProductRead

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeStorage:
    """Dict-backed key-value store with switchable failures."""

    def __init__(self, quota_bytes=None):
        self.data = {}
        self.quota_bytes = quota_bytes
        self.fail_reads = False
        self.fail_writes = False

    def get(self, key):
        if self.fail_reads:
            raise RemoteError("read failed")
        return self.data.get(key)

    def set(self, key, value):
        if self.fail_writes:
            raise RemoteError("write failed")
        if self.quota_bytes is not None and len(value.encode("utf-8")) > self.quota_bytes:
            raise QuotaError("too big")
        self.data[key] = value

    def remove(self, key):
        self.data.pop(key, None)


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def make_product(session):
    def _make(name="Apple", price=10.0, **kwargs):
        kwargs.setdefault("image_url", f"https://cdn.example.com/{name.lower()}.png")
        return ProductRepository().create(session, Product(name=name, price=price, **kwargs))

    return _make


@pytest.fixture
def make_category(session):
    def _make(name, **kwargs):
        return CategoryRepository().create(session, Category(name=name, **kwargs))

    return _make


def product_read(name="Apple", price=10.0, **kwargs) -> ProductRead:
    """In-memory product for the pure filter/sort tests."""
    kwargs.setdefault("id", uuid.uuid4())
    kwargs.setdefault("created_at", NOW - timedelta(days=90))
    return ProductRead(name=name, price=price, **kwargs)


@pytest.fixture
def client(session):
    def _get_session_override():
        yield session

    app.dependency_overrides[get_session] = _get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    res = client.post("/api/v1/session")
    assert res.status_code == 201
    return {"Authorization": f"Bearer {res.json()['access_token']}"}
