"""Service test fixtures — async DB, FastAPI test client, and in-memory store fakes.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe sees the test engine
    - Per-user cached contact lists cleared between tests

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - InMemoryContactStore mirrors SqlContactStore semantics (owner scoping,
      newest-first ordering, "no such record" failures) for pure sync tests
"""

import asyncio
import dataclasses
import itertools
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from contactbook.api.routes import contacts as contacts_routes
from contactbook.core.domain_types import (
    ContactFields, ContactId, ContactRecord, UserContext, UserId,
)
from contactbook.core.errors import ErrorContext, PersistenceError
from contactbook.db.base import Base
from contactbook.infrastructure.database import get_db, DatabaseSessionManager
from contactbook.models.user import User
import contactbook.infrastructure.database as db_module
from contactbook.main import app


# -- Database ------------------------------------------------------------------

@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def seed_user(test_db):
    """Insert a minimal user row directly into the test DB."""
    user = User(email="owner@example.com", password_hash=b"x", full_name="Owner")
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest.fixture(autouse=True)
def _clear_contact_cache():
    contacts_routes._last_fetch.clear()
    yield
    contacts_routes._last_fetch.clear()


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


async def _sign_up(client, email, full_name="Test User", password="secret123"):
    res = await client.post("/api/v1/auth/signup", json={
        "email": email, "password": password, "full_name": full_name,
    })
    assert res.status_code == 201, res.text
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


@pytest.fixture
async def auth_headers(client):
    """Bearer headers for a freshly signed-up user."""
    return await _sign_up(client, "alice@example.com", "Alice")


@pytest.fixture
async def other_headers(client):
    """Bearer headers for a second, unrelated user."""
    return await _sign_up(client, "bob@example.com", "Bob")


# -- In-memory store -----------------------------------------------------------

class InMemoryContactStore:
    """ContactStore fake. Records every call; can fail or pause on demand."""

    def __init__(self):
        self.rows: dict[ContactId, ContactRecord] = {}
        self.calls: list[str] = []
        self.fail_with: str | None = None
        self.gate: asyncio.Event | None = None
        self._clock = itertools.count()
        self._epoch = datetime(2026, 1, 1, tzinfo=timezone.utc)

    async def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if self.gate is not None:
            await self.gate.wait()
        await asyncio.sleep(0)
        if self.fail_with:
            raise PersistenceError(self.fail_with, operation)

    async def query(self, owner_id: UserId) -> list[ContactRecord]:
        await self._enter("list")
        owned = [r for r in self.rows.values() if r.owner == owner_id]
        return sorted(owned, key=lambda r: r.created_at, reverse=True)

    async def insert(self, owner_id: UserId, fields: ContactFields) -> ContactRecord:
        await self._enter("create")
        record = ContactRecord(
            id=ContactId(uuid4()),
            owner=owner_id,
            created_at=self._epoch + timedelta(seconds=next(self._clock)),
            **fields.as_dict(),
        )
        self.rows[record.id] = record
        return record

    async def update(
        self, owner_id: UserId, contact_id: ContactId, fields: ContactFields,
    ) -> None:
        await self._enter("update")
        existing = self._owned(owner_id, contact_id, "update")
        self.rows[contact_id] = dataclasses.replace(existing, **fields.as_dict())

    async def delete(self, owner_id: UserId, contact_id: ContactId) -> None:
        await self._enter("delete")
        self._owned(owner_id, contact_id, "delete")
        del self.rows[contact_id]

    def _owned(self, owner_id, contact_id, operation) -> ContactRecord:
        record = self.rows.get(contact_id)
        if record is None or record.owner != owner_id:
            raise PersistenceError(
                "no such record", operation, ErrorContext(contact_id=str(contact_id)),
            )
        return record


@pytest.fixture
def memory_store():
    return InMemoryContactStore()


@pytest.fixture
def user_ctx():
    return UserContext(user_id=UserId(uuid4()), email="u@example.com")
