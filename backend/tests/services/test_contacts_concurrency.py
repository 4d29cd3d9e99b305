"""Contacts API under overlapping requests from the same user.

Invariants:
    - A request's search term never leaks into another request's response
    - A request only ever talks to the store built for it, even after that
      user's other requests have finished and released theirs
"""

import asyncio

import pytest

from contactbook.api.deps import get_contact_store
from contactbook.core.errors import PersistenceError
from contactbook.main import app


class SessionScopedStore:
    """Per-request view onto a shared store; unusable once its request ends."""

    def __init__(self, backing):
        self.backing = backing
        self.closed = False

    def _check(self, operation: str) -> None:
        if self.closed:
            raise PersistenceError("session closed", operation)

    async def query(self, owner_id):
        self._check("list")
        rows = await self.backing.query(owner_id)
        self._check("list")
        return rows

    async def insert(self, owner_id, fields):
        self._check("create")
        return await self.backing.insert(owner_id, fields)

    async def update(self, owner_id, contact_id, fields):
        self._check("update")
        await self.backing.update(owner_id, contact_id, fields)

    async def delete(self, owner_id, contact_id):
        self._check("delete")
        await self.backing.delete(owner_id, contact_id)


@pytest.fixture
def scoped_stores(client, memory_store):
    """Route every contact request through its own SessionScopedStore."""
    opened: list[SessionScopedStore] = []

    async def override():
        store = SessionScopedStore(memory_store)
        opened.append(store)
        try:
            yield store
        finally:
            store.closed = True

    app.dependency_overrides[get_contact_store] = override
    yield opened
    app.dependency_overrides.pop(get_contact_store, None)


async def _create(client, headers, name):
    return await client.post(
        "/api/v1/contacts", json={"name": name}, headers=headers,
    )


async def test_overlapping_searches_keep_their_own_terms(
    client, auth_headers, scoped_stores,
):
    assert (await _create(client, auth_headers, "Alice")).status_code == 201
    assert (await _create(client, auth_headers, "Bob")).status_code == 201

    alice, bob = await asyncio.gather(
        client.get("/api/v1/contacts", params={"q": "alice"}, headers=auth_headers),
        client.get("/api/v1/contacts", params={"q": "bob"}, headers=auth_headers),
    )

    assert alice.json()["search"] == "alice"
    assert [c["name"] for c in alice.json()["contacts"]] == ["Alice"]
    assert bob.json()["search"] == "bob"
    assert [c["name"] for c in bob.json()["contacts"]] == ["Bob"]


async def test_overlapping_creates_all_succeed(
    client, auth_headers, scoped_stores, memory_store,
):
    responses = await asyncio.gather(*(
        _create(client, auth_headers, f"Contact {i}") for i in range(5)
    ))

    assert [r.status_code for r in responses] == [201] * 5
    assert memory_store.calls.count("create") == 5

    listed = await client.get("/api/v1/contacts", headers=auth_headers)
    assert listed.json()["stats"]["total_contacts"] == 5
    assert all(store.closed for store in scoped_stores)


async def test_overlapping_create_and_delete_resync_on_own_store(
    client, auth_headers, scoped_stores,
):
    doomed = (await _create(client, auth_headers, "Doomed")).json()

    created, deleted = await asyncio.gather(
        _create(client, auth_headers, "Fresh"),
        client.delete(f"/api/v1/contacts/{doomed['id']}", headers=auth_headers),
    )

    assert created.status_code == 201
    assert deleted.status_code == 204
    listed = await client.get("/api/v1/contacts", headers=auth_headers)
    assert [c["name"] for c in listed.json()["contacts"]] == ["Fresh"]
