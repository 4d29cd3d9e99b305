"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - ContactStore scopes every call by owner_id; any failure raises PersistenceError
    - AuthGateway raises AuthError on rejected credentials, returns None for unknown tokens

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO
"""

from typing import Protocol

from contactbook.core.domain_types import (
    AuthSession, ContactFields, ContactId, ContactRecord, UserId, UserIdentity,
)


class ContactStore(Protocol):
    """Contract for contact persistence — implemented by shell."""
    async def query(self, owner_id: UserId) -> list[ContactRecord]: ...
    async def insert(
        self, owner_id: UserId, fields: ContactFields,
    ) -> ContactRecord: ...
    async def update(
        self, owner_id: UserId, contact_id: ContactId, fields: ContactFields,
    ) -> None: ...
    async def delete(self, owner_id: UserId, contact_id: ContactId) -> None: ...


class AuthGateway(Protocol):
    """Contract for identity and sessions — implemented by shell."""
    async def current_user(self, access_token: str) -> UserIdentity | None: ...
    async def sign_in(self, email: str, password: str) -> AuthSession: ...
    async def sign_up(
        self, email: str, password: str, full_name: str,
    ) -> AuthSession: ...
    async def sign_out(self, access_token: str) -> None: ...
