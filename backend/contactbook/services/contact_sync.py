"""Contact View-Sync — owns the user's in-memory contact list and mediates every mutation.

Invariants:
    - list_contacts(None) is a no-op: state untouched, store never called
    - list_contacts replaces the list wholesale on success; on failure the list is unchanged
    - Mutations validate before any store call (ContactValidationError → zero store calls)
    - Mutations never patch self.contacts: callers re-sync via list_contacts
    - In-flight flag per operation kind: idle → in-flight → idle on success AND failure
    - id, owner and created_at are never sent on update

Design Decisions:
    - Refetch over optimistic update: simpler, and a failed mutation leaves the list
      consistent with the last successful fetch (no rollback needed)
    - No deduplication: two concurrent create_contact calls issue two inserts
    - No retry, no timeout: the store client's own settings govern those
    - UserContext passed explicitly: testable without a real session
"""

import logging
from collections import Counter
from contextlib import contextmanager
from typing import Iterator

from contactbook.core.contact_rules import (
    filter_contacts, normalize_draft, validate_draft,
)
from contactbook.core.domain_types import (
    ContactDraft, ContactId, ContactRecord, OperationKind, UserContext,
)
from contactbook.core.errors import PersistenceError
from contactbook.core.repository_protocols import ContactStore

logger = logging.getLogger(__name__)


class ContactViewSync:
    """Per-session view state over a ContactStore."""

    def __init__(self, store: ContactStore):
        self.store = store
        self.contacts: list[ContactRecord] = []
        self.search: str = ""
        self.loading: bool = True
        self._in_flight: Counter = Counter()

    # ─── Queries ─────────────────────────────────────────────────

    async def list_contacts(
        self, ctx: UserContext | None,
    ) -> list[ContactRecord]:
        """Refetch the owner's contacts (newest first) and replace local state."""
        if ctx is None:
            return self.contacts
        try:
            fetched = await self.store.query(ctx.user_id)
        except PersistenceError:
            logger.warning(
                "Contact list refresh failed, keeping last fetch",
                extra={"user_id": str(ctx.user_id), "operation": "list"},
            )
            raise
        self.contacts = list(fetched)
        self.loading = False
        return self.contacts

    def visible_contacts(self) -> list[ContactRecord]:
        """Local list narrowed by the current search term."""
        return filter_contacts(self.contacts, self.search)

    def in_flight(self, kind: OperationKind) -> bool:
        return self._in_flight[kind] > 0

    # ─── Mutations ───────────────────────────────────────────────

    async def create_contact(
        self, ctx: UserContext, draft: ContactDraft,
    ) -> ContactRecord:
        """Validate, normalize and insert. The new record is NOT added locally."""
        validate_draft(draft)
        fields = normalize_draft(draft)
        with self._track(OperationKind.CREATE, ctx):
            record = await self.store.insert(ctx.user_id, fields)
        logger.info(
            "Contact created",
            extra={"user_id": str(ctx.user_id), "contact_id": str(record.id)},
        )
        return record

    async def update_contact(
        self, ctx: UserContext, contact_id: ContactId, draft: ContactDraft,
    ) -> None:
        """Replace all mutable fields of an owned contact."""
        validate_draft(draft)
        fields = normalize_draft(draft)
        with self._track(OperationKind.UPDATE, ctx, contact_id):
            await self.store.update(ctx.user_id, contact_id, fields)
        logger.info(
            "Contact updated",
            extra={"user_id": str(ctx.user_id), "contact_id": str(contact_id)},
        )

    async def delete_contact(
        self, ctx: UserContext, contact_id: ContactId,
    ) -> None:
        """Permanently remove a contact. Confirmation is the caller's concern."""
        with self._track(OperationKind.DELETE, ctx, contact_id):
            await self.store.delete(ctx.user_id, contact_id)
        logger.info(
            "Contact deleted",
            extra={"user_id": str(ctx.user_id), "contact_id": str(contact_id)},
        )

    @contextmanager
    def _track(
        self,
        kind: OperationKind,
        ctx: UserContext,
        contact_id: ContactId | None = None,
    ) -> Iterator[None]:
        """Hold the in-flight flag for one round trip; log store failures."""
        self._in_flight[kind] += 1
        try:
            yield
        except PersistenceError as e:
            logger.warning(
                f"Contact {kind.value} failed: {e.message}",
                extra={
                    "user_id": str(ctx.user_id),
                    "contact_id": str(contact_id) if contact_id else None,
                    "operation": kind.value,
                    "error_code": e.code,
                },
            )
            raise
        finally:
            self._in_flight[kind] -= 1
