"""Contact Routes — list/search, create, update, delete for the signed-in user.

Invariants:
    - Every route requires a current user (get_current_user)
    - Every successful mutation is followed by a full re-sync (list_contacts)
    - A failed mutation leaves the cached list exactly as the last successful fetch
    - Each request gets its own ContactViewSync bound to its own store and search term;
      only the fetched list outlives the request (_last_fetch)

Design Decisions:
    - _last_fetch as module-level dict: deliberate exception to no-global-state rule
      (single-process uvicorn; it is a cache and is rebuilt by the next fetch)
    - Overlapping requests from one user share nothing mutable but that list, which is
      replaced wholesale, never patched
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from contactbook.api.deps import get_contact_store, get_current_user
from contactbook.core.contact_stats import compute_contact_stats
from contactbook.core.domain_types import (
    ContactId, ContactRecord, UserContext, UserId,
)
from contactbook.core.errors import ErrorContext, PersistenceError
from contactbook.core.repository_protocols import ContactStore
from contactbook.schemas.contact import (
    ContactListResponse, ContactPayload, ContactResponse, ContactStats,
)
from contactbook.services.contact_sync import ContactViewSync

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/contacts", tags=["contacts"])

_last_fetch: dict[UserId, list[ContactRecord]] = {}


def open_view(
    ctx: UserContext, store: ContactStore, search: str = "",
) -> ContactViewSync:
    """Request-scoped view seeded with the caller's last successful fetch."""
    view = ContactViewSync(store)
    view.search = search
    cached = _last_fetch.get(ctx.user_id)
    if cached is not None:
        view.contacts = cached
        view.loading = False
    return view


async def resync(view: ContactViewSync, ctx: UserContext) -> None:
    _last_fetch[ctx.user_id] = await view.list_contacts(ctx)


def drop_cached_contacts(user_id: UserId) -> None:
    _last_fetch.pop(user_id, None)


def _list_response(view: ContactViewSync) -> ContactListResponse:
    return ContactListResponse(
        contacts=[ContactResponse.from_record(c) for c in view.visible_contacts()],
        stats=ContactStats(**compute_contact_stats(view.contacts)),
        search=view.search,
    )


@router.get("", response_model=ContactListResponse)
async def list_contacts(
    q: str = Query("", max_length=255),
    ctx: UserContext = Depends(get_current_user),
    store: ContactStore = Depends(get_contact_store),
):
    """Refetch the caller's contacts (newest first) and apply the search term."""
    view = open_view(ctx, store, search=q)
    await resync(view, ctx)
    return _list_response(view)


@router.post(
    "", response_model=ContactResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_contact(
    body: ContactPayload,
    ctx: UserContext = Depends(get_current_user),
    store: ContactStore = Depends(get_contact_store),
):
    view = open_view(ctx, store)
    record = await view.create_contact(ctx, body.to_draft())
    await resync(view, ctx)
    return ContactResponse.from_record(record)


@router.put("/{contact_id}", response_model=ContactResponse)
async def update_contact(
    contact_id: UUID,
    body: ContactPayload,
    ctx: UserContext = Depends(get_current_user),
    store: ContactStore = Depends(get_contact_store),
):
    """Replace every mutable field, then return the re-synced record."""
    view = open_view(ctx, store)
    cid = ContactId(contact_id)
    await view.update_contact(ctx, cid, body.to_draft())
    await resync(view, ctx)
    for record in view.contacts:
        if record.id == cid:
            return ContactResponse.from_record(record)
    # deleted between the update and the re-sync
    raise PersistenceError(
        "no such record", "update", ErrorContext(contact_id=str(cid)),
    )


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(
    contact_id: UUID,
    ctx: UserContext = Depends(get_current_user),
    store: ContactStore = Depends(get_contact_store),
):
    view = open_view(ctx, store)
    await view.delete_contact(ctx, ContactId(contact_id))
    await resync(view, ctx)
