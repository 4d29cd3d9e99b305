"""Contact Rules — pure validation, normalization and search over contacts.

Invariants:
    - validate_draft raises ContactValidationError iff name is empty after strip
    - normalize_draft trims every field; blank optional fields become None (never "")
    - normalize_draft is idempotent and never truncates (length limits are enforced
      at the API boundary, not silently here)
    - filter_contacts never raises on absent fields and preserves input order

Design Decisions:
    - Plain functions, no IO (functional core)
    - Phone matched on raw characters: digits and punctuation are compared as typed,
      case folding is irrelevant for them
"""

from typing import Sequence

from contactbook.core.domain_types import (
    OPTIONAL_FIELDS, ContactDraft, ContactFields, ContactRecord,
)
from contactbook.core.errors import ContactValidationError


def validate_draft(draft: ContactDraft) -> None:
    """Reject a draft whose name is empty or whitespace-only."""
    if not (draft.name or "").strip():
        raise ContactValidationError("Name is required", field="name")


def _clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize_draft(draft: ContactDraft) -> ContactFields:
    """Trim all fields and convert blank optional fields to None."""
    return ContactFields(
        name=(draft.name or "").strip(),
        **{f: _clean_optional(getattr(draft, f)) for f in OPTIONAL_FIELDS},
    )


def _contains_folded(value: str | None, needle: str) -> bool:
    return value is not None and needle in value.lower()


def contact_matches(contact: ContactRecord, query: str) -> bool:
    """True if any searchable field contains the query."""
    folded = query.lower()
    return (
        _contains_folded(contact.name, folded)
        or _contains_folded(contact.email, folded)
        or _contains_folded(contact.company, folded)
        or (contact.phone is not None and query in contact.phone)
    )


def filter_contacts(
    contacts: Sequence[ContactRecord], query: str | None,
) -> list[ContactRecord]:
    """Client-side search. Empty query returns every contact in input order."""
    if not query:
        return list(contacts)
    return [c for c in contacts if contact_matches(c, query)]
