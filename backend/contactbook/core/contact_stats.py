"""Contact Stats — pure dashboard counters over the fetched contact list.

Invariants:
    - Computed from the full list, never the search-filtered view
    - Returns a flat dict of integer counts (serializable as JSON)

Design Decisions:
    - Pure function, not a method on ContactViewSync (sync is state, stats are presentation)
"""

from typing import Sequence

from contactbook.core.domain_types import ContactRecord


def compute_contact_stats(contacts: Sequence[ContactRecord]) -> dict:
    """Total contacts, distinct companies, and contacts with an email."""
    return {
        "total_contacts": len(contacts),
        "companies": len({c.company for c in contacts if c.company}),
        "with_email": sum(1 for c in contacts if c.email),
    }


def initial_of(contact: ContactRecord) -> str:
    """Avatar letter for the list view."""
    return contact.name[:1].upper()
