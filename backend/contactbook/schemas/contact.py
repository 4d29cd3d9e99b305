"""Contact Schemas — Pydantic models for the contacts API boundary.

Invariants:
    - Max lengths come from FIELD_MAX_LENGTHS (core/domain_types.py)
    - Input is passed through raw: trimming and the name-required rule belong to the
      core (contact_rules.py), so a blank name surfaces as the domain VALIDATION_ERROR
    - Oversized input is rejected here, never silently truncated

Design Decisions:
    - One payload model for create and update: update replaces every mutable field
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from contactbook.core.contact_stats import initial_of
from contactbook.core.domain_types import (
    COMPANY_MAX_LENGTH, EMAIL_MAX_LENGTH, NAME_MAX_LENGTH, NOTES_MAX_LENGTH,
    PHONE_MAX_LENGTH, ContactDraft, ContactRecord,
)


class ContactPayload(BaseModel):
    """Create/update body — raw form values."""
    name: str = Field(max_length=NAME_MAX_LENGTH)
    email: str | None = Field(None, max_length=EMAIL_MAX_LENGTH)
    phone: str | None = Field(None, max_length=PHONE_MAX_LENGTH)
    company: str | None = Field(None, max_length=COMPANY_MAX_LENGTH)
    notes: str | None = Field(None, max_length=NOTES_MAX_LENGTH)

    def to_draft(self) -> ContactDraft:
        return ContactDraft(
            name=self.name,
            email=self.email,
            phone=self.phone,
            company=self.company,
            notes=self.notes,
        )


class ContactResponse(BaseModel):
    """Persisted contact as shown in the list."""
    id: UUID
    name: str
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    notes: str | None = None
    created_at: datetime
    initial: str = ""

    @classmethod
    def from_record(cls, record: ContactRecord) -> "ContactResponse":
        return cls(
            id=record.id,
            name=record.name,
            email=record.email,
            phone=record.phone,
            company=record.company,
            notes=record.notes,
            created_at=record.created_at,
            initial=initial_of(record),
        )


class ContactStats(BaseModel):
    total_contacts: int
    companies: int
    with_email: int


class ContactListResponse(BaseModel):
    """Search-filtered view plus counters over the full list."""
    contacts: list[ContactResponse]
    stats: ContactStats
    search: str = ""
