"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ContactId wrap UUIDs — never use bare UUID in domain logic
    - ContactDraft holds raw (untrimmed) user input; ContactFields holds normalized values
    - ContactRecord always has an id and created_at (persisted); a draft never does
    - Optional fields are None when absent, never ""

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - Frozen dataclasses for records: the core never mutates a fetched contact in place
      (updates go through the store and come back via a refetch)
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ContactId = NewType("ContactId", UUID)


# ─── Field Limits ────────────────────────────────────────────────

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
PHONE_MAX_LENGTH = 20
COMPANY_MAX_LENGTH = 100
NOTES_MAX_LENGTH = 500

FIELD_MAX_LENGTHS: dict[str, int] = {
    "name": NAME_MAX_LENGTH,
    "email": EMAIL_MAX_LENGTH,
    "phone": PHONE_MAX_LENGTH,
    "company": COMPANY_MAX_LENGTH,
    "notes": NOTES_MAX_LENGTH,
}

OPTIONAL_FIELDS: tuple[str, ...] = ("email", "phone", "company", "notes")


# ─── Enums ───────────────────────────────────────────────────────

class OperationKind(str, Enum):
    """Mutating operations tracked by the in-flight flags."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


# ─── Value Objects ───────────────────────────────────────────────

@dataclass(frozen=True)
class ContactDraft:
    """Raw contact input as typed by the user (not yet trimmed or validated)."""
    name: str
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class ContactFields:
    """Normalized mutable fields — the exact payload sent on insert/update."""
    name: str
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    notes: str | None = None

    def as_dict(self) -> dict[str, str | None]:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "company": self.company,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class ContactRecord:
    """A persisted contact. id, owner and created_at are store-assigned and immutable."""
    id: ContactId
    owner: UserId
    name: str
    created_at: datetime
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class UserIdentity:
    """An authenticated user as reported by the auth gateway."""
    id: UserId
    email: str
    full_name: str | None = None


@dataclass(frozen=True)
class AuthSession:
    """Session issued by the auth gateway on sign-in/sign-up."""
    access_token: str
    user: UserIdentity
    expires_at: datetime


@dataclass(frozen=True)
class UserContext:
    """Explicit caller identity passed into every core operation."""
    user_id: UserId
    email: str | None = None

    @classmethod
    def from_identity(cls, user: UserIdentity) -> "UserContext":
        return cls(user_id=user.id, email=user.email)
