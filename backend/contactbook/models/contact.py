"""Contact ORM — persists one personal contact record.

Invariants:
    - Always belongs to a User (user_id FK); owner never changes after insert
    - name is non-nullable; optional fields are NULL when absent (never "")
    - Column sizes mirror FIELD_MAX_LENGTHS (core/domain_types.py)
    - created_at is set once on insert and is the default sort key (descending)

Design Decisions:
    - Composite index (user_id, created_at): the only query pattern is
      "all contacts of one owner, newest first"
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from contactbook.core.domain_types import (
    COMPANY_MAX_LENGTH, EMAIL_MAX_LENGTH, NAME_MAX_LENGTH, PHONE_MAX_LENGTH,
)
from contactbook.db.base import Base


class Contact(Base):
    """Contact entity — scoped by owning user."""
    __tablename__ = "contacts"
    __table_args__ = (
        Index("ix_contacts_user_id_created_at", "user_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    email: Mapped[str | None] = mapped_column(
        String(EMAIL_MAX_LENGTH), nullable=True,
    )
    phone: Mapped[str | None] = mapped_column(
        String(PHONE_MAX_LENGTH), nullable=True,
    )
    company: Mapped[str | None] = mapped_column(
        String(COMPANY_MAX_LENGTH), nullable=True,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    owner: Mapped["User"] = relationship("User", back_populates="contacts")
