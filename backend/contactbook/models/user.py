"""User ORM — an account known to the auth gateway.

Invariants:
    - email is unique and stored lower-cased
    - password_hash is a bcrypt hash, never the raw password
    - Deleting a user cascades to contacts and auth sessions

Design Decisions:
    - full_name kept on the account (collected at sign-up) rather than a profile table
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, LargeBinary, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from contactbook.db.base import Base


class User(Base):
    """Account row — owns contacts and sessions."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True,
    )
    password_hash: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    contacts: Mapped[list["Contact"]] = relationship(
        "Contact", back_populates="owner",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    sessions: Mapped[list["AuthSessionRow"]] = relationship(
        "AuthSessionRow", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )
