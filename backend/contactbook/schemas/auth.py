"""Auth Schemas — sign-in/sign-up bodies and session responses.

Invariants:
    - Passwords never appear in any response model
    - Password length capped at 72 (bcrypt input limit)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from contactbook.core.domain_types import AuthSession, UserIdentity


class SignInRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1, max_length=72)


class SignUpRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1, max_length=72)
    full_name: str = Field(max_length=200)


class UserResponse(BaseModel):
    id: UUID
    email: str
    full_name: str | None = None

    @classmethod
    def from_identity(cls, user: UserIdentity) -> "UserResponse":
        return cls(id=user.id, email=user.email, full_name=user.full_name)


class SessionResponse(BaseModel):
    """Issued session — the client sends access_token as a Bearer token."""
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserResponse

    @classmethod
    def from_session(cls, session: AuthSession) -> "SessionResponse":
        return cls(
            access_token=session.access_token,
            expires_at=session.expires_at,
            user=UserResponse.from_identity(session.user),
        )
