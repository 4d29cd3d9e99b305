"""SQL Auth Gateway — AuthGateway implementation with bcrypt passwords and opaque tokens.

Invariants:
    - Emails compared lower-cased and trimmed; one account per email
    - Passwords stored only as bcrypt hashes
    - current_user() returns None for unknown or expired tokens (never raises AuthError)
    - sign_out() is idempotent
    - Rejections raise AuthError with a user-presentable message

Design Decisions:
    - Opaque random tokens (secrets.token_urlsafe) stored server-side over JWTs:
      sign-out must revoke immediately
    - Expired tokens are treated as absent rather than purged eagerly
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone

import bcrypt
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from contactbook.core.domain_types import AuthSession, UserId, UserIdentity
from contactbook.core.errors import AuthError, PersistenceError
from contactbook.models.auth_session import AuthSessionRow
from contactbook.models.user import User

logger = logging.getLogger(__name__)

BCRYPT_MAX_PASSWORD_BYTES = 72


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _identity(user: User) -> UserIdentity:
    return UserIdentity(
        id=UserId(user.id), email=user.email, full_name=user.full_name,
    )


class SqlAuthGateway:
    """Accounts and sessions backed by the users and auth_sessions tables."""

    def __init__(
        self,
        db: AsyncSession,
        session_ttl: timedelta = timedelta(days=7),
        bcrypt_rounds: int = 12,
        password_min_length: int = 6,
    ):
        self.db = db
        self.session_ttl = session_ttl
        self.bcrypt_rounds = bcrypt_rounds
        self.password_min_length = password_min_length

    async def current_user(self, access_token: str) -> UserIdentity | None:
        if not access_token:
            return None
        result = await self.db.execute(
            select(AuthSessionRow, User)
            .join(User, AuthSessionRow.user_id == User.id)
            .where(AuthSessionRow.token == access_token),
        )
        row = result.first()
        if row is None:
            return None
        session_row, user = row
        if _as_utc(session_row.expires_at) <= datetime.now(timezone.utc):
            return None
        return _identity(user)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        result = await self.db.execute(
            select(User).where(User.email == _normalize_email(email)),
        )
        user = result.scalar_one_or_none()
        if user is None or not self._check_password(password, user.password_hash):
            logger.info("Sign-in rejected")
            raise AuthError("Invalid login credentials")
        return await self._open_session(user)

    async def sign_up(
        self, email: str, password: str, full_name: str,
    ) -> AuthSession:
        email = _normalize_email(email)
        full_name = (full_name or "").strip()
        if not email:
            raise AuthError("Email is required")
        if not full_name:
            raise AuthError("Full name is required")
        self._check_password_policy(password)

        user = User(
            email=email,
            password_hash=bcrypt.hashpw(
                password.encode(), bcrypt.gensalt(self.bcrypt_rounds),
            ),
            full_name=full_name,
        )
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise AuthError("User already registered")
        logger.info("User signed up", extra={"user_id": str(user.id)})
        return await self._open_session(user)

    async def sign_out(self, access_token: str) -> None:
        try:
            await self.db.execute(
                delete(AuthSessionRow).where(AuthSessionRow.token == access_token),
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Sign-out failed: {e}")
            raise PersistenceError(
                "could not revoke token", "sign_out", subject="Session",
            )

    # ─── Helpers ─────────────────────────────────────────────────

    def _check_password_policy(self, password: str) -> None:
        if len(password) < self.password_min_length:
            raise AuthError(
                f"Password should be at least {self.password_min_length} characters",
            )
        if len(password.encode()) > BCRYPT_MAX_PASSWORD_BYTES:
            raise AuthError(
                f"Password cannot exceed {BCRYPT_MAX_PASSWORD_BYTES} bytes",
            )

    @staticmethod
    def _check_password(password: str, password_hash: bytes) -> bool:
        encoded = password.encode()
        if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(encoded, password_hash)

    async def _open_session(self, user: User) -> AuthSession:
        expires_at = datetime.now(timezone.utc) + self.session_ttl
        session_row = AuthSessionRow(
            token=secrets.token_urlsafe(32),
            user_id=user.id,
            expires_at=expires_at,
        )
        self.db.add(session_row)
        await self.db.commit()
        return AuthSession(
            access_token=session_row.token,
            user=_identity(user),
            expires_at=expires_at,
        )
