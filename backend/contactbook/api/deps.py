"""Request Dependencies — wires request-scoped DB sessions into the core's collaborators.

Invariants:
    - Every contact route depends on get_current_user: no user → NotAuthenticatedError (401)
    - Gateway and store are built per request around the request's AsyncSession

Design Decisions:
    - HTTPBearer(auto_error=False): missing header becomes the domain 401 envelope
      instead of FastAPI's default 403
"""

from datetime import timedelta

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from contactbook.config import get_settings
from contactbook.core.domain_types import UserContext
from contactbook.core.errors import NotAuthenticatedError
from contactbook.infrastructure.auth_gateway import SqlAuthGateway
from contactbook.infrastructure.contact_repository import SqlContactStore
from contactbook.infrastructure.database import get_db

_bearer = HTTPBearer(auto_error=False)


def get_auth_gateway(db: AsyncSession = Depends(get_db)) -> SqlAuthGateway:
    settings = get_settings()
    return SqlAuthGateway(
        db,
        session_ttl=timedelta(hours=settings.session_ttl_hours),
        bcrypt_rounds=settings.bcrypt_rounds,
        password_min_length=settings.password_min_length,
    )


def get_contact_store(db: AsyncSession = Depends(get_db)) -> SqlContactStore:
    return SqlContactStore(db)


def get_access_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    if credentials is None or not credentials.credentials:
        raise NotAuthenticatedError()
    return credentials.credentials


async def get_current_user(
    token: str = Depends(get_access_token),
    gateway: SqlAuthGateway = Depends(get_auth_gateway),
) -> UserContext:
    """Resolve the bearer token to the caller's UserContext."""
    user = await gateway.current_user(token)
    if user is None:
        raise NotAuthenticatedError()
    return UserContext.from_identity(user)
