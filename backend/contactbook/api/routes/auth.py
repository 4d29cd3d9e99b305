"""Auth Routes — sign-up, sign-in, sign-out and current user.

Invariants:
    - AuthError messages returned verbatim (401 envelope via global handler)
    - sign-out drops the caller's cached contact list
    - Auth never touches contact state otherwise
"""

import logging

from fastapi import APIRouter, Depends, status

from contactbook.api.deps import get_access_token, get_auth_gateway
from contactbook.api.routes.contacts import drop_cached_contacts
from contactbook.core.errors import NotAuthenticatedError
from contactbook.infrastructure.auth_gateway import SqlAuthGateway
from contactbook.schemas.auth import (
    SessionResponse, SignInRequest, SignUpRequest, UserResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/signup", response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def sign_up(
    body: SignUpRequest,
    gateway: SqlAuthGateway = Depends(get_auth_gateway),
):
    """Create an account and open a session."""
    session = await gateway.sign_up(body.email, body.password, body.full_name)
    return SessionResponse.from_session(session)


@router.post("/signin", response_model=SessionResponse)
async def sign_in(
    body: SignInRequest,
    gateway: SqlAuthGateway = Depends(get_auth_gateway),
):
    session = await gateway.sign_in(body.email, body.password)
    return SessionResponse.from_session(session)


@router.post("/signout", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    token: str = Depends(get_access_token),
    gateway: SqlAuthGateway = Depends(get_auth_gateway),
):
    """End the session. Unknown tokens are accepted silently."""
    user = await gateway.current_user(token)
    await gateway.sign_out(token)
    if user is not None:
        drop_cached_contacts(user.id)
        logger.info("User signed out", extra={"user_id": str(user.id)})


@router.get("/me", response_model=UserResponse)
async def me(
    token: str = Depends(get_access_token),
    gateway: SqlAuthGateway = Depends(get_auth_gateway),
):
    user = await gateway.current_user(token)
    if user is None:
        raise NotAuthenticatedError()
    return UserResponse.from_identity(user)
