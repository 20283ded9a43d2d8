"""
Authentication utilities.

FastAPI dependency for Supabase bearer tokens plus the identity accessor
the onboarding wizard asks for at commit time.
"""

import logging
from typing import Protocol

from fastapi import HTTPException, Header
from pydantic import BaseModel

from campus_match.db.client import get_service_client

logger = logging.getLogger(__name__)


class AuthenticatedUser(BaseModel):
    """Authenticated user info from Supabase JWT."""
    id: str
    email: str | None = None
    access_token: str = ""


class IdentityAccessor(Protocol):
    """Returns the signed-in user, or None when the session is gone."""

    async def current_identity(self) -> AuthenticatedUser | None:
        ...


class StaticIdentity:
    """Identity resolved up front (e.g. by get_current_user)."""

    def __init__(self, user: AuthenticatedUser | None):
        self._user = user

    async def current_identity(self) -> AuthenticatedUser | None:
        return self._user


async def get_current_user(authorization: str = Header(None)) -> AuthenticatedUser:
    """
    Validate Supabase JWT and extract user info.

    Expects Authorization header: "Bearer <access_token>"
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization format")

    access_token = authorization[7:]  # Remove "Bearer " prefix

    try:
        client = get_service_client()
        user_response = client.auth.get_user(access_token)
    except Exception as e:
        logger.warning(f"Auth validation failed: {e}")
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    if not user_response or not user_response.user:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user = user_response.user
    return AuthenticatedUser(
        id=user.id,
        email=user.email,
        access_token=access_token,
    )
