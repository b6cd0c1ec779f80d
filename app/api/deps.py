"""Request dependencies: database session and the authenticated principal.

Role checks live in ``app.core.permissions``.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AppException, AuthenticationError, AuthorizationError
from app.core.security import verify_token
from app.database import get_db
from app.models.user import User

__all__ = [
    "get_db",
    "get_current_user",
    "get_current_active_user",
    "get_optional_user",
]

bearer_scheme = HTTPBearer(auto_error=False)

Credentials = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


async def resolve_principal(db: AsyncSession, token: str) -> User:
    """Map an access token to its user.

    Raises:
        AuthenticationError: If the token is invalid or its subject no longer exists
    """
    payload = verify_token(token, token_type="access")
    try:
        user_id = UUID(payload.get("sub") or "")
    except ValueError as e:
        raise AuthenticationError("Invalid token subject") from e

    user = await db.get(User, user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return user


async def get_current_user(
    credentials: Credentials,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    user = await resolve_principal(db, credentials.credentials)
    if not user.is_active:
        raise AuthenticationError("User account is deactivated")
    return user


async def get_current_active_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Principal for write operations; suspended accounts are refused."""
    if not current_user.is_active:
        raise AuthorizationError("User account is deactivated")
    return current_user


async def get_optional_user(
    credentials: Credentials,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User | None:
    """Principal for public endpoints that show more to owners and admins."""
    if credentials is None:
        return None
    try:
        user = await resolve_principal(db, credentials.credentials)
    except AppException:
        return None
    return user if user.is_active else None
