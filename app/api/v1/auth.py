"""Authentication endpoints."""

import logging
from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_current_user, get_db
from app.core.exceptions import AuthenticationError, ConflictError, ValidationError
from app.core.security import (
    create_tokens,
    get_password_hash,
    verify_password,
    verify_token,
)
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.user import (
    PasswordChange,
    RefreshTokenRequest,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """Register a new user account."""
    email = user_data.email.lower()
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise ConflictError("Email already registered")

    user = User(
        name=user_data.name,
        email=email,
        phone=user_data.phone,
        password_hash=get_password_hash(user_data.password),
        role=user_data.role,
    )
    if user.role == "host":
        user.host_info = {"joined_date": datetime.now(UTC).date().isoformat()}
    db.add(user)
    await db.flush()

    logger.info("User %s registered as %s", user.id, user.role)
    tokens = create_tokens(str(user.id), user.email, user.role)
    return TokenResponse(**tokens)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """Login with email and password."""
    result = await db.execute(select(User).where(User.email == credentials.email.lower()))
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.password_hash):
        raise AuthenticationError("Invalid email or password")

    if not user.is_active:
        raise AuthenticationError("Account is deactivated")

    user.last_login_at = datetime.now(UTC)

    tokens = create_tokens(str(user.id), user.email, user.role)
    return TokenResponse(**tokens)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    request: RefreshTokenRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """Refresh access token using refresh token."""
    payload = verify_token(request.refresh_token, token_type="refresh")
    try:
        user_id = UUID(payload.get("sub") or "")
    except ValueError as e:
        raise AuthenticationError("Invalid token") from e

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user or not user.is_active:
        raise AuthenticationError("User not found or inactive")

    tokens = create_tokens(str(user.id), user.email, user.role)
    return TokenResponse(**tokens)


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get current authenticated user profile."""
    return current_user


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    request: PasswordChange,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    """Change the current user's password."""
    if not verify_password(request.current_password, current_user.password_hash):
        raise AuthenticationError("Current password is incorrect")
    if request.current_password == request.new_password:
        raise ValidationError("New password must differ from the current password")

    current_user.password_hash = get_password_hash(request.new_password)
    current_user.must_change_password = False
    await db.flush()

    logger.info("Password changed for user %s", current_user.id)
    return MessageResponse(message="Password changed successfully")
