"""Profile endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_db
from app.models.user import User
from app.schemas.user import (
    AvatarUpdate,
    DashboardResponse,
    ProfileResponse,
    ProfileUpdate,
    PublicProfileResponse,
    UserResponse,
    VerifyContactRequest,
)
from app.services.profile_service import profile_service

router = APIRouter()


@router.get("/", response_model=ProfileResponse)
async def get_profile(
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProfileResponse:
    """Current user's profile with booking and host statistics."""
    return await profile_service.get_profile(db, current_user)


@router.put("/", response_model=UserResponse)
async def update_profile(
    updates: ProfileUpdate,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Update profile fields; nested structures are merged."""
    return await profile_service.update_profile(db, current_user, updates)


@router.put("/avatar", response_model=UserResponse)
async def update_avatar(
    request: AvatarUpdate,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    return await profile_service.update_avatar(db, current_user, request.avatar)


@router.put("/verify", response_model=UserResponse)
async def verify_contact(
    request: VerifyContactRequest,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Mark email or phone as verified."""
    return await profile_service.verify_contact(db, current_user, request.type)


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DashboardResponse:
    return await profile_service.get_dashboard(db, current_user)


@router.get("/{user_id}", response_model=PublicProfileResponse)
async def get_public_profile(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PublicProfileResponse:
    """Public profile; hosts include stats and a few listings."""
    return await profile_service.get_public_profile(db, user_id)
