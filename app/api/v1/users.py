"""User endpoints."""

import logging
from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_db
from app.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.core.permissions import require_admin
from app.models.user import User
from app.schemas.user import UserListResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=UserListResponse)
async def list_users(
    _: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    role: str | None = Query(None, pattern="^(user|host|admin)$"),
    search: str | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=settings.max_page_size),
) -> UserListResponse:
    """List users (admin only)."""
    query = select(User)
    if role:
        query = query.where(User.role == role)
    if search:
        query = query.where(
            User.name.icontains(search, autoescape=True) | User.email.icontains(search, autoescape=True)
        )

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar() or 0

    query = query.order_by(User.created_at.desc()).offset((page - 1) * page_size).limit(page_size)
    result = await db.execute(query)

    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in result.scalars().all()],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.put("/become-host", response_model=UserResponse)
async def become_host(
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Upgrade the current user to a host."""
    if current_user.role != "user":
        raise ValidationError(f"Account is already a {current_user.role}")

    current_user.role = "host"
    current_user.host_info = {
        **(current_user.host_info or {}),
        "joined_date": datetime.now(UTC).date().isoformat(),
    }
    await db.flush()

    logger.info("User %s became a host", current_user.id)
    return current_user


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    _: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get any user's full record (admin only)."""
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User", str(user_id))
    return user
