"""System statistics endpoint (admin only)."""

import os
import platform
import resource
import time
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.config import settings
from app.core.permissions import require_admin
from app.database import engine
from app.models.booking import Booking
from app.models.listing import Listing
from app.models.review import Review
from app.models.user import User
from app.schemas.system import DatabaseStats, RuntimeStats, SystemStatsResponse

router = APIRouter()

_started_at = time.monotonic()


async def _count(db: AsyncSession, query) -> int:
    return (await db.execute(query)).scalar() or 0


@router.get("/stats", response_model=SystemStatsResponse)
async def get_system_stats(
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SystemStatsResponse:
    """Store counts and process runtime information."""
    by_status = await db.execute(
        select(Booking.status, func.count(Booking.id)).group_by(Booking.status)
    )

    database = DatabaseStats(
        dialect=engine.dialect.name,
        pool=engine.pool.status(),
        users=await _count(db, select(func.count(User.id))),
        listings=await _count(db, select(func.count(Listing.id))),
        active_listings=await _count(
            db, select(func.count(Listing.id)).where(Listing.is_active.is_(True))
        ),
        bookings=await _count(db, select(func.count(Booking.id))),
        reviews=await _count(db, select(func.count(Review.id))),
        bookings_by_status={status: count for status, count in by_status.all()},
    )

    runtime = RuntimeStats(
        python_version=platform.python_version(),
        platform=platform.platform(),
        pid=os.getpid(),
        uptime_seconds=round(time.monotonic() - _started_at, 3),
        max_rss_kb=resource.getrusage(resource.RUSAGE_SELF).ru_maxrss,
    )

    return SystemStatsResponse(
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        database=database,
        runtime=runtime,
    )
