"""Listing and host rating aggregates.

``Listing.average_rating`` / ``Listing.total_reviews`` and the derived keys
of ``User.host_info`` are projections of the reviews and bookings tables.
This service is their only writer; they can always be rebuilt from source.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm.attributes import set_committed_value

from app.core.exceptions import NotFoundError
from app.core.locks import listing_lock
from app.database import AsyncSessionLocal
from app.domain.rating import rating_from_totals
from app.models.booking import Booking
from app.models.listing import Listing
from app.models.review import Review
from app.models.user import User

logger = logging.getLogger(__name__)


@dataclass
class HostStats:
    total_listings: int
    total_bookings: int
    host_rating: Decimal


class RatingService:
    """Recomputes rating aggregates."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal) -> None:
        self.session_factory = session_factory

    async def recompute_listing_rating(self, db: AsyncSession, listing_id: UUID) -> tuple[Decimal, int]:
        """Recompute and store a listing's average rating and review count.

        Runs under the listing's lock with the listing row locked for update,
        and commits before returning.

        Returns:
            tuple: (average_rating, total_reviews)

        Raises:
            NotFoundError: If the listing does not exist
        """
        async with listing_lock(db, listing_id):
            result = await db.execute(
                select(Listing)
                .where(Listing.id == listing_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            listing = result.scalar_one_or_none()
            if not listing:
                raise NotFoundError("Listing", str(listing_id))

            total, count = (
                await db.execute(
                    select(func.sum(Review.rating), func.count(Review.id)).where(
                        Review.listing_id == listing_id
                    )
                )
            ).one()
            average, count = rating_from_totals(total, count)

            listing.average_rating = average
            listing.total_reviews = count
            await db.commit()

        logger.info("Listing %s rating recomputed: %s over %d reviews", listing_id, average, count)
        return average, count

    async def refresh_listing_rating(self, listing_id: UUID) -> tuple[Decimal, int] | None:
        """Best-effort recompute in a dedicated session.

        A failed write-back is logged and swallowed; the cached figures stay
        stale until the next review event or the nightly rebuild.
        """
        try:
            async with self.session_factory() as session:
                return await self.recompute_listing_rating(session, listing_id)
        except (SQLAlchemyError, OSError):
            logger.exception("Failed to write back rating for listing %s", listing_id)
            return None

    async def rebuild_all_listing_ratings(self, db: AsyncSession) -> int:
        """Recompute every listing's aggregate from its reviews.

        Returns:
            int: Number of listings processed
        """
        listing_ids = (await db.execute(select(Listing.id))).scalars().all()
        for listing_id in listing_ids:
            await self.recompute_listing_rating(db, listing_id)
        return len(listing_ids)

    async def compute_host_stats(self, db: AsyncSession, host_id: UUID) -> HostStats:
        """Aggregate a host's active listings, bookings and review ratings."""
        total_listings = (
            await db.execute(
                select(func.count(Listing.id)).where(
                    Listing.host_id == host_id, Listing.is_active.is_(True)
                )
            )
        ).scalar() or 0

        total_bookings = (
            await db.execute(
                select(func.count(Booking.id))
                .join(Listing, Listing.id == Booking.listing_id)
                .where(Listing.host_id == host_id)
            )
        ).scalar() or 0

        total, count = (
            await db.execute(
                select(func.sum(Review.rating), func.count(Review.id))
                .join(Listing, Listing.id == Review.listing_id)
                .where(Listing.host_id == host_id)
            )
        ).one()
        host_rating, _ = rating_from_totals(total, count)

        return HostStats(
            total_listings=total_listings,
            total_bookings=total_bookings,
            host_rating=host_rating,
        )

    async def cache_host_stats(self, user: User, stats: HostStats) -> bool:
        """Store host stats in ``user.host_info`` without failing the caller.

        The write uses its own session; on success the caller's instance is
        updated in place.

        Returns:
            bool: Whether the cache was written
        """
        host_info = {
            **(user.host_info or {}),
            "total_listings": stats.total_listings,
            "total_bookings": stats.total_bookings,
            "host_rating": float(stats.host_rating),
        }
        host_info.setdefault("joined_date", datetime.now(UTC).date().isoformat())
        try:
            async with self.session_factory() as session:
                await session.execute(
                    update(User).where(User.id == user.id).values(host_info=host_info)
                )
                await session.commit()
        except (SQLAlchemyError, OSError):
            logger.exception("Failed to cache host stats for user %s", user.id)
            return False

        set_committed_value(user, "host_info", host_info)
        return True

    async def host_stats_for(self, db: AsyncSession, user: User) -> HostStats:
        """Compute host stats and opportunistically cache them on the user."""
        stats = await self.compute_host_stats(db, user.id)
        await self.cache_host_stats(user, stats)
        logger.debug("Host stats for %s: %s", user.id, asdict(stats))
        return stats


rating_service = RatingService()
