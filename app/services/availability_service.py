"""Availability checks for listings over a date range."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.domain.availability import conflicting_booking_clause, validate_stay_dates
from app.models.booking import Booking
from app.models.listing import Listing


@dataclass
class AvailabilityResult:
    """Outcome of an availability check."""

    available: bool
    conflicts: list[Booking] = field(default_factory=list)

    def conflict_windows(self) -> list[dict]:
        """Serializable windows for error payloads."""
        return [
            {
                "check_in": b.check_in.isoformat(),
                "check_out": b.check_out.isoformat(),
                "status": b.status,
            }
            for b in self.conflicts
        ]


def unavailable_listing_ids(check_in: date, check_out: date) -> Select:
    """Subquery of listing ids holding any occupying booking in the window."""
    return (
        select(Booking.listing_id)
        .where(conflicting_booking_clause(check_in, check_out))
        .distinct()
    )


class AvailabilityService:
    """Read-only queries over booking state."""

    async def get_active_listing(self, db: AsyncSession, listing_id: UUID) -> Listing:
        """Load a listing that can accept bookings.

        Raises:
            NotFoundError: If the listing does not exist or is inactive
        """
        result = await db.execute(select(Listing).where(Listing.id == listing_id))
        listing = result.scalar_one_or_none()
        if not listing or not listing.is_active:
            raise NotFoundError("Listing", str(listing_id))
        return listing

    async def find_conflicts(
        self,
        db: AsyncSession,
        listing_id: UUID,
        check_in: date,
        check_out: date,
    ) -> list[Booking]:
        result = await db.execute(
            select(Booking)
            .where(
                Booking.listing_id == listing_id,
                conflicting_booking_clause(check_in, check_out),
            )
            .order_by(Booking.check_in)
        )
        return list(result.scalars().all())

    async def check_availability(
        self,
        db: AsyncSession,
        listing_id: UUID,
        check_in: date,
        check_out: date,
        now: datetime | None = None,
    ) -> AvailabilityResult:
        """Check whether ``[check_in, check_out)`` is free for a listing.

        Args:
            db: Database session
            listing_id: Listing to check
            check_in: First night
            check_out: Departure date (not occupied)
            now: Reference instant for the past check, defaults to the current UTC time

        Returns:
            AvailabilityResult: ``available`` plus the conflicting bookings

        Raises:
            ValidationError: If the range is empty, inverted or starts in the past
        """
        validate_stay_dates(check_in, check_out, now or datetime.now(UTC))
        conflicts = await self.find_conflicts(db, listing_id, check_in, check_out)
        return AvailabilityResult(available=not conflicts, conflicts=conflicts)


availability_service = AvailabilityService()
