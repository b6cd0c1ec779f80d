"""Booking lifecycle: create, confirm, complete, cancel and list."""

import logging
from datetime import UTC, date, datetime
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import (
    AuthorizationError,
    BookingConflictError,
    NotFoundError,
    ValidationError,
)
from app.core.locks import listing_lock
from app.domain.availability import validate_stay_dates
from app.domain.booking_state import assert_booking_transition
from app.domain.cancellation_policy import assert_cancellable_at
from app.models.booking import NO_OVERLAP_CONSTRAINT, Booking
from app.models.listing import Listing
from app.models.user import User
from app.schemas.booking import BookingCreate
from app.services.availability_service import AvailabilityResult, availability_service

logger = logging.getLogger(__name__)

DEFAULT_CANCEL_REASON = "Cancelled by user"


class BookingService:
    """Service for booking state changes.

    Every method that writes commits before returning, so callers see the
    persisted state and per-listing locks are released after the write.
    """

    async def get_booking(self, db: AsyncSession, booking_id: UUID, for_update: bool = False) -> Booking:
        query = select(Booking).where(Booking.id == booking_id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await db.execute(query)
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def _listing_host_id(self, db: AsyncSession, listing_id: UUID) -> UUID:
        result = await db.execute(select(Listing.host_id).where(Listing.id == listing_id))
        host_id = result.scalar_one_or_none()
        if host_id is None:
            raise NotFoundError("Listing", str(listing_id))
        return host_id

    async def get_visible_booking(self, db: AsyncSession, booking_id: UUID, actor: User) -> Booking:
        """Booking as seen by its guest, the listing host or an admin."""
        booking = await self.get_booking(db, booking_id)
        if actor.is_admin or booking.user_id == actor.id:
            return booking
        if await self._listing_host_id(db, booking.listing_id) == actor.id:
            return booking
        raise AuthorizationError("You don't have permission to access this booking")

    async def create_booking(
        self,
        db: AsyncSession,
        user: User,
        data: BookingCreate,
        now: datetime | None = None,
    ) -> Booking:
        """Create a pending booking if the dates are free.

        The availability check and the insert run under the listing's lock
        and are committed before it is released.

        Raises:
            NotFoundError: Listing missing or inactive
            ValidationError: Bad dates or too many guests
            BookingConflictError: Dates overlap an occupying booking
        """
        listing = await availability_service.get_active_listing(db, data.listing_id)

        if data.guests > listing.max_guests:
            raise ValidationError(
                f"This listing accommodates at most {listing.max_guests} guests",
                errors=[{"field": "guests", "message": f"must be <= {listing.max_guests}"}],
            )
        validate_stay_dates(data.check_in, data.check_out, now or datetime.now(UTC))

        nights = (data.check_out - data.check_in).days
        total_price = data.total_price if data.total_price is not None else nights * listing.price_per_night

        listing_id = listing.id
        async with listing_lock(db, listing_id):
            conflicts = await availability_service.find_conflicts(
                db, listing_id, data.check_in, data.check_out
            )
            if conflicts:
                windows = AvailabilityResult(available=False, conflicts=conflicts).conflict_windows()
                logger.info(
                    "Booking conflict on listing %s for %s..%s (%d overlapping)",
                    listing_id, data.check_in, data.check_out, len(windows),
                )
                raise BookingConflictError(windows)

            booking = Booking(
                listing_id=listing_id,
                user_id=user.id,
                check_in=data.check_in,
                check_out=data.check_out,
                guests=data.guests,
                total_price=total_price,
                payment_method=data.payment_method,
                status="pending",
            )
            db.add(booking)
            try:
                await db.commit()
            except IntegrityError as exc:
                await db.rollback()
                if NO_OVERLAP_CONSTRAINT in str(exc.orig):
                    logger.info("Overlap constraint rejected booking on listing %s", listing_id)
                    raise BookingConflictError() from exc
                raise

        logger.info(
            "Booking %s created for listing %s by user %s (%s..%s)",
            booking.id, listing_id, user.id, booking.check_in, booking.check_out,
        )
        return booking

    async def cancel_booking(
        self,
        db: AsyncSession,
        booking_id: UUID,
        actor: User,
        reason: str | None = None,
        now: datetime | None = None,
    ) -> Booking:
        """Cancel a booking on behalf of its guest or an admin.

        Raises:
            NotFoundError: Unknown booking
            AuthorizationError: Actor is neither the guest nor an admin
            StateError: Already cancelled/completed, or inside the notice window
        """
        now = now or datetime.now(UTC)
        booking = await self.get_booking(db, booking_id, for_update=True)

        if booking.user_id != actor.id and not actor.is_admin:
            raise AuthorizationError("You can only cancel your own bookings")

        assert_booking_transition(booking.status, "cancelled")
        assert_cancellable_at(booking.check_in, now, settings.cancellation_window_hours)

        booking.status = "cancelled"
        booking.cancelled_at = now
        booking.cancel_reason = reason or DEFAULT_CANCEL_REASON
        booking.cancelled_by = actor.id
        await db.commit()

        logger.info("Booking %s cancelled by %s", booking.id, actor.id)
        return booking

    async def _host_transition(
        self,
        db: AsyncSession,
        booking_id: UUID,
        actor: User,
        target: str,
        now: datetime | None,
    ) -> Booking:
        booking = await self.get_booking(db, booking_id, for_update=True)
        if not actor.is_admin and await self._listing_host_id(db, booking.listing_id) != actor.id:
            raise AuthorizationError("Only the listing host can manage this booking")

        assert_booking_transition(booking.status, target)
        booking.status = target
        stamp = now or datetime.now(UTC)
        if target == "confirmed":
            booking.confirmed_at = stamp
        elif target == "completed":
            booking.completed_at = stamp
        await db.commit()

        logger.info("Booking %s %s by %s", booking.id, target, actor.id)
        return booking

    async def confirm_booking(
        self, db: AsyncSession, booking_id: UUID, actor: User, now: datetime | None = None
    ) -> Booking:
        """Move a pending booking to confirmed (listing host or admin)."""
        return await self._host_transition(db, booking_id, actor, "confirmed", now)

    async def complete_booking(
        self, db: AsyncSession, booking_id: UUID, actor: User, now: datetime | None = None
    ) -> Booking:
        """Move a confirmed booking to completed (listing host or admin)."""
        return await self._host_transition(db, booking_id, actor, "completed", now)

    async def list_user_bookings(
        self,
        db: AsyncSession,
        user: User,
        status: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Booking], int]:
        """Page through a user's bookings, newest first.

        Returns:
            tuple: (bookings on this page, total matching)
        """
        query = select(Booking).where(Booking.user_id == user.id)
        if status:
            query = query.where(Booking.status == status.lower())

        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        query = query.order_by(Booking.created_at.desc(), Booking.id).offset((page - 1) * limit).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all()), total

    async def complete_finished_bookings(
        self, db: AsyncSession, today: date | None = None, now: datetime | None = None
    ) -> int:
        """Mark confirmed bookings whose check-out has passed as completed.

        Returns:
            int: Number of bookings completed
        """
        today = today or datetime.now(UTC).date()
        result = await db.execute(
            update(Booking)
            .where(Booking.status == "confirmed", Booking.check_out <= today)
            .values(status="completed", completed_at=now or datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        count = result.rowcount or 0
        if count:
            logger.info("Completed %d finished bookings", count)
        return count


booking_service = BookingService()
