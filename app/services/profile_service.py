"""User profile, public profile and dashboard."""

import logging
from collections import Counter
from dataclasses import asdict
from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.models.booking import BOOKING_STATUSES, Booking
from app.models.listing import Listing
from app.models.user import User
from app.schemas.booking import BookingResponse
from app.schemas.listing import ListingResponse
from app.schemas.user import (
    AddressUpdate,
    DashboardResponse,
    HostInfoUpdate,
    HostStats,
    MonthlyBookings,
    PreferencesUpdate,
    ProfileResponse,
    ProfileUpdate,
    PublicProfileResponse,
    UserPublicResponse,
    UserResponse,
)
from app.services.listing_service import listing_service
from app.services.rating_service import rating_service

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ("street", "city", "state", "country", "zip_code")
PREFERENCE_FIELDS = ("currency", "language")
NOTIFICATION_FIELDS = ("email", "sms", "push")
# Derived keys (total_listings, total_bookings, host_rating) are written by the rating service only
HOST_INFO_FIELDS = ("response_rate", "response_time")

SCALAR_PROFILE_FIELDS = ("name", "phone", "date_of_birth", "gender", "bio", "languages")

DASHBOARD_MONTHS = 6
RECENT_BOOKINGS_LIMIT = 5
UPCOMING_BOOKINGS_LIMIT = 3


def _pick(source: dict[str, Any], fields: tuple[str, ...]) -> dict[str, Any]:
    return {k: source[k] for k in fields if k in source}


def merge_address(current: dict[str, Any] | None, update: AddressUpdate) -> dict[str, Any]:
    """Overlay the provided address keys on the stored address."""
    return {**(current or {}), **_pick(update.model_dump(exclude_unset=True), ADDRESS_FIELDS)}


def merge_preferences(current: dict[str, Any] | None, update: PreferencesUpdate) -> dict[str, Any]:
    """Overlay preferences, merging ``notifications`` key by key."""
    merged = dict(current or {})
    changes = update.model_dump(exclude_unset=True)
    merged.update(_pick(changes, PREFERENCE_FIELDS))
    if changes.get("notifications") is not None:
        merged["notifications"] = {
            **(merged.get("notifications") or {}),
            **_pick(changes["notifications"], NOTIFICATION_FIELDS),
        }
    return merged


def merge_host_info(current: dict[str, Any] | None, update: HostInfoUpdate) -> dict[str, Any]:
    """Overlay host-editable keys; derived statistics are left untouched."""
    return {**(current or {}), **_pick(update.model_dump(exclude_unset=True), HOST_INFO_FIELDS)}


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _month_window(today: date, months: int) -> list[tuple[int, int]]:
    """(year, month) pairs for the last ``months`` months, oldest first."""
    pairs = []
    year, month = today.year, today.month
    for _ in range(months):
        pairs.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(pairs))


class ProfileService:
    """Profile reads and writes."""

    async def booking_stats(self, db: AsyncSession, user_id: UUID) -> dict[str, int]:
        result = await db.execute(
            select(Booking.status, func.count(Booking.id))
            .where(Booking.user_id == user_id)
            .group_by(Booking.status)
        )
        stats = {status: 0 for status in BOOKING_STATUSES}
        for status, count in result.all():
            stats[status] = count
        stats["total"] = sum(stats.values())
        return stats

    async def get_profile(self, db: AsyncSession, user: User) -> ProfileResponse:
        """Current user's profile; hosts also get freshly computed host stats."""
        host_stats = None
        if user.is_host:
            stats = await rating_service.host_stats_for(db, user)
            host_stats = HostStats(**asdict(stats))

        return ProfileResponse(
            user=UserResponse.model_validate(user),
            booking_stats=await self.booking_stats(db, user.id),
            host_stats=host_stats,
        )

    async def update_profile(self, db: AsyncSession, user: User, data: ProfileUpdate) -> User:
        """Apply scalar fields and merge nested address/preferences/host_info."""
        changes = data.model_dump(exclude_unset=True)
        for field in SCALAR_PROFILE_FIELDS:
            if field in changes:
                setattr(user, field, changes[field])

        if data.address is not None:
            user.address = merge_address(user.address, data.address)
        if data.preferences is not None:
            user.preferences = merge_preferences(user.preferences, data.preferences)
        if data.host_info is not None:
            if user.is_host:
                user.host_info = merge_host_info(user.host_info, data.host_info)
            else:
                logger.debug("Ignoring host_info update from non-host %s", user.id)

        await db.commit()
        logger.info("Profile updated for user %s", user.id)
        return user

    async def update_avatar(self, db: AsyncSession, user: User, avatar: str) -> User:
        user.avatar = avatar
        await db.commit()
        return user

    async def verify_contact(self, db: AsyncSession, user: User, contact_type: str) -> User:
        """Mark the user's email or phone as verified.

        Raises:
            ValidationError: Verifying a phone number that was never set
        """
        if contact_type == "phone" and not user.phone:
            raise ValidationError("Add a phone number before verifying it")
        user.verified = {**(user.verified or {}), contact_type: True}
        await db.commit()
        logger.info("User %s verified %s", user.id, contact_type)
        return user

    async def get_public_profile(self, db: AsyncSession, user_id: UUID) -> PublicProfileResponse:
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if not user or not user.is_active:
            raise NotFoundError("User", str(user_id))

        host_stats = None
        listings: list[ListingResponse] = []
        if user.is_host:
            stats = await rating_service.host_stats_for(db, user)
            host_stats = HostStats(**asdict(stats))
            listings = [
                ListingResponse.model_validate(listing)
                for listing in await listing_service.host_listings(
                    db, user.id, limit=settings.public_profile_listing_limit
                )
            ]

        return PublicProfileResponse(
            user=UserPublicResponse.model_validate(user),
            host_stats=host_stats,
            listings=listings,
        )

    async def _recent(self, db: AsyncSession, query) -> list[BookingResponse]:
        result = await db.execute(query)
        return [BookingResponse.model_validate(b) for b in result.scalars().all()]

    async def get_dashboard(
        self, db: AsyncSession, user: User, today: date | None = None
    ) -> DashboardResponse:
        """Host or guest dashboard figures."""
        today = today or datetime.now(UTC).date()

        if user.role == "host":
            stats = await rating_service.host_stats_for(db, user)
            host_bookings = (
                select(Booking)
                .join(Listing, Listing.id == Booking.listing_id)
                .where(Listing.host_id == user.id)
            )
            recent = await self._recent(
                db, host_bookings.order_by(Booking.created_at.desc()).limit(RECENT_BOOKINGS_LIMIT)
            )
            return DashboardResponse(
                role=user.role,
                total_bookings=stats.total_bookings,
                total_listings=stats.total_listings,
                host_rating=stats.host_rating,
                monthly_bookings=await self.monthly_bookings(db, user.id, today),
                recent_bookings=recent,
            )

        own = select(Booking).where(Booking.user_id == user.id)
        total = (await db.execute(select(func.count()).select_from(own.subquery()))).scalar() or 0
        upcoming = await self._recent(
            db,
            own.where(Booking.status == "confirmed", Booking.check_in >= today)
            .order_by(Booking.check_in)
            .limit(UPCOMING_BOOKINGS_LIMIT),
        )
        recent = await self._recent(
            db, own.order_by(Booking.created_at.desc()).limit(RECENT_BOOKINGS_LIMIT)
        )
        return DashboardResponse(
            role=user.role,
            total_bookings=total,
            upcoming_bookings=upcoming,
            recent_bookings=recent,
        )

    async def monthly_bookings(
        self, db: AsyncSession, host_id: UUID, today: date
    ) -> list[MonthlyBookings]:
        """Bookings created per month on the host's listings, with revenue."""
        months = _month_window(today, DASHBOARD_MONTHS)
        since = datetime(months[0][0], months[0][1], 1, tzinfo=UTC)

        result = await db.execute(
            select(Booking.created_at, Booking.total_price, Booking.status)
            .join(Listing, Listing.id == Booking.listing_id)
            .where(Listing.host_id == host_id)
        )
        counts: Counter[tuple[int, int]] = Counter()
        revenue: Counter[tuple[int, int]] = Counter()
        for created_at, total_price, status in result.all():
            created_at = _as_utc(created_at)
            if created_at < since:
                continue
            key = (created_at.year, created_at.month)
            counts[key] += 1
            if status != "cancelled":
                revenue[key] += total_price

        return [
            MonthlyBookings(year=y, month=m, count=counts[(y, m)], revenue=revenue[(y, m)])
            for y, m in months
        ]


profile_service = ProfileService()
