"""Booking endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_db
from app.config import settings
from app.models.booking import Booking
from app.models.user import User
from app.schemas.booking import (
    AvailabilityListing,
    AvailabilityResponse,
    BookingCancelRequest,
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    ConflictWindow,
    RequestedDates,
)
from app.schemas.common import Pagination
from app.services.availability_service import availability_service
from app.services.booking_service import booking_service

router = APIRouter()


@router.get("/check-availability", response_model=AvailabilityResponse)
async def check_availability(
    listing_id: UUID,
    check_in: date,
    check_out: date,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AvailabilityResponse:
    """Check whether a listing is free for the requested dates."""
    listing = await availability_service.get_active_listing(db, listing_id)
    result = await availability_service.check_availability(db, listing.id, check_in, check_out)
    return AvailabilityResponse(
        available=result.available,
        listing=AvailabilityListing.model_validate(listing),
        requested_dates=RequestedDates(
            check_in=check_in,
            check_out=check_out,
            nights=(check_out - check_in).days,
        ),
        conflicting_bookings=[ConflictWindow.model_validate(b) for b in result.conflicts],
    )


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Create a new booking in the pending state."""
    return await booking_service.create_booking(db, current_user, booking_data)


@router.get("/user", response_model=BookingListResponse)
async def list_my_bookings(
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    status_filter: str | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
) -> BookingListResponse:
    """List the current user's bookings, newest first."""
    bookings, total = await booking_service.list_user_bookings(
        db, current_user, status=status_filter, page=page, limit=limit
    )
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Get a booking visible to the guest, the host or an admin."""
    return await booking_service.get_visible_booking(db, booking_id, current_user)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    request: BookingCancelRequest | None = None,
) -> Booking:
    """Cancel a booking at least 24 hours before check-in."""
    reason = request.reason if request else None
    return await booking_service.cancel_booking(db, booking_id, current_user, reason=reason)


@router.post("/{booking_id}/confirm", response_model=BookingResponse)
async def confirm_booking(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Confirm a pending booking (listing host or admin)."""
    return await booking_service.confirm_booking(db, booking_id, current_user)


@router.post("/{booking_id}/complete", response_model=BookingResponse)
async def complete_booking(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Mark a confirmed booking as completed (listing host or admin)."""
    return await booking_service.complete_booking(db, booking_id, current_user)
