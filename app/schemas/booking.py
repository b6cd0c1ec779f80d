"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.common import Pagination

PaymentMethod = Literal["Credit Card", "Bank Transfer", "Cash", "E-Wallet"]


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    listing_id: UUID
    check_in: date
    check_out: date
    guests: int = Field(default=1, ge=1, le=50)
    total_price: int | None = Field(None, ge=0)
    payment_method: PaymentMethod = "Credit Card"

    @field_validator("check_out")
    @classmethod
    def validate_checkout(cls, v: date, info) -> date:
        check_in = info.data.get("check_in")
        if check_in and v <= check_in:
            raise ValueError("check_out must be after check_in")
        return v


class BookingCancelRequest(BaseModel):
    """Schema for cancelling a booking."""

    reason: str | None = Field(None, max_length=1000)


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    listing_id: UUID
    user_id: UUID

    # Dates
    check_in: date
    check_out: date
    nights: int

    guests: int
    total_price: int
    payment_method: str

    # Status
    status: str

    # Cancellation
    cancelled_at: datetime | None
    cancel_reason: str | None
    cancelled_by: UUID | None

    # Timestamps
    confirmed_at: datetime | None
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime


class BookingListResponse(BaseModel):
    """Schema for paginated booking list."""

    bookings: list[BookingResponse]
    pagination: Pagination


class ConflictWindow(BaseModel):
    """Dates held by an occupying booking."""

    model_config = ConfigDict(from_attributes=True)

    check_in: date
    check_out: date
    status: str


class AvailabilityListing(BaseModel):
    """Listing summary shown with an availability answer."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    price_per_night: int
    max_guests: int


class RequestedDates(BaseModel):
    check_in: date
    check_out: date
    nights: int


class AvailabilityResponse(BaseModel):
    """Schema for availability check response."""

    available: bool
    listing: AvailabilityListing
    requested_dates: RequestedDates
    conflicting_bookings: list[ConflictWindow]
