"""User and profile Pydantic schemas."""

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.schemas.booking import BookingResponse
from app.schemas.listing import ListingResponse

PHONE_PATTERN = r"^[0-9]{10,11}$"

Gender = Literal["male", "female", "other"]
ResponseTime = Literal["within an hour", "within a few hours", "within a day", "a few days or more"]


def _validate_phone(v: str | None) -> str | None:
    if v is None:
        return v
    if not re.match(PHONE_PATTERN, v):
        raise ValueError("Phone must be 10-11 digits")
    return v


class UserCreate(BaseModel):
    """Schema for user registration."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    phone: str | None = None
    role: str = Field(default="user", pattern="^(user|host)$")

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        return _validate_phone(v)


class UserLogin(BaseModel):
    """Schema for user login."""

    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Schema for authentication token response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshTokenRequest(BaseModel):
    """Schema for token refresh request."""

    refresh_token: str


class PasswordChange(BaseModel):
    """Schema for changing the current user's password."""

    current_password: str
    new_password: str = Field(..., min_length=6, max_length=128)


class UserResponse(BaseModel):
    """Schema for user response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: str
    phone: str | None
    avatar: str | None
    date_of_birth: date | None
    gender: str | None
    bio: str | None
    languages: list[str]
    address: dict[str, Any]
    preferences: dict[str, Any]
    verified: dict[str, bool]
    host_info: dict[str, Any]
    is_active: bool
    last_login_at: datetime | None
    created_at: datetime


class UserPublicResponse(BaseModel):
    """Schema for public user profile (visible to others)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    avatar: str | None
    bio: str | None
    languages: list[str]
    role: str
    verified: dict[str, bool]
    host_info: dict[str, Any]
    created_at: datetime


class UserListResponse(BaseModel):
    """Schema for admin user listing."""

    users: list[UserResponse]
    total: int
    page: int
    page_size: int


# Nested profile structures. Only these keys may be written by clients.


class AddressUpdate(BaseModel):
    street: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    country: str | None = Field(None, max_length=100)
    zip_code: str | None = Field(None, max_length=20)


class NotificationPreferences(BaseModel):
    email: bool | None = None
    sms: bool | None = None
    push: bool | None = None


class PreferencesUpdate(BaseModel):
    currency: Literal["VND", "USD", "EUR"] | None = None
    language: Literal["vi", "en"] | None = None
    notifications: NotificationPreferences | None = None


class HostInfoUpdate(BaseModel):
    response_rate: int | None = Field(None, ge=0, le=100)
    response_time: ResponseTime | None = None


class ProfileUpdate(BaseModel):
    """Schema for updating the current user's profile."""

    name: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = None
    date_of_birth: date | None = None
    gender: Gender | None = None
    bio: str | None = Field(None, max_length=500)
    languages: list[str] | None = None
    address: AddressUpdate | None = None
    preferences: PreferencesUpdate | None = None
    host_info: HostInfoUpdate | None = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        return _validate_phone(v)


class AvatarUpdate(BaseModel):
    avatar: str = Field(..., min_length=1)


class VerifyContactRequest(BaseModel):
    """Mark an email or phone contact as verified."""

    type: Literal["email", "phone"]


class HostStats(BaseModel):
    """Host aggregates computed from listings, bookings and reviews."""

    total_listings: int
    total_bookings: int
    host_rating: Decimal


class ProfileResponse(BaseModel):
    """Current user's profile with activity figures."""

    user: UserResponse
    booking_stats: dict[str, int]
    host_stats: HostStats | None = None


class PublicProfileResponse(BaseModel):
    user: UserPublicResponse
    host_stats: HostStats | None = None
    listings: list[ListingResponse] = Field(default_factory=list)


class MonthlyBookings(BaseModel):
    year: int
    month: int
    count: int
    revenue: int


class DashboardResponse(BaseModel):
    """Dashboard figures; host fields are present only for hosts."""

    role: str
    total_bookings: int
    recent_bookings: list[BookingResponse]
    upcoming_bookings: list[BookingResponse] | None = None
    total_listings: int | None = None
    host_rating: Decimal | None = None
    monthly_bookings: list[MonthlyBookings] | None = None
