"""Pydantic schemas for API validation."""

from app.schemas.booking import (
    AvailabilityResponse,
    BookingCancelRequest,
    BookingCreate,
    BookingListResponse,
    BookingResponse,
)
from app.schemas.common import MessageResponse, Pagination
from app.schemas.listing import (
    AmenityResponse,
    ListingCreate,
    ListingListResponse,
    ListingResponse,
    ListingSearchParams,
    ListingUpdate,
)
from app.schemas.review import ReviewCreate, ReviewListResponse, ReviewResponse
from app.schemas.system import SystemStatsResponse
from app.schemas.user import (
    DashboardResponse,
    PasswordChange,
    ProfileResponse,
    ProfileUpdate,
    PublicProfileResponse,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserPublicResponse,
    UserResponse,
)

__all__ = [
    # Common
    "MessageResponse",
    "Pagination",
    # User
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "UserPublicResponse",
    "TokenResponse",
    "PasswordChange",
    "ProfileUpdate",
    "ProfileResponse",
    "PublicProfileResponse",
    "DashboardResponse",
    # Listing
    "AmenityResponse",
    "ListingCreate",
    "ListingUpdate",
    "ListingResponse",
    "ListingListResponse",
    "ListingSearchParams",
    # Booking
    "AvailabilityResponse",
    "BookingCancelRequest",
    "BookingCreate",
    "BookingListResponse",
    "BookingResponse",
    # Review
    "ReviewCreate",
    "ReviewResponse",
    "ReviewListResponse",
    # System
    "SystemStatsResponse",
]
