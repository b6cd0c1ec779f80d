"""Listing-related Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import Pagination


class ListingPhotoIn(BaseModel):
    """Photo attached to a listing."""

    url: str = Field(..., min_length=1)
    alt: str | None = Field(None, max_length=255)


class ListingPhotoResponse(BaseModel):
    """Schema for listing photo response."""

    model_config = ConfigDict(from_attributes=True)

    url: str
    alt: str | None


class AmenityResponse(BaseModel):
    """Schema for amenity response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    category: str | None
    icon: str | None


class ListingBase(BaseModel):
    """Base listing schema."""

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)

    # Location
    location: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1, max_length=255)
    latitude: Decimal | None = Field(None, ge=-90, le=90)
    longitude: Decimal | None = Field(None, ge=-180, le=180)

    # Capacity
    max_guests: int = Field(..., ge=1, le=50)
    bedrooms: int = Field(default=1, ge=1, le=50)
    bathrooms: int = Field(default=1, ge=1, le=50)

    # Pricing (whole currency units)
    price_per_night: int = Field(..., ge=0)


class ListingCreate(ListingBase):
    """Schema for creating a listing."""

    amenities: list[str] = Field(default_factory=list)
    images: list[ListingPhotoIn] = Field(default_factory=list)


class ListingUpdate(BaseModel):
    """Schema for updating a listing.

    Rating aggregates are not accepted here.
    """

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=1, max_length=1000)
    location: str | None = Field(None, min_length=1, max_length=255)
    address: str | None = Field(None, min_length=1, max_length=255)
    latitude: Decimal | None = Field(None, ge=-90, le=90)
    longitude: Decimal | None = Field(None, ge=-180, le=180)
    max_guests: int | None = Field(None, ge=1, le=50)
    bedrooms: int | None = Field(None, ge=1, le=50)
    bathrooms: int | None = Field(None, ge=1, le=50)
    price_per_night: int | None = Field(None, ge=0)
    is_active: bool | None = None
    amenities: list[str] | None = None
    images: list[ListingPhotoIn] | None = None


class ListingResponse(BaseModel):
    """Schema for listing response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    host_id: UUID
    title: str
    description: str
    location: str
    address: str
    latitude: Decimal | None
    longitude: Decimal | None
    max_guests: int
    bedrooms: int
    bathrooms: int
    price_per_night: int
    amenities: list[str] = Field(validation_alias="amenity_names")
    images: list[ListingPhotoResponse] = Field(validation_alias="photos")
    is_active: bool
    average_rating: Decimal
    total_reviews: int
    created_at: datetime
    updated_at: datetime


class ListingSearchParams(BaseModel):
    """Schema for listing search parameters."""

    location: str | None = None
    min_price: int | None = Field(None, ge=0)
    max_price: int | None = Field(None, ge=0)
    guests: int | None = Field(None, ge=1)
    amenities: list[str] = Field(default_factory=list)
    check_in: date | None = None
    check_out: date | None = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)


class ListingListResponse(BaseModel):
    """Schema for paginated listing list."""

    listings: list[ListingResponse]
    pagination: Pagination
