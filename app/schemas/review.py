"""Review-related Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import Pagination


class ReviewCreate(BaseModel):
    """Schema for creating a review."""

    listing_id: UUID
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1, max_length=500)


class ReviewResponse(BaseModel):
    """Schema for review response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    listing_id: UUID
    user_id: UUID
    rating: int
    comment: str
    created_at: datetime

    # Reviewer info (for display)
    reviewer_name: str | None = None
    reviewer_avatar: str | None = None


class RatingStats(BaseModel):
    """Aggregate rating figures for a listing."""

    average_rating: Decimal
    total_reviews: int
    rating_breakdown: dict[int, int]  # {1: count, 2: count, ...}


class ReviewListing(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    average_rating: Decimal
    total_reviews: int


class ReviewListResponse(BaseModel):
    """Schema for paginated review list."""

    listing: ReviewListing
    reviews: list[ReviewResponse]
    rating_stats: RatingStats
    pagination: Pagination
