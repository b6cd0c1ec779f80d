"""Review creation, deletion and listing."""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthorizationError, DuplicateReviewError, NotFoundError
from app.domain.rating import round_rating
from app.models.booking import Booking
from app.models.listing import Listing
from app.models.review import Review
from app.models.user import User
from app.schemas.common import Pagination
from app.schemas.review import (
    RatingStats,
    ReviewCreate,
    ReviewListing,
    ReviewListResponse,
    ReviewResponse,
)
from app.services.rating_service import rating_service

logger = logging.getLogger(__name__)


class ReviewService:
    """Review lifecycle; every change is followed by a rating recompute."""

    async def _get_listing(self, db: AsyncSession, listing_id: UUID) -> Listing:
        result = await db.execute(select(Listing).where(Listing.id == listing_id))
        listing = result.scalar_one_or_none()
        if not listing:
            raise NotFoundError("Listing", str(listing_id))
        return listing

    async def has_completed_stay(self, db: AsyncSession, user_id: UUID, listing_id: UUID) -> bool:
        result = await db.execute(
            select(Booking.id)
            .where(
                Booking.user_id == user_id,
                Booking.listing_id == listing_id,
                Booking.status == "completed",
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def create_review(self, db: AsyncSession, user: User, data: ReviewCreate) -> Review:
        """Create a review for a listing the user has stayed at.

        Raises:
            NotFoundError: Unknown listing
            AuthorizationError: No completed booking on the listing
            DuplicateReviewError: The user already reviewed the listing
        """
        listing = await self._get_listing(db, data.listing_id)
        listing_id = listing.id
        user_id = user.id

        if not await self.has_completed_stay(db, user_id, listing_id):
            raise AuthorizationError("You can only review homestays you have stayed at")

        existing = await db.execute(
            select(Review.id).where(Review.user_id == user_id, Review.listing_id == listing_id)
        )
        if existing.scalar_one_or_none():
            raise DuplicateReviewError()

        review = Review(
            listing_id=listing_id,
            user_id=user_id,
            rating=data.rating,
            comment=data.comment,
        )
        db.add(review)
        try:
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            raise DuplicateReviewError() from exc

        logger.info("Review %s created for listing %s by user %s", review.id, listing_id, user_id)
        await rating_service.refresh_listing_rating(listing_id)
        return review

    async def delete_review(self, db: AsyncSession, review_id: UUID, actor: User) -> None:
        """Delete a review (author or admin) and recompute the listing rating."""
        result = await db.execute(select(Review).where(Review.id == review_id))
        review = result.scalar_one_or_none()
        if not review:
            raise NotFoundError("Review", str(review_id))
        if review.user_id != actor.id and not actor.is_admin:
            raise AuthorizationError("You can only delete your own reviews")

        listing_id = review.listing_id
        await db.delete(review)
        await db.commit()

        logger.info("Review %s deleted by %s", review_id, actor.id)
        await rating_service.refresh_listing_rating(listing_id)

    async def rating_breakdown(self, db: AsyncSession, listing_id: UUID) -> dict[int, int]:
        result = await db.execute(
            select(Review.rating, func.count(Review.id))
            .where(Review.listing_id == listing_id)
            .group_by(Review.rating)
        )
        breakdown = {star: 0 for star in range(1, 6)}
        for rating, count in result.all():
            breakdown[int(rating)] = count
        return breakdown

    async def list_listing_reviews(
        self,
        db: AsyncSession,
        listing_id: UUID,
        page: int = 1,
        limit: int = 10,
    ) -> ReviewListResponse:
        """Page through a listing's reviews, newest first, with rating stats."""
        listing = await self._get_listing(db, listing_id)
        if not listing.is_active:
            raise NotFoundError("Listing", str(listing_id))

        base = select(Review).where(Review.listing_id == listing_id)
        total = (await db.execute(select(func.count()).select_from(base.subquery()))).scalar() or 0

        result = await db.execute(
            select(Review, User.name, User.avatar)
            .join(User, User.id == Review.user_id)
            .where(Review.listing_id == listing_id)
            .order_by(Review.created_at.desc(), Review.id)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        reviews = [
            ReviewResponse.model_validate(review).model_copy(
                update={"reviewer_name": name, "reviewer_avatar": avatar}
            )
            for review, name, avatar in result.all()
        ]

        breakdown = await self.rating_breakdown(db, listing_id)
        return ReviewListResponse(
            listing=ReviewListing.model_validate(listing),
            reviews=reviews,
            rating_stats=RatingStats(
                average_rating=round_rating(listing.average_rating),
                total_reviews=listing.total_reviews,
                rating_breakdown=breakdown,
            ),
            pagination=Pagination.build(page, limit, total),
        )


review_service = ReviewService()
