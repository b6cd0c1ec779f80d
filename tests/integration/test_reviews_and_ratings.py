"""
Integration tests for reviews and the listing rating aggregate.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.core.exceptions import AuthorizationError, DuplicateReviewError, NotFoundError
from app.database import AsyncSessionLocal
from app.models import Listing, Review
from app.schemas.review import ReviewCreate
from app.services.rating_service import RatingService, rating_service
from app.services.review_service import review_service
from helpers import future


async def _stored_rating(listing_id) -> tuple[Decimal, int]:
    async with AsyncSessionLocal() as session:
        row = (
            await session.execute(
                select(Listing.average_rating, Listing.total_reviews).where(Listing.id == listing_id)
            )
        ).one()
    return Decimal(str(row.average_rating)), row.total_reviews


@pytest.fixture
def make_reviewer(make_user, make_booking, listing):
    """A user with a completed stay on ``listing``."""
    counter = iter(range(100))

    async def _make_reviewer():
        n = next(counter)
        user = await make_user(f"Reviewer {n}", f"reviewer{n}@example.com")
        await make_booking(listing, user, future(2, 1 + n), future(2, 2 + n), status="completed")
        return user

    return _make_reviewer


@pytest.mark.integration
async def test_ratings_follow_create_and_delete(db, listing, make_reviewer) -> None:
    """Ratings [5, 4, 3] average 4.0; dropping the 3 gives 4.5; none gives 0."""
    reviews = []
    for rating in (5, 4, 3):
        user = await make_reviewer()
        reviews.append(
            (
                user,
                await review_service.create_review(
                    db, user, ReviewCreate(listing_id=listing.id, rating=rating, comment="Tuyệt vời")
                ),
            )
        )

    assert await _stored_rating(listing.id) == (Decimal("4.0"), 3)

    author, three_star = reviews[2]
    await review_service.delete_review(db, three_star.id, author)
    assert await _stored_rating(listing.id) == (Decimal("4.5"), 2)

    for author, review in reviews[:2]:
        await review_service.delete_review(db, review.id, author)
    assert await _stored_rating(listing.id) == (Decimal("0.0"), 0)


@pytest.mark.integration
async def test_review_requires_completed_stay(db, guest, listing, make_booking) -> None:
    await make_booking(listing, guest, future(6, 1), future(6, 3), status="confirmed")

    with pytest.raises(AuthorizationError, match="stayed at"):
        await review_service.create_review(
            db, guest, ReviewCreate(listing_id=listing.id, rating=5, comment="Great")
        )


@pytest.mark.integration
async def test_second_review_is_duplicate(db, listing, make_reviewer) -> None:
    user = await make_reviewer()
    await review_service.create_review(
        db, user, ReviewCreate(listing_id=listing.id, rating=5, comment="Great")
    )

    with pytest.raises(DuplicateReviewError):
        await review_service.create_review(
            db, user, ReviewCreate(listing_id=listing.id, rating=1, comment="Changed my mind")
        )
    assert await _stored_rating(listing.id) == (Decimal("5.0"), 1)


@pytest.mark.integration
async def test_review_unknown_listing(db, guest) -> None:
    import uuid

    with pytest.raises(NotFoundError):
        await review_service.create_review(
            db, guest, ReviewCreate(listing_id=uuid.uuid4(), rating=5, comment="Great")
        )


@pytest.mark.integration
async def test_only_author_or_admin_deletes(db, admin, other_guest, listing, make_reviewer) -> None:
    user = await make_reviewer()
    review = await review_service.create_review(
        db, user, ReviewCreate(listing_id=listing.id, rating=4, comment="Good")
    )

    with pytest.raises(AuthorizationError):
        await review_service.delete_review(db, review.id, other_guest)

    await review_service.delete_review(db, review.id, admin)
    assert await db.scalar(select(Review).where(Review.id == review.id)) is None


@pytest.mark.integration
async def test_failed_rating_write_back_keeps_review(db, listing, make_reviewer) -> None:
    """The review is committed even when the aggregate update fails."""
    user = await make_reviewer()

    with patch.object(
        RatingService,
        "recompute_listing_rating",
        side_effect=OperationalError("UPDATE listings", {}, Exception("database is locked")),
    ):
        review = await review_service.create_review(
            db, user, ReviewCreate(listing_id=listing.id, rating=5, comment="Great")
        )

    assert review.id is not None
    assert await _stored_rating(listing.id) == (Decimal("0.0"), 0)

    # The next recompute brings the aggregate back in line
    async with AsyncSessionLocal() as session:
        assert await rating_service.recompute_listing_rating(session, listing.id) == (Decimal("5.0"), 1)


@pytest.mark.integration
async def test_rebuild_all_listing_ratings(db, host, listing, make_listing, make_reviewer) -> None:
    await make_listing(host, title="Studio Quận 1", location="TP Hồ Chí Minh")
    user = await make_reviewer()
    db.add(Review(listing_id=listing.id, user_id=user.id, rating=3, comment="Ok"))
    await db.commit()

    assert await rating_service.rebuild_all_listing_ratings(db) == 2
    assert await _stored_rating(listing.id) == (Decimal("3.0"), 1)


@pytest.mark.integration
async def test_list_listing_reviews(db, listing, make_reviewer) -> None:
    for rating in (5, 4):
        user = await make_reviewer()
        await review_service.create_review(
            db, user, ReviewCreate(listing_id=listing.id, rating=rating, comment="Nice")
        )

    async with AsyncSessionLocal() as session:
        page = await review_service.list_listing_reviews(session, listing.id, page=1, limit=1)

    assert page.pagination.total == 2
    assert page.pagination.has_next
    assert len(page.reviews) == 1
    assert page.reviews[0].reviewer_name.startswith("Reviewer")
    assert page.rating_stats.average_rating == Decimal("4.5")
    assert page.rating_stats.rating_breakdown == {1: 0, 2: 0, 3: 0, 4: 1, 5: 1}


@pytest.mark.integration
async def test_host_stats(db, host, listing, make_reviewer) -> None:
    for rating in (5, 4):
        user = await make_reviewer()
        db.add(Review(listing_id=listing.id, user_id=user.id, rating=rating, comment="Nice"))
    await db.commit()

    stats = await rating_service.host_stats_for(db, host)

    assert stats.total_listings == 1
    assert stats.total_bookings == 2
    assert stats.host_rating == Decimal("4.5")
    assert host.host_info["host_rating"] == 4.5
    assert host.host_info["total_listings"] == 1


@pytest.mark.integration
async def test_host_stats_cache_failure_is_suppressed(db, host, listing) -> None:
    class BrokenSession:
        async def __aenter__(self):
            raise OperationalError("UPDATE users", {}, Exception("connection lost"))

        async def __aexit__(self, *exc):
            return False

    service = RatingService(session_factory=BrokenSession)
    stats = await service.host_stats_for(db, host)

    assert stats.total_listings == 1
    assert "host_rating" not in (host.host_info or {})


@pytest.mark.integration
async def test_refused_connection_during_write_back_keeps_review(db, listing, make_reviewer) -> None:
    """A connection-level failure in the aggregate update does not fail the review."""
    user = await make_reviewer()
    refused = ConnectionRefusedError(111, "Connect call failed ('127.0.0.1', 5432)")

    with patch.object(RatingService, "recompute_listing_rating", side_effect=refused):
        review = await review_service.create_review(
            db, user, ReviewCreate(listing_id=listing.id, rating=4, comment="Good")
        )
        await review_service.delete_review(db, review.id, user)

    assert await db.scalar(select(Review).where(Review.id == review.id)) is None


@pytest.mark.integration
async def test_host_stats_cache_survives_refused_connection(db, host, listing) -> None:
    class RefusingSession:
        async def __aenter__(self):
            raise ConnectionRefusedError(111, "Connect call failed")

        async def __aexit__(self, *exc):
            return False

    service = RatingService(session_factory=RefusingSession)
    stats = await service.host_stats_for(db, host)

    assert stats.total_listings == 1
    assert "host_rating" not in (host.host_info or {})


@pytest.mark.integration
async def test_recompute_is_idempotent(db, listing, make_reviewer) -> None:
    for rating in (5, 4, 4):
        user = await make_reviewer()
        db.add(Review(listing_id=listing.id, user_id=user.id, rating=rating, comment="Nice"))
    await db.commit()

    async with AsyncSessionLocal() as session:
        first = await rating_service.recompute_listing_rating(session, listing.id)
        second = await rating_service.recompute_listing_rating(session, listing.id)

    assert first == second == (Decimal("4.3"), 3)
    assert await _stored_rating(listing.id) == first


@pytest.mark.integration
async def test_concurrent_reviews_count_every_review(listing, make_reviewer) -> None:
    """Reviews landing together on one listing leave no lost update in the aggregate."""
    reviewers = [await make_reviewer() for _ in range(4)]
    ratings = [5, 4, 3, 5]

    async def submit(user, rating):
        async with AsyncSessionLocal() as session:
            return await review_service.create_review(
                session, user, ReviewCreate(listing_id=listing.id, rating=rating, comment="Ổn")
            )

    results = await asyncio.gather(*(submit(u, r) for u, r in zip(reviewers, ratings)))

    assert all(isinstance(r, Review) for r in results)
    assert await _stored_rating(listing.id) == (Decimal("4.3"), 4)
