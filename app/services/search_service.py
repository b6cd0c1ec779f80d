"""Listing search."""

import logging
from datetime import UTC, datetime

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.domain.availability import validate_stay_dates
from app.models.listing import Amenity, Listing, ListingAmenity
from app.schemas.listing import ListingSearchParams
from app.services.availability_service import unavailable_listing_ids

logger = logging.getLogger(__name__)


class SearchService:
    """Composes listing filters into a single query."""

    def build_query(self, params: ListingSearchParams, now: datetime | None = None) -> Select:
        """Build the filtered (unpaginated) listing query.

        Raises:
            ValidationError: Inverted price range or bad stay dates
        """
        query = select(Listing).where(Listing.is_active.is_(True))

        if params.location:
            term = params.location.strip()
            query = query.where(
                or_(
                    Listing.title.icontains(term, autoescape=True),
                    Listing.location.icontains(term, autoescape=True),
                    Listing.address.icontains(term, autoescape=True),
                )
            )

        if (
            params.min_price is not None
            and params.max_price is not None
            and params.min_price > params.max_price
        ):
            raise ValidationError(
                "min_price must not exceed max_price",
                errors=[{"field": "min_price", "message": "greater than max_price"}],
            )
        if params.min_price is not None:
            query = query.where(Listing.price_per_night >= params.min_price)
        if params.max_price is not None:
            query = query.where(Listing.price_per_night <= params.max_price)

        if params.guests is not None:
            query = query.where(Listing.max_guests >= params.guests)

        if params.amenities:
            with_amenity = (
                select(ListingAmenity.listing_id)
                .join(Amenity, Amenity.id == ListingAmenity.amenity_id)
                .where(Amenity.name.in_(params.amenities))
            )
            query = query.where(Listing.id.in_(with_amenity))

        # Date exclusion applies only when both ends are given
        if params.check_in and params.check_out:
            validate_stay_dates(params.check_in, params.check_out, now or datetime.now(UTC))
            query = query.where(
                Listing.id.not_in(unavailable_listing_ids(params.check_in, params.check_out))
            )

        return query

    async def search_listings(
        self,
        db: AsyncSession,
        params: ListingSearchParams,
        now: datetime | None = None,
    ) -> tuple[list[Listing], int]:
        """Run a search and return one page, newest listings first.

        Returns:
            tuple: (listings on this page, total matching)
        """
        query = self.build_query(params, now)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        query = (
            query.order_by(Listing.created_at.desc(), Listing.id)
            .offset((params.page - 1) * params.limit)
            .limit(params.limit)
        )
        result = await db.execute(query)
        listings = list(result.scalars().all())

        logger.debug("Search %s matched %d listings", params.model_dump(exclude_none=True), total)
        return listings, total


search_service = SearchService()
