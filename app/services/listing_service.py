"""Listing management for hosts."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from app.models.listing import Amenity, Listing, ListingAmenity, ListingPhoto
from app.models.user import User
from app.schemas.listing import ListingCreate, ListingPhotoIn, ListingUpdate

logger = logging.getLogger(__name__)

# Never written through the listing API
PROTECTED_FIELDS = {"average_rating", "total_reviews", "host_id", "id"}


class ListingService:
    """Create, update and soft-delete listings."""

    async def get_listing(self, db: AsyncSession, listing_id: UUID, active_only: bool = True) -> Listing:
        result = await db.execute(select(Listing).where(Listing.id == listing_id))
        listing = result.scalar_one_or_none()
        if not listing or (active_only and not listing.is_active):
            raise NotFoundError("Listing", str(listing_id))
        return listing

    async def get_visible_listing(
        self, db: AsyncSession, listing_id: UUID, viewer: User | None = None
    ) -> Listing:
        """Active listings are public; an inactive one is visible to its host and admins."""
        listing = await self.get_listing(db, listing_id, active_only=False)
        if not listing.is_active and not (
            viewer and (viewer.is_admin or listing.host_id == viewer.id)
        ):
            raise NotFoundError("Listing", str(listing_id))
        return listing

    async def resolve_amenities(self, db: AsyncSession, names: list[str]) -> list[Amenity]:
        """Look up amenities by name.

        Raises:
            ValidationError: If any name is not a known amenity
        """
        wanted = list(dict.fromkeys(names))
        if not wanted:
            return []
        result = await db.execute(select(Amenity).where(Amenity.name.in_(wanted)))
        found = {a.name: a for a in result.scalars().all()}
        unknown = [n for n in wanted if n not in found]
        if unknown:
            raise ValidationError(
                f"Unknown amenities: {', '.join(unknown)}",
                errors=[{"field": "amenities", "message": f"unknown: {n}"} for n in unknown],
            )
        return [found[n] for n in wanted]

    async def list_amenities(self, db: AsyncSession) -> list[Amenity]:
        result = await db.execute(select(Amenity).order_by(Amenity.category, Amenity.name))
        return list(result.scalars().all())

    def _photos(self, images: list[ListingPhotoIn]) -> list[ListingPhoto]:
        return [ListingPhoto(url=img.url, alt=img.alt, sort_order=i) for i, img in enumerate(images)]

    def assert_can_manage(self, listing: Listing, actor: User) -> None:
        if listing.host_id != actor.id and not actor.is_admin:
            raise AuthorizationError("Only the listing owner can perform this action")

    async def create_listing(self, db: AsyncSession, host: User, data: ListingCreate) -> Listing:
        """Create an active listing owned by ``host``."""
        amenities = await self.resolve_amenities(db, data.amenities)

        listing = Listing(
            host_id=host.id,
            **data.model_dump(exclude={"amenities", "images"}),
        )
        listing.amenities = [ListingAmenity(amenity=a) for a in amenities]
        listing.photos = self._photos(data.images)
        db.add(listing)
        await db.commit()

        logger.info("Listing %s created by host %s", listing.id, host.id)
        return listing

    async def update_listing(
        self,
        db: AsyncSession,
        listing_id: UUID,
        actor: User,
        data: ListingUpdate,
    ) -> Listing:
        """Apply a partial update (owner or admin)."""
        listing = await self.get_listing(db, listing_id, active_only=False)
        self.assert_can_manage(listing, actor)

        changes = data.model_dump(exclude_unset=True, exclude={"amenities", "images"})
        for field, value in changes.items():
            if field in PROTECTED_FIELDS:
                continue
            setattr(listing, field, value)

        if data.amenities is not None:
            amenities = await self.resolve_amenities(db, data.amenities)
            current = {link.amenity_id: link for link in listing.amenities}
            listing.amenities = [
                current.get(a.id) or ListingAmenity(amenity=a) for a in amenities
            ]
        if data.images is not None:
            listing.photos = self._photos(data.images)

        await db.commit()
        logger.info("Listing %s updated by %s", listing.id, actor.id)
        return listing

    async def deactivate_listing(self, db: AsyncSession, listing_id: UUID, actor: User) -> None:
        """Soft delete: listings are never removed while bookings reference them."""
        listing = await self.get_listing(db, listing_id, active_only=False)
        self.assert_can_manage(listing, actor)
        listing.is_active = False
        await db.commit()
        logger.info("Listing %s deactivated by %s", listing.id, actor.id)

    async def host_listings(
        self, db: AsyncSession, host_id: UUID, limit: int | None = None
    ) -> list[Listing]:
        query = (
            select(Listing)
            .where(Listing.host_id == host_id, Listing.is_active.is_(True))
            .order_by(Listing.created_at.desc())
        )
        if limit:
            query = query.limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())


listing_service = ListingService()
