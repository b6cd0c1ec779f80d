"""Listing endpoints, including search."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_db, get_optional_user
from app.config import settings
from app.core.permissions import require_host
from app.models.listing import Amenity, Listing
from app.models.user import User
from app.schemas.common import Pagination
from app.schemas.listing import (
    AmenityResponse,
    ListingCreate,
    ListingListResponse,
    ListingResponse,
    ListingSearchParams,
    ListingUpdate,
)
from app.services.listing_service import listing_service
from app.services.search_service import search_service

router = APIRouter()


@router.get("/", response_model=ListingListResponse)
async def search_listings(
    db: Annotated[AsyncSession, Depends(get_db)],
    location: str | None = Query(None, max_length=255),
    min_price: int | None = Query(None, ge=0),
    max_price: int | None = Query(None, ge=0),
    guests: int | None = Query(None, ge=1),
    amenities: list[str] = Query([]),
    check_in: date | None = None,
    check_out: date | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
) -> ListingListResponse:
    """Search active listings."""
    params = ListingSearchParams(
        location=location,
        min_price=min_price,
        max_price=max_price,
        guests=guests,
        amenities=amenities,
        check_in=check_in,
        check_out=check_out,
        page=page,
        limit=limit,
    )
    listings, total = await search_service.search_listings(db, params)
    return ListingListResponse(
        listings=[ListingResponse.model_validate(listing) for listing in listings],
        pagination=Pagination.build(page, limit, total),
    )


@router.post("/", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
async def create_listing(
    listing_data: ListingCreate,
    current_user: Annotated[User, Depends(require_host)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Listing:
    """Create a new listing (hosts and admins)."""
    return await listing_service.create_listing(db, current_user, listing_data)


@router.get("/amenities/all", response_model=list[AmenityResponse])
async def list_amenities(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[Amenity]:
    """Amenity reference list."""
    return await listing_service.list_amenities(db)


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(
    listing_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    viewer: Annotated[User | None, Depends(get_optional_user)],
) -> Listing:
    """Get a listing; deactivated ones only for their host or an admin."""
    return await listing_service.get_visible_listing(db, listing_id, viewer)


@router.put("/{listing_id}", response_model=ListingResponse)
async def update_listing(
    listing_id: UUID,
    updates: ListingUpdate,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Listing:
    """Update a listing (owner or admin)."""
    return await listing_service.update_listing(db, listing_id, current_user, updates)


@router.delete("/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_listing(
    listing_id: UUID,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Deactivate a listing (owner or admin)."""
    await listing_service.deactivate_listing(db, listing_id, current_user)
