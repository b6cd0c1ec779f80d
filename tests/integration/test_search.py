"""
Integration tests for listing search filters.
"""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from app.core.exceptions import ValidationError
from app.schemas.listing import ListingSearchParams
from app.services.search_service import search_service
from helpers import FUTURE_YEAR, future

NOW = datetime(FUTURE_YEAR, 1, 1, 9, 30, tzinfo=UTC)


@pytest.fixture
async def catalogue(host, other_host, make_listing):
    return {
        "dalat": await make_listing(
            host, title="Villa view núi", location="Đà Lạt", price_per_night=1_500_000,
            max_guests=6, amenities=("Wifi", "Bể bơi", "Bếp"),
        ),
        "hanoi": await make_listing(
            other_host, title="Căn hộ trung tâm", location="Hà Nội", price_per_night=2_000_000,
            max_guests=4, amenities=("Wifi", "Thang máy"),
        ),
        "sapa": await make_listing(
            other_host, title="Nhà gỗ Sapa", location="Sapa", price_per_night=800_000,
            max_guests=4, amenities=("Lò sưởi", "Ban công"),
        ),
        "closed": await make_listing(
            host, title="Closed villa", location="Đà Lạt", price_per_night=900_000,
            is_active=False,
        ),
    }


async def _titles(db, **params) -> set[str]:
    listings, _ = await search_service.search_listings(db, ListingSearchParams(**params), now=NOW)
    return {listing.title for listing in listings}


@pytest.mark.integration
async def test_search_returns_only_active(db, catalogue) -> None:
    assert await _titles(db) == {"Villa view núi", "Căn hộ trung tâm", "Nhà gỗ Sapa"}


@pytest.mark.integration
async def test_location_matches_title_location_or_address(db, catalogue) -> None:
    assert await _titles(db, location="Đà Lạt") == {"Villa view núi"}
    assert await _titles(db, location="SAPA") == {"Nhà gỗ Sapa"}
    assert await _titles(db, location="gỗ") == {"Nhà gỗ Sapa"}
    assert await _titles(db, location="Trần Phú") == {"Villa view núi", "Căn hộ trung tâm", "Nhà gỗ Sapa"}


@pytest.mark.integration
async def test_location_wildcards_are_literal(db, catalogue) -> None:
    assert await _titles(db, location="%") == set()


@pytest.mark.integration
async def test_price_range(db, catalogue) -> None:
    assert await _titles(db, min_price=1_000_000, max_price=1_800_000) == {"Villa view núi"}
    assert await _titles(db, max_price=800_000) == {"Nhà gỗ Sapa"}


@pytest.mark.integration
async def test_inverted_price_range_is_rejected(db, catalogue) -> None:
    with pytest.raises(ValidationError):
        await _titles(db, min_price=2_000_000, max_price=1_000_000)


@pytest.mark.integration
async def test_guest_capacity(db, catalogue) -> None:
    assert await _titles(db, guests=5) == {"Villa view núi"}


@pytest.mark.integration
async def test_amenities_match_any(db, catalogue) -> None:
    assert await _titles(db, amenities=["Bể bơi", "Lò sưởi"]) == {"Villa view núi", "Nhà gỗ Sapa"}
    assert await _titles(db, amenities=["Sauna"]) == set()


@pytest.mark.integration
async def test_dates_exclude_listings_with_occupying_bookings(
    db, guest, catalogue, make_booking
) -> None:
    await make_booking(catalogue["dalat"], guest, future(6, 1), future(6, 5), status="confirmed")
    await make_booking(catalogue["hanoi"], guest, future(6, 1), future(6, 5), status="cancelled")
    await make_booking(catalogue["sapa"], guest, future(6, 5), future(6, 8), status="pending")

    available = await _titles(db, check_in=future(6, 3), check_out=future(6, 5))

    assert available == {"Căn hộ trung tâm", "Nhà gỗ Sapa"}


@pytest.mark.integration
async def test_single_date_is_ignored(db, guest, catalogue, make_booking) -> None:
    await make_booking(catalogue["dalat"], guest, future(6, 1), future(6, 5), status="confirmed")

    assert "Villa view núi" in await _titles(db, check_in=future(6, 2))


@pytest.mark.integration
async def test_past_dates_are_rejected(db, catalogue) -> None:
    with pytest.raises(ValidationError):
        await _titles(db, check_in=date(FUTURE_YEAR - 1, 12, 31), check_out=future(1, 3))


@pytest.mark.integration
async def test_pagination_newest_first(db, catalogue) -> None:
    listings, total = await search_service.search_listings(
        db, ListingSearchParams(page=2, limit=2), now=NOW
    )

    assert total == 3
    assert [listing.title for listing in listings] == ["Villa view núi"]
