"""
Shared fixtures for database-backed integration tests.

Every test gets a freshly created schema on a SQLite file database with the
amenity catalogue loaded.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import get_password_hash
from app.database import AsyncSessionLocal, Base, engine
from app.domain.amenities import DEFAULT_AMENITIES
from app.main import app
from app.models import Amenity, Booking, Listing, ListingAmenity, ListingPhoto, User
from app.services.listing_service import listing_service

TEST_PASSWORD = "Password123"


@pytest.fixture
async def database() -> AsyncIterator[None]:
    """Recreate all tables and seed amenities."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        session.add_all(Amenity(**a) for a in DEFAULT_AMENITIES)
        await session.commit()

    yield

    await engine.dispose()


@pytest.fixture
async def db(database: None) -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def client(database: None) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_user(db: AsyncSession) -> Callable[..., Awaitable[User]]:
    async def _make_user(name: str, email: str, role: str = "user", **fields) -> User:
        user = User(
            name=name,
            email=email,
            password_hash=get_password_hash(TEST_PASSWORD),
            role=role,
            **fields,
        )
        db.add(user)
        await db.commit()
        return user

    return _make_user


@pytest.fixture
async def guest(make_user) -> User:
    return await make_user("User Khach", "khach@example.com")


@pytest.fixture
async def other_guest(make_user) -> User:
    return await make_user("User Lan", "lan@example.com")


@pytest.fixture
async def host(make_user) -> User:
    return await make_user("Host Duc", "duc.host@example.com", role="host")


@pytest.fixture
async def other_host(make_user) -> User:
    return await make_user("Host Mai", "mai.host@example.com", role="host")


@pytest.fixture
async def admin(make_user) -> User:
    return await make_user("Admin User", "admin@example.com", role="admin")


@pytest.fixture
def make_listing(db: AsyncSession) -> Callable[..., Awaitable[Listing]]:
    async def _make_listing(
        host: User,
        title: str = "Villa view núi Đà Lạt",
        location: str = "Đà Lạt",
        price_per_night: int = 1_000_000,
        max_guests: int = 4,
        amenities: tuple[str, ...] = ("Wifi", "Bếp"),
        is_active: bool = True,
    ) -> Listing:
        resolved = await listing_service.resolve_amenities(db, list(amenities))
        listing = Listing(
            host_id=host.id,
            title=title,
            description="Không gian yên tĩnh, thích hợp cho gia đình.",
            location=location,
            address=f"123 Đường Trần Phú, {location}",
            price_per_night=price_per_night,
            max_guests=max_guests,
            bedrooms=2,
            bathrooms=1,
            is_active=is_active,
        )
        listing.amenities = [ListingAmenity(amenity=a) for a in resolved]
        listing.photos = [ListingPhoto(url="https://example.com/cover.jpg", alt="Cover", sort_order=0)]
        db.add(listing)
        await db.commit()
        return listing

    return _make_listing


@pytest.fixture
async def listing(make_listing, host: User) -> Listing:
    """Capacity 4 at 1,000,000 per night."""
    return await make_listing(host)


@pytest.fixture
def make_booking(db: AsyncSession) -> Callable[..., Awaitable[Booking]]:
    """Insert a booking directly, bypassing availability checks."""

    async def _make_booking(
        listing: Listing,
        user: User,
        check_in: date,
        check_out: date,
        status: str = "confirmed",
        guests: int = 2,
    ) -> Booking:
        booking = Booking(
            listing_id=listing.id,
            user_id=user.id,
            check_in=check_in,
            check_out=check_out,
            guests=guests,
            total_price=(check_out - check_in).days * listing.price_per_night,
            status=status,
        )
        db.add(booking)
        await db.commit()
        return booking

    return _make_booking
