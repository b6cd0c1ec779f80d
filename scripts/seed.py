#!/usr/bin/env python3
"""Load demo users, listings and bookings into an empty database.

Existing users, listings and bookings are removed first.
"""

import asyncio
import sys
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sqlalchemy import delete, select

from app.core.security import get_password_hash
from app.database import AsyncSessionLocal, init_db
from app.domain.amenities import DEFAULT_AMENITIES
from app.models import Amenity, Booking, Listing, ListingAmenity, ListingPhoto, Review, User

DEMO_PASSWORD = "Password123"

USERS = [
    {"name": "Admin User", "email": "admin@example.com", "role": "admin"},
    {"name": "Host Duc", "email": "duc.host@example.com", "role": "host"},
    {"name": "Host Mai", "email": "mai.host@example.com", "role": "host"},
    {"name": "User Khach", "email": "khach@example.com", "role": "user"},
]

# host index refers to the hosts in USERS order
LISTINGS = [
    {
        "host": 0,
        "title": "Villa sang trọng view núi Đà Lạt",
        "description": "Villa đẹp với view núi tuyệt đẹp, không gian yên tĩnh, thích hợp cho gia đình nghỉ dưỡng.",
        "location": "Đà Lạt",
        "address": "123 Đường Trần Phú, Phường 4, Thành phố Đà Lạt, Lâm Đồng",
        "price_per_night": 1500000,
        "max_guests": 6,
        "bedrooms": 3,
        "bathrooms": 2,
        "latitude": Decimal("11.9404"),
        "longitude": Decimal("108.4583"),
        "amenities": ["Wifi", "Bể bơi", "Bãi đậu xe", "Điều hòa", "Bếp"],
        "images": [("https://example.com/dalat1.jpg", "Villa view"), ("https://example.com/dalat2.jpg", "Living room")],
    },
    {
        "host": 1,
        "title": "Căn hộ hiện đại trung tâm Hà Nội",
        "description": "Căn hộ sang trọng tại trung tâm Hà Nội, gần các địa điểm du lịch nổi tiếng.",
        "location": "Hà Nội",
        "address": "456 Đường Hoàn Kiếm, Quận Hoàn Kiếm, Hà Nội",
        "price_per_night": 2000000,
        "max_guests": 4,
        "bedrooms": 2,
        "bathrooms": 1,
        "latitude": Decimal("21.0285"),
        "longitude": Decimal("105.8542"),
        "amenities": ["Wifi", "Điều hòa", "Tivi", "Bếp", "Thang máy"],
        "images": [("https://example.com/hanoi1.jpg", "Apartment view"), ("https://example.com/hanoi2.jpg", "Bedroom")],
    },
    {
        "host": 0,
        "title": "Biệt thự biển Nha Trang",
        "description": "Biệt thự view biển tuyệt đẹp tại Nha Trang. Có bể bơi riêng, phù hợp cho nhóm bạn.",
        "location": "Nha Trang",
        "address": "789 Đường Trần Phú, Thành phố Nha Trang, Khánh Hòa",
        "price_per_night": 3000000,
        "max_guests": 8,
        "bedrooms": 4,
        "bathrooms": 3,
        "latitude": Decimal("12.2388"),
        "longitude": Decimal("109.1967"),
        "amenities": ["Wifi", "Bể bơi", "Bãi đậu xe", "Điều hòa", "BBQ", "Sân vườn"],
        "images": [("https://example.com/nhatrang1.jpg", "Beach villa"), ("https://example.com/nhatrang2.jpg", "Pool area")],
    },
    {
        "host": 1,
        "title": "Nhà gỗ truyền thống Sapa",
        "description": "Nhà gỗ truyền thống với view ruộng bậc thang tuyệt đẹp.",
        "location": "Sapa",
        "address": "321 Đường Cầu Mây, Thị trấn Sapa, Lào Cai",
        "price_per_night": 800000,
        "max_guests": 4,
        "bedrooms": 2,
        "bathrooms": 1,
        "latitude": Decimal("22.3380"),
        "longitude": Decimal("103.8442"),
        "amenities": ["Wifi", "Lò sưởi", "Sân vườn", "Ban công"],
        "images": [("https://example.com/sapa1.jpg", "Wooden house"), ("https://example.com/sapa2.jpg", "Rice terrace view")],
    },
    {
        "host": 0,
        "title": "Studio cozy Quận 1 TPHCM",
        "description": "Studio nhỏ xinh tại trung tâm Sài Gòn, phù hợp cho business trip hoặc cặp đôi.",
        "location": "TP Hồ Chí Minh",
        "address": "159 Đường Nguyễn Huệ, Quận 1, TP Hồ Chí Minh",
        "price_per_night": 1200000,
        "max_guests": 2,
        "bedrooms": 1,
        "bathrooms": 1,
        "latitude": Decimal("10.7769"),
        "longitude": Decimal("106.7009"),
        "amenities": ["Wifi", "Điều hòa", "Tivi", "Bếp", "Thang máy"],
        "images": [("https://example.com/hcm1.jpg", "Studio room"), ("https://example.com/hcm2.jpg", "City view")],
    },
]


# (listing index, days from today until check-in, nights, status)
BOOKINGS = [
    (0, 14, 3, "confirmed"),
    (1, 30, 2, "pending"),
    (2, -10, 4, "completed"),
]


async def seed() -> None:
    """Reset demo data."""
    await init_db()

    async with AsyncSessionLocal() as session:
        for model in (Review, Booking, ListingAmenity, ListingPhoto, Listing, User):
            await session.execute(delete(model))

        existing = set((await session.execute(select(Amenity.name))).scalars().all())
        session.add_all(Amenity(**a) for a in DEFAULT_AMENITIES if a["name"] not in existing)
        await session.flush()
        amenities = {a.name: a for a in (await session.execute(select(Amenity))).scalars().all()}

        password_hash = get_password_hash(DEMO_PASSWORD)
        users = [User(password_hash=password_hash, **u) for u in USERS]
        session.add_all(users)
        await session.flush()
        hosts = [u for u in users if u.role == "host"]
        listings: list[Listing] = []

        for data in LISTINGS:
            data = dict(data)
            amenity_names = data.pop("amenities")
            images = data.pop("images")
            host = hosts[data.pop("host")]
            listing = Listing(host_id=host.id, **data)
            listing.photos = [
                ListingPhoto(url=url, alt=alt, sort_order=i) for i, (url, alt) in enumerate(images)
            ]
            listing.amenities = [ListingAmenity(amenity=amenities[name]) for name in amenity_names]
            session.add(listing)
            listings.append(listing)
        await session.flush()

        guest = next(u for u in users if u.role == "user")
        today = datetime.now(UTC).date()
        for listing_index, offset, nights, status in BOOKINGS:
            listing = listings[listing_index]
            check_in = today + timedelta(days=offset)
            session.add(
                Booking(
                    listing_id=listing.id,
                    user_id=guest.id,
                    check_in=check_in,
                    check_out=check_in + timedelta(days=nights),
                    guests=2,
                    total_price=nights * listing.price_per_night,
                    status=status,
                )
            )

        await session.commit()

    print(f"Users created: {len(USERS)}")
    print(f"Homestays created: {len(LISTINGS)}")
    print(f"Bookings created: {len(BOOKINGS)}")
    print(f"Demo password: {DEMO_PASSWORD}")


if __name__ == "__main__":
    asyncio.run(seed())
