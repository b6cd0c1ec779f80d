"""
Integration tests for profiles and dashboards.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.schemas.user import ProfileUpdate
from app.services.profile_service import profile_service
from helpers import future


@pytest.mark.integration
async def test_update_profile_merges_nested_documents(db, guest) -> None:
    await profile_service.update_profile(
        db,
        guest,
        ProfileUpdate.model_validate(
            {"address": {"city": "Huế", "street": "1 Lê Lợi"}, "preferences": {"language": "en"}}
        ),
    )
    updated = await profile_service.update_profile(
        db,
        guest,
        ProfileUpdate.model_validate(
            {"bio": "Thích du lịch", "address": {"city": "Đà Nẵng"}, "preferences": {"notifications": {"sms": True}}}
        ),
    )

    assert updated.bio == "Thích du lịch"
    assert updated.address == {"city": "Đà Nẵng", "street": "1 Lê Lợi"}
    assert updated.preferences == {
        "currency": "VND",
        "language": "en",
        "notifications": {"email": True, "sms": True, "push": True},
    }


@pytest.mark.integration
async def test_host_info_ignored_for_guests(db, guest, host) -> None:
    update = ProfileUpdate.model_validate({"host_info": {"response_rate": 90}})

    await profile_service.update_profile(db, guest, update)
    await profile_service.update_profile(db, host, update)

    assert guest.host_info == {}
    assert host.host_info["response_rate"] == 90


@pytest.mark.integration
async def test_verify_phone_requires_phone(db, guest) -> None:
    with pytest.raises(ValidationError):
        await profile_service.verify_contact(db, guest, "phone")

    verified = await profile_service.verify_contact(db, guest, "email")
    assert verified.verified["email"] is True
    assert verified.verified["phone"] is False


@pytest.mark.integration
async def test_profile_booking_stats(db, guest, listing, make_booking) -> None:
    await make_booking(listing, guest, future(6, 1), future(6, 3), status="confirmed")
    await make_booking(listing, guest, future(7, 1), future(7, 3), status="cancelled")

    profile = await profile_service.get_profile(db, guest)

    assert profile.booking_stats == {
        "pending": 0,
        "confirmed": 1,
        "cancelled": 1,
        "completed": 0,
        "total": 2,
    }
    assert profile.host_stats is None


@pytest.mark.integration
async def test_public_host_profile_lists_active_listings(db, host, listing, make_listing) -> None:
    await make_listing(host, title="Hidden", is_active=False)

    profile = await profile_service.get_public_profile(db, host.id)

    assert profile.host_stats.total_listings == 1
    assert [item.title for item in profile.listings] == [listing.title]
    assert not hasattr(profile.user, "email")


@pytest.mark.integration
async def test_public_profile_of_inactive_user(db, guest) -> None:
    guest.is_active = False
    await db.commit()

    with pytest.raises(NotFoundError):
        await profile_service.get_public_profile(db, guest.id)


@pytest.mark.integration
async def test_guest_dashboard(db, guest, listing, make_booking) -> None:
    today = future(5, 1)
    await make_booking(listing, guest, future(6, 1), future(6, 3), status="confirmed")
    await make_booking(listing, guest, future(4, 1), future(4, 3), status="confirmed")
    await make_booking(listing, guest, future(7, 1), future(7, 3), status="pending")

    dashboard = await profile_service.get_dashboard(db, guest, today=today)

    assert dashboard.role == "user"
    assert dashboard.total_bookings == 3
    assert [b.check_in for b in dashboard.upcoming_bookings] == [future(6, 1)]
    assert len(dashboard.recent_bookings) == 3


@pytest.mark.integration
async def test_host_dashboard_monthly_revenue(db, guest, host, listing, make_booking) -> None:
    await make_booking(listing, guest, future(6, 1), future(6, 3), status="confirmed")
    await make_booking(listing, guest, future(7, 1), future(7, 2), status="cancelled")

    dashboard = await profile_service.get_dashboard(db, host, today=datetime.now(UTC).date())

    assert dashboard.role == "host"
    assert dashboard.total_bookings == 2
    assert dashboard.total_listings == 1
    assert len(dashboard.monthly_bookings) == 6
    current = dashboard.monthly_bookings[-1]
    assert current.count == 2
    assert current.revenue == 2_000_000
