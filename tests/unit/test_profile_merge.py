"""
Unit tests for nested profile document merging.
"""

from __future__ import annotations

import pytest

from app.schemas.user import AddressUpdate, HostInfoUpdate, PreferencesUpdate
from app.services.profile_service import merge_address, merge_host_info, merge_preferences


@pytest.mark.unit
def test_merge_address_keeps_unspecified_keys() -> None:
    current = {"street": "1 Lê Lợi", "city": "Huế", "country": "Vietnam"}

    merged = merge_address(current, AddressUpdate(city="Đà Nẵng"))

    assert merged == {"street": "1 Lê Lợi", "city": "Đà Nẵng", "country": "Vietnam"}
    assert current["city"] == "Huế"


@pytest.mark.unit
def test_merge_preferences_merges_notifications_key_by_key() -> None:
    current = {
        "currency": "VND",
        "language": "vi",
        "notifications": {"email": True, "sms": False, "push": True},
    }

    merged = merge_preferences(
        current,
        PreferencesUpdate.model_validate({"language": "en", "notifications": {"sms": True}}),
    )

    assert merged == {
        "currency": "VND",
        "language": "en",
        "notifications": {"email": True, "sms": True, "push": True},
    }


@pytest.mark.unit
def test_merge_preferences_without_notifications() -> None:
    merged = merge_preferences(None, PreferencesUpdate(currency="USD"))
    assert merged == {"currency": "USD"}


@pytest.mark.unit
def test_merge_host_info_preserves_derived_stats() -> None:
    current = {"joined_date": "2030-01-01", "host_rating": 4.5, "total_listings": 2}

    merged = merge_host_info(current, HostInfoUpdate(response_rate=95))

    assert merged == {
        "joined_date": "2030-01-01",
        "host_rating": 4.5,
        "total_listings": 2,
        "response_rate": 95,
    }
