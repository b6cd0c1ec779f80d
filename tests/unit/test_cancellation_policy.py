"""
Unit tests for the 24-hour cancellation window.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

import pytest

from app.core.exceptions import StateError
from app.domain.cancellation_policy import (
    assert_cancellable_at,
    check_in_instant,
    hours_until_check_in,
    is_within_cancellation_window,
)

CHECK_IN = date(2030, 6, 10)
MIDNIGHT = datetime(2030, 6, 10, tzinfo=UTC)


@pytest.mark.unit
def test_check_in_instant_is_midnight_utc() -> None:
    assert check_in_instant(CHECK_IN) == MIDNIGHT


@pytest.mark.unit
def test_exactly_24_hours_is_allowed() -> None:
    now = MIDNIGHT - timedelta(hours=24)
    assert is_within_cancellation_window(CHECK_IN, now)
    assert_cancellable_at(CHECK_IN, now)


@pytest.mark.unit
def test_23_hours_is_rejected() -> None:
    now = MIDNIGHT - timedelta(hours=23)
    assert not is_within_cancellation_window(CHECK_IN, now)
    with pytest.raises(StateError, match="24 hours"):
        assert_cancellable_at(CHECK_IN, now)


@pytest.mark.unit
def test_after_check_in_is_rejected() -> None:
    now = MIDNIGHT + timedelta(hours=2)
    assert hours_until_check_in(CHECK_IN, now) == pytest.approx(-2)
    with pytest.raises(StateError):
        assert_cancellable_at(CHECK_IN, now)


@pytest.mark.unit
def test_custom_window() -> None:
    now = MIDNIGHT - timedelta(hours=30)
    assert is_within_cancellation_window(CHECK_IN, now, window_hours=24)
    assert not is_within_cancellation_window(CHECK_IN, now, window_hours=48)
