"""
Unit tests for booking status transitions.
"""

from __future__ import annotations

import pytest

from app.core.exceptions import StateError
from app.domain.booking_state import (
    TERMINAL_STATUSES,
    assert_booking_transition,
    can_transition,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("current", "target"),
    [
        ("pending", "confirmed"),
        ("pending", "cancelled"),
        ("confirmed", "completed"),
        ("confirmed", "cancelled"),
    ],
)
def test_allowed_transitions(current: str, target: str) -> None:
    assert can_transition(current, target)
    assert_booking_transition(current, target)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("current", "target"),
    [
        ("pending", "completed"),
        ("confirmed", "pending"),
        ("cancelled", "confirmed"),
        ("completed", "cancelled"),
    ],
)
def test_disallowed_transitions(current: str, target: str) -> None:
    assert not can_transition(current, target)
    with pytest.raises(StateError):
        assert_booking_transition(current, target)


@pytest.mark.unit
def test_terminal_statuses() -> None:
    assert TERMINAL_STATUSES == {"cancelled", "completed"}


@pytest.mark.unit
def test_cancelling_twice_reports_current_status() -> None:
    with pytest.raises(StateError) as exc_info:
        assert_booking_transition("cancelled", "cancelled")

    error = exc_info.value
    assert error.status_code == 409
    assert error.detail == "Booking is already cancelled"
    assert error.to_dict()["current_status"] == "cancelled"
