"""
Unit tests for the half-open date-range conflict rule.
"""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from app.core.exceptions import ValidationError
from app.domain.availability import intervals_overlap, occupies, validate_stay_dates

EXISTING = (date(2030, 6, 1), date(2030, 6, 5))


@pytest.mark.unit
@pytest.mark.parametrize(
    ("check_in", "check_out", "expected"),
    [
        (date(2030, 6, 3), date(2030, 6, 7), True),  # overlaps the tail
        (date(2030, 5, 28), date(2030, 6, 2), True),  # overlaps the head
        (date(2030, 6, 2), date(2030, 6, 3), True),  # inside
        (date(2030, 5, 30), date(2030, 6, 10), True),  # covers
        (date(2030, 6, 5), date(2030, 6, 8), False),  # starts on check-out day
        (date(2030, 5, 29), date(2030, 6, 1), False),  # ends on check-in day
    ],
)
def test_intervals_overlap_half_open(check_in: date, check_out: date, expected: bool) -> None:
    """Back-to-back stays share no night and never conflict."""
    assert intervals_overlap(check_in, check_out, *EXISTING) is expected
    assert intervals_overlap(*EXISTING, check_in, check_out) is expected


@pytest.mark.unit
@pytest.mark.parametrize(
    ("status", "expected"),
    [("pending", True), ("confirmed", True), ("cancelled", False), ("completed", False)],
)
def test_only_pending_and_confirmed_hold_dates(status: str, expected: bool) -> None:
    assert occupies(status) is expected


@pytest.mark.unit
def test_validate_stay_dates_accepts_future_range() -> None:
    validate_stay_dates(date(2030, 6, 2), date(2030, 6, 3), now=datetime(2030, 6, 1, 23, 59, tzinfo=UTC))


@pytest.mark.unit
@pytest.mark.parametrize(
    ("check_in", "check_out"),
    [
        (date(2030, 6, 5), date(2030, 6, 5)),
        (date(2030, 6, 5), date(2030, 6, 1)),
    ],
)
def test_validate_stay_dates_rejects_empty_or_inverted(check_in: date, check_out: date) -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_stay_dates(check_in, check_out, now=datetime(2030, 1, 1, tzinfo=UTC))
    assert exc_info.value.status_code == 422


@pytest.mark.unit
def test_validate_stay_dates_rejects_past_check_in() -> None:
    with pytest.raises(ValidationError, match="past"):
        validate_stay_dates(
            date(2030, 5, 31), date(2030, 6, 2), now=datetime(2030, 6, 1, tzinfo=UTC)
        )


@pytest.mark.unit
def test_validate_stay_dates_rejects_same_day_check_in() -> None:
    with pytest.raises(ValidationError, match="past"):
        validate_stay_dates(
            date(2030, 6, 1), date(2030, 6, 3), now=datetime(2030, 6, 1, 0, 0, 1, tzinfo=UTC)
        )


@pytest.mark.unit
def test_validate_stay_dates_accepts_check_in_at_its_first_instant() -> None:
    validate_stay_dates(date(2030, 6, 1), date(2030, 6, 3), now=datetime(2030, 6, 1, tzinfo=UTC))
