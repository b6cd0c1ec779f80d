"""Date-range conflict rule shared by booking creation and search.

Stays are half-open intervals ``[check_in, check_out)``: a guest checking
out on a date does not occupy that night, so back-to-back stays never
conflict.
"""

from datetime import date, datetime

from sqlalchemy import ColumnElement, and_

from app.core.exceptions import ValidationError
from app.domain.cancellation_policy import check_in_instant
from app.models.booking import OCCUPYING_STATUSES, Booking


def intervals_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """True when ``[a_start, a_end)`` and ``[b_start, b_end)`` share a night."""
    return a_start < b_end and a_end > b_start


def occupies(status: str) -> bool:
    """Whether a booking in ``status`` holds its dates."""
    return status in OCCUPYING_STATUSES


def conflicting_booking_clause(check_in: date, check_out: date) -> ColumnElement[bool]:
    """SQL form of :func:`intervals_overlap` restricted to occupying bookings."""
    return and_(
        Booking.status.in_(OCCUPYING_STATUSES),
        Booking.check_in < check_out,
        Booking.check_out > check_in,
    )


def validate_stay_dates(check_in: date, check_out: date, now: datetime) -> None:
    """Reject empty, inverted or past date ranges.

    A stay starts at 00:00 UTC on its check-in date, so by the time a request
    arrives a same-day check-in has already begun and is rejected.

    Raises:
        ValidationError: If check-out is not after check-in or check-in is before ``now``
    """
    if check_in >= check_out:
        raise ValidationError(
            "Check-out date must be after check-in date",
            errors=[{"field": "check_out", "message": "must be after check_in"}],
        )
    if check_in_instant(check_in) < now:
        raise ValidationError(
            "Check-in date cannot be in the past",
            errors=[{"field": "check_in", "message": "must not be in the past"}],
        )
