"""Cancellation window domain logic.

A booking may be cancelled while at least ``window_hours`` remain before
check-in. Check-in is taken as 00:00 UTC on the check-in date; exactly
``window_hours`` remaining is still allowed.
"""

from datetime import UTC, date, datetime, time, timedelta

from app.core.exceptions import StateError

DEFAULT_WINDOW_HOURS = 24


def check_in_instant(check_in_date: date) -> datetime:
    """Moment a stay begins for cancellation purposes."""
    return datetime.combine(check_in_date, time.min, tzinfo=UTC)


def hours_until_check_in(check_in_date: date, now: datetime) -> float:
    """Hours between ``now`` and check-in (negative once check-in has passed)."""
    return (check_in_instant(check_in_date) - now) / timedelta(hours=1)


def is_within_cancellation_window(
    check_in_date: date,
    now: datetime,
    window_hours: int = DEFAULT_WINDOW_HOURS,
) -> bool:
    """Whether cancellation is still permitted at ``now``."""
    return check_in_instant(check_in_date) - now >= timedelta(hours=window_hours)


def assert_cancellable_at(
    check_in_date: date,
    now: datetime,
    window_hours: int = DEFAULT_WINDOW_HOURS,
) -> None:
    """Raise StateError when less than ``window_hours`` remain before check-in.

    Args:
        check_in_date: Booking check-in date
        now: Current time (timezone-aware)
        window_hours: Minimum notice required

    Raises:
        StateError: If the notice period has passed
    """
    if not is_within_cancellation_window(check_in_date, now, window_hours):
        raise StateError(
            f"Bookings cannot be cancelled less than {window_hours} hours before check-in"
        )
