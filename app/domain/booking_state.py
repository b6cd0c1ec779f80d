"""Booking state machine."""

from app.core.exceptions import StateError

BOOKING_TRANSITIONS = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}

TERMINAL_STATUSES = frozenset(s for s, targets in BOOKING_TRANSITIONS.items() if not targets)


def can_transition(current: str, target: str) -> bool:
    return target in BOOKING_TRANSITIONS.get(current, set())


def assert_booking_transition(current: str, target: str) -> None:
    if not can_transition(current, target):
        if current in TERMINAL_STATUSES:
            detail = f"Booking is already {current}"
        else:
            detail = f"Invalid booking transition: {current} -> {target}"
        raise StateError(detail, current_status=current)
