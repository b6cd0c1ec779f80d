"""Rating aggregate arithmetic."""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

ZERO_RATING = Decimal("0.0")


def round_rating(value: Decimal | float | int) -> Decimal:
    """Round half-up to one decimal place (4.25 -> 4.3, not banker's 4.2)."""
    return Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def average_rating(ratings: Iterable[int]) -> tuple[Decimal, int]:
    """Return ``(average, count)``; an empty set yields ``(0.0, 0)``."""
    values = list(ratings)
    if not values:
        return ZERO_RATING, 0
    return round_rating(Decimal(sum(values)) / Decimal(len(values))), len(values)


def rating_from_totals(total: int | None, count: int | None) -> tuple[Decimal, int]:
    """Average from a SUM/COUNT pair as returned by an aggregate query."""
    if not count:
        return ZERO_RATING, 0
    return round_rating(Decimal(int(total or 0)) / Decimal(int(count))), int(count)
