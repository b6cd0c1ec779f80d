"""Small helpers shared across test modules."""

from __future__ import annotations

from datetime import date, timedelta

from app.core.security import create_tokens
from app.models import User

# Far enough ahead that calls using the real clock treat it as future
FUTURE_YEAR = date.today().year + 2


def future(month: int, day: int) -> date:
    return date(FUTURE_YEAR, month, day)


def soon(days: int) -> date:
    """A date ``days`` from the real today."""
    return date.today() + timedelta(days=days)


def auth_headers(user: User) -> dict[str, str]:
    tokens = create_tokens(str(user.id), user.email, user.role)
    return {"Authorization": f"Bearer {tokens['access_token']}"}
