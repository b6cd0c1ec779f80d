"""Per-listing serialization for booking creation and rating recomputation."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


def advisory_key(listing_id: UUID) -> int:
    """Signed 64-bit key for pg_advisory_xact_lock derived from a listing id."""
    return int.from_bytes(listing_id.bytes[:8], "big", signed=True)


class KeyedLockRegistry:
    """In-process asyncio locks keyed by id, dropped once no task holds or waits."""

    def __init__(self) -> None:
        self._locks: dict[UUID, asyncio.Lock] = {}
        self._users: dict[UUID, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, key: UUID) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]


listing_locks = KeyedLockRegistry()


@asynccontextmanager
async def listing_lock(db: AsyncSession, listing_id: UUID) -> AsyncIterator[None]:
    """Serialize work on one listing.

    Holds the in-process lock for the listing and, on PostgreSQL, a
    transaction-scoped advisory lock so separate workers serialize as well.
    The advisory lock is released when the session's transaction ends, so
    callers commit before leaving the block.
    """
    async with listing_locks.hold(listing_id):
        if db.get_bind().dialect.name == "postgresql":
            await db.execute(
                text("SELECT pg_advisory_xact_lock(:key)"),
                {"key": advisory_key(listing_id)},
            )
            logger.debug("Advisory lock acquired for listing %s", listing_id)
        yield
