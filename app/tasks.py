"""Celery background tasks.

Both tasks open their own session through ``get_db_context`` and delegate to
the service layer, so the API and the worker share one code path.
"""

import asyncio
import logging

from celery import shared_task

from app.database import get_db_context
from app.services.booking_service import booking_service
from app.services.rating_service import rating_service

logger = logging.getLogger(__name__)


def run_async(coro):
    """Run async function in sync context."""
    return asyncio.run(coro)


@shared_task(bind=True, max_retries=3)
def complete_finished_bookings(self):
    """Mark confirmed bookings as completed once check-out has passed."""
    try:
        updated = run_async(_complete_finished_bookings())
        return {"status": "success", "completed": updated}
    except Exception as exc:
        logger.exception("Completing finished bookings failed")
        raise self.retry(exc=exc, countdown=300)


async def _complete_finished_bookings() -> int:
    async with get_db_context() as db:
        return await booking_service.complete_finished_bookings(db)


@shared_task(bind=True, max_retries=3)
def rebuild_listing_ratings(self):
    """Recompute average_rating and total_reviews for every listing."""
    try:
        rebuilt = run_async(_rebuild_listing_ratings())
        return {"status": "success", "listings": rebuilt}
    except Exception as exc:
        logger.exception("Rebuilding listing ratings failed")
        raise self.retry(exc=exc, countdown=600)


async def _rebuild_listing_ratings() -> int:
    async with get_db_context() as db:
        rebuilt = await rating_service.rebuild_all_listing_ratings(db)
    logger.info("Rebuilt ratings for %d listings", rebuilt)
    return rebuilt
