"""Celery worker configuration.

Periodic housekeeping for the booking store:
- Completing confirmed bookings whose stay has ended
- Rebuilding cached listing ratings
"""

from celery import Celery
from celery.schedules import crontab

from app.config import settings
from app.core.logging_config import setup_logging

setup_logging()

# Create Celery app
celery_app = Celery(
    "homestay_tasks",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["app.tasks"],
)

celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=300,  # 5 minutes max
    task_soft_time_limit=240,

    # Worker settings
    worker_prefetch_multiplier=1,

    result_expires=3600,

    # Retry settings
    task_default_retry_delay=60,
    task_max_retries=3,

    beat_schedule={
        # Move finished stays to completed every hour
        "complete-finished-bookings": {
            "task": "app.tasks.complete_finished_bookings",
            "schedule": crontab(minute=5),
        },
        # Recompute cached ratings nightly
        "rebuild-listing-ratings": {
            "task": "app.tasks.rebuild_listing_ratings",
            "schedule": crontab(hour=3, minute=0),
        },
    },
)


if __name__ == "__main__":
    celery_app.start()
