"""Logging configuration."""

import logging
import sys

from app.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "celery.app.trace", "passlib")


def setup_logging(level: str | None = None) -> None:
    """Configure root logging for the API and worker processes."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
