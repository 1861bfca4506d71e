"""Process-wide logging for the booking API.

Booking commits, conflicts and reference retries are logged at INFO or
WARNING with the worker thread name, so concurrent requests for the same
room can be told apart in the output.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from hotel_booking.utils.config import get_settings


_LOGGER_INITIALIZED = False


def configure_logging(level: Optional[str] = None) -> None:
    """Configure process-wide logging once.

    Every module goes through ``get_logger`` so request handlers, services and
    the repository share one format on stdout.
    """

    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    settings = get_settings()
    resolved_level = (level or settings.log_level).upper()

    logging.basicConfig(
        level=resolved_level,
        format=(
            "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s"
        ),
        stream=sys.stdout,
    )
    # Access lines stay at WARNING; booking events log at INFO.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    _LOGGER_INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    """Return a configured logger for the requested module."""
    configure_logging()
    return logging.getLogger(name)
