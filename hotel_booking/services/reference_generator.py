"""Booking reference tokens."""

from __future__ import annotations

import secrets
from typing import Callable


ReferenceGenerator = Callable[[], str]

REFERENCE_BYTES = 16


def generate_booking_reference() -> str:
    """Return 128 random bits as 32 lowercase hex characters."""
    return secrets.token_hex(REFERENCE_BYTES)
