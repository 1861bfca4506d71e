"""Domain-level validation rules for booking requests."""

from __future__ import annotations

from datetime import datetime

from hotel_booking.domain.errors import InvalidInputError
from hotel_booking.domain.interval import StayInterval


def validate_party_size(people: int) -> None:
    if people <= 0:
        raise InvalidInputError("people must be a positive integer")


def validate_booking_request(
    start: datetime | None,
    end: datetime | None,
    people: int,
) -> StayInterval:
    """Validate raw request values and return the normalized interval.

    Runs before any storage access so malformed requests never open a
    transaction.
    """
    interval = StayInterval.create(start, end)
    validate_party_size(people)
    return interval


def validate_search_keyword(keyword: str | None) -> str:
    if keyword is None or not keyword.strip():
        raise InvalidInputError("Search query cannot be empty.")
    return keyword.strip()
