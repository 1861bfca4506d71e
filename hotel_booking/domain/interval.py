"""Half-open stay intervals and the overlap predicate."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from hotel_booking.domain.errors import InvalidRangeError


def normalize_timestamp(value: datetime) -> datetime:
    """Return a naive datetime; aware values are converted to UTC first."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class StayInterval:
    """A ``[start, end)`` range; the end instant is excluded."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start.tzinfo is not None or self.end.tzinfo is not None:
            raise InvalidRangeError("stay boundaries must be normalized before use")
        if self.start >= self.end:
            raise InvalidRangeError("'from' must be earlier than 'to'")

    @classmethod
    def create(cls, start: datetime | None, end: datetime | None) -> "StayInterval":
        if start is None or end is None:
            raise InvalidRangeError("both 'from' and 'to' are required")
        return cls(start=normalize_timestamp(start), end=normalize_timestamp(end))

    def overlaps(self, other: "StayInterval") -> bool:
        return overlaps(self, other)


def overlaps(first: StayInterval, second: StayInterval) -> bool:
    """Back-to-back intervals (``first.end == second.start``) do not overlap."""
    return first.start < second.end and second.start < first.end
