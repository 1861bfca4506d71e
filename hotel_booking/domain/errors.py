"""Failure kinds raised by the booking core and mapped by the HTTP layer."""

from __future__ import annotations


class BookingServiceError(Exception):
    """Base exception for every booking workflow failure."""


class NotFoundError(BookingServiceError):
    """Raised when a hotel, room or booking does not exist."""


class HotelNotFoundError(NotFoundError):
    """Raised when the requested hotel is absent."""


class BookingNotFoundError(NotFoundError):
    """Raised when no booking carries the requested reference."""


class InvalidInputError(BookingServiceError):
    """Raised for malformed request values such as a non-positive party size."""


class InvalidRangeError(InvalidInputError):
    """Raised when a stay interval does not satisfy ``from < to``."""


class RoomUnavailableError(BookingServiceError):
    """Raised when the selected room already has an overlapping booking."""


class NoSuitableRoomError(BookingServiceError):
    """Raised when no room in the hotel can hold the party."""


class StorageError(BookingServiceError):
    """Raised when the backing store fails; callers may retry later."""


class DuplicateReferenceError(StorageError):
    """Raised when a booking reference is already persisted."""


class ReferenceCollisionError(StorageError):
    """Raised when reference generation collides even after a retry."""
