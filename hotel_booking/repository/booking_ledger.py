"""Confirmed bookings per room with an atomic check-and-insert commit."""

from __future__ import annotations

import sqlite3
from dataclasses import replace
from threading import Lock

from hotel_booking.domain.errors import (
    DuplicateReferenceError,
    RoomUnavailableError,
    StorageError,
)
from hotel_booking.domain.interval import StayInterval
from hotel_booking.domain.models import Booking
from hotel_booking.repository.data_repository import ROOM_OVERLAP_MESSAGE, DataRepository
from hotel_booking.utils.logger import get_logger


logger = get_logger(__name__)


class BookingLedger:
    """Serializes commits per room and re-checks conflicts inside the write.

    Each room gets its own lock, so commits on different rooms never wait on
    each other in this process. The SQLite write transaction and the overlap
    trigger cover writers in other processes.
    """

    def __init__(self, repository: DataRepository) -> None:
        self._repository = repository
        self._registry_lock = Lock()
        self._room_locks: dict[int, Lock] = {}

    def _lock_for(self, room_id: int) -> Lock:
        with self._registry_lock:
            lock = self._room_locks.get(room_id)
            if lock is None:
                lock = Lock()
                self._room_locks[room_id] = lock
            return lock

    def has_conflict(self, room_id: int, interval: StayInterval) -> bool:
        try:
            return bool(self._repository.find_overlapping_bookings(room_id, interval))
        except sqlite3.Error as exc:
            raise StorageError(f"Conflict check failed: {exc}") from exc

    def commit(self, booking: Booking) -> Booking:
        """Insert ``booking`` iff its room has no overlapping booking.

        Raises RoomUnavailableError on overlap, DuplicateReferenceError when
        the reference is taken and StorageError on any other store failure.
        Nothing is written in any failure case.
        """
        with self._lock_for(booking.room_id):
            try:
                with self._repository.transaction() as connection:
                    conflicts = self._repository.find_overlapping_bookings(
                        booking.room_id,
                        booking.interval,
                        connection=connection,
                    )
                    if conflicts:
                        logger.info(
                            "Booking rejected | room_id=%s | conflicting_reference=%s",
                            booking.room_id,
                            conflicts[0].reference,
                        )
                        raise RoomUnavailableError(ROOM_OVERLAP_MESSAGE)
                    booking_id = self._repository.insert_booking(connection, booking)
            except sqlite3.IntegrityError as exc:
                raise self._classify_integrity_error(booking, exc) from exc
            except sqlite3.Error as exc:
                raise StorageError(f"Booking commit failed: {exc}") from exc

        logger.info(
            "Booking committed | reference=%s | hotel_id=%s | room_id=%s | people=%s",
            booking.reference,
            booking.hotel_id,
            booking.room_id,
            booking.people,
        )
        return replace(booking, booking_id=booking_id)

    @staticmethod
    def _classify_integrity_error(
        booking: Booking,
        exc: sqlite3.IntegrityError,
    ) -> Exception:
        message = str(exc)
        if ROOM_OVERLAP_MESSAGE in message:
            logger.warning("Overlap trigger fired | room_id=%s", booking.room_id)
            return RoomUnavailableError(ROOM_OVERLAP_MESSAGE)
        if "Bookings.reference" in message:
            logger.warning("Booking reference collision | reference=%s", booking.reference)
            return DuplicateReferenceError(f"Booking reference already exists: {booking.reference}")
        return StorageError(f"Booking commit failed: {message}")
