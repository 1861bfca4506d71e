"""Booking allocation: deterministic room choice plus atomic commit."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from hotel_booking.domain.constraints import validate_booking_request
from hotel_booking.domain.errors import (
    DuplicateReferenceError,
    HotelNotFoundError,
    NoSuitableRoomError,
    ReferenceCollisionError,
)
from hotel_booking.domain.interval import StayInterval
from hotel_booking.domain.inventory import RoomInventory
from hotel_booking.domain.models import Booking, Room
from hotel_booking.repository.booking_ledger import BookingLedger
from hotel_booking.repository.data_repository import DataRepository
from hotel_booking.services.reference_generator import (
    ReferenceGenerator,
    generate_booking_reference,
)
from hotel_booking.utils.config import Settings, get_settings
from hotel_booking.utils.logger import get_logger


logger = get_logger(__name__)


def select_room(inventory: RoomInventory, people: int) -> Room:
    """Pick the first room, in room id order, that fits the party.

    Availability plays no part in the choice: if that room is taken the
    request fails instead of moving on to the next room.
    """
    room = inventory.first_room_for(people)
    if room is None:
        raise NoSuitableRoomError("No suitable room")
    return room


class AllocationService:
    """Orchestrates hotel lookup, room selection and the ledger commit."""

    def __init__(
        self,
        repository: Optional[DataRepository] = None,
        ledger: Optional[BookingLedger] = None,
        settings: Optional[Settings] = None,
        reference_generator: ReferenceGenerator = generate_booking_reference,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)
        self._ledger = ledger or BookingLedger(self._repository)
        self._reference_generator = reference_generator

    def book(
        self,
        *,
        hotel_id: int,
        start: datetime | None,
        end: datetime | None,
        people: int,
    ) -> Booking:
        """Create a booking and return it; ``booking.reference`` is the token.

        Not idempotent: identical calls produce distinct bookings while the
        room stays free, and RoomUnavailableError once it is taken.
        """
        interval = validate_booking_request(start, end, people)

        hotel = self._repository.get_hotel_with_rooms(hotel_id)
        if hotel is None:
            raise HotelNotFoundError("Hotel not found")

        room = select_room(RoomInventory(hotel), people)
        return self._commit_with_fresh_reference(
            hotel_id=hotel.hotel_id,
            room=room,
            interval=interval,
            people=people,
        )

    def _commit_with_fresh_reference(
        self,
        *,
        hotel_id: int,
        room: Room,
        interval: StayInterval,
        people: int,
    ) -> Booking:
        attempts = max(1, self._settings.reference_generation_attempts)
        for attempt in range(1, attempts + 1):
            booking = Booking(
                reference=self._reference_generator(),
                hotel_id=hotel_id,
                room_id=room.room_id,
                interval=interval,
                people=people,
            )
            try:
                return self._ledger.commit(booking)
            except DuplicateReferenceError:
                logger.warning(
                    "Regenerating booking reference | attempt=%s/%s | room_id=%s",
                    attempt,
                    attempts,
                    room.room_id,
                )
        raise ReferenceCollisionError(
            f"Could not generate a unique booking reference after {attempts} attempts"
        )
