"""Read-only availability reporting."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from hotel_booking.domain.constraints import validate_booking_request
from hotel_booking.domain.errors import HotelNotFoundError, InvalidInputError
from hotel_booking.domain.inventory import RoomInventory
from hotel_booking.domain.models import Hotel, Room
from hotel_booking.repository.booking_ledger import BookingLedger
from hotel_booking.repository.data_repository import DataRepository
from hotel_booking.utils.config import Settings, get_settings
from hotel_booking.utils.logger import get_logger


logger = get_logger(__name__)


class AvailabilityService:
    """Lists free rooms; never writes to the ledger."""

    def __init__(
        self,
        repository: Optional[DataRepository] = None,
        ledger: Optional[BookingLedger] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)
        self._ledger = ledger or BookingLedger(self._repository)

    def available(
        self,
        *,
        start: datetime | None,
        end: datetime | None,
        people: int,
        hotel_id: int | None = None,
        hotel_name: str | None = None,
    ) -> list[Room]:
        """Rooms in id order that fit ``people`` and are free for the stay."""
        interval = validate_booking_request(start, end, people)
        hotel = self._resolve_hotel(hotel_id=hotel_id, hotel_name=hotel_name)

        rooms = [
            room
            for room in RoomInventory(hotel).rooms_with_capacity_at_least(people)
            if not self._ledger.has_conflict(room.room_id, interval)
        ]
        logger.debug(
            "Availability computed | hotel_id=%s | people=%s | free_rooms=%s",
            hotel.hotel_id,
            people,
            len(rooms),
        )
        return rooms

    def _resolve_hotel(self, *, hotel_id: int | None, hotel_name: str | None) -> Hotel:
        if hotel_id is not None:
            hotel = self._repository.get_hotel_with_rooms(hotel_id)
        elif hotel_name is not None and hotel_name.strip():
            hotel = self._repository.find_hotel_by_name(hotel_name)
        else:
            raise InvalidInputError("either hotelId or hotelName is required")
        if hotel is None:
            raise HotelNotFoundError("Hotel not found")
        return hotel
