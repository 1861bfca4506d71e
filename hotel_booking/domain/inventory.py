"""Read-only, stable-ordered view of a hotel's rooms."""

from __future__ import annotations

from typing import Iterator

from hotel_booking.domain.models import Hotel, Room


class RoomInventory:
    """Rooms of one hotel in ascending room id order.

    Room id order is the allocation tie-break, so the same request profile
    always resolves to the same room.
    """

    def __init__(self, hotel: Hotel) -> None:
        self._rooms = tuple(sorted(hotel.rooms, key=lambda room: room.room_id))

    def __iter__(self) -> Iterator[Room]:
        return iter(self._rooms)

    def __len__(self) -> int:
        return len(self._rooms)

    def rooms_with_capacity_at_least(self, people: int) -> Iterator[Room]:
        return (room for room in self._rooms if room.capacity >= people)

    def first_room_for(self, people: int) -> Room | None:
        return next(self.rooms_with_capacity_at_least(people), None)
