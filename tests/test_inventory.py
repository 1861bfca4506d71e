from __future__ import annotations

import types

from hotel_booking.domain.inventory import RoomInventory
from hotel_booking.domain.models import Hotel, Room, RoomType


def _hotel() -> Hotel:
    # Deliberately out of id order.
    rooms = (
        Room(room_id=5, hotel_id=1, room_type=RoomType.DELUXE, capacity=4),
        Room(room_id=1, hotel_id=1, room_type=RoomType.SINGLE, capacity=1),
        Room(room_id=3, hotel_id=1, room_type=RoomType.DOUBLE, capacity=2),
        Room(room_id=4, hotel_id=1, room_type=RoomType.DOUBLE, capacity=2),
        Room(room_id=2, hotel_id=1, room_type=RoomType.SINGLE, capacity=1),
    )
    return Hotel(hotel_id=1, name="River View Retreat", rooms=rooms)


def test_rooms_are_ordered_by_room_id() -> None:
    inventory = RoomInventory(_hotel())
    assert [room.room_id for room in inventory] == [1, 2, 3, 4, 5]
    assert len(inventory) == 5


def test_capacity_filter_keeps_stable_order() -> None:
    inventory = RoomInventory(_hotel())
    assert [room.room_id for room in inventory.rooms_with_capacity_at_least(2)] == [3, 4, 5]


def test_capacity_filter_is_lazy() -> None:
    inventory = RoomInventory(_hotel())
    assert isinstance(inventory.rooms_with_capacity_at_least(1), types.GeneratorType)


def test_first_room_is_first_capacity_eligible_not_best_fit() -> None:
    inventory = RoomInventory(_hotel())
    assert inventory.first_room_for(1).room_id == 1
    assert inventory.first_room_for(3).room_id == 5


def test_first_room_none_when_party_too_large() -> None:
    inventory = RoomInventory(_hotel())
    assert inventory.first_room_for(5) is None
    assert list(inventory.rooms_with_capacity_at_least(5)) == []


def test_empty_hotel() -> None:
    inventory = RoomInventory(Hotel(hotel_id=2, name="Empty"))
    assert inventory.first_room_for(1) is None
