"""Domain models for hotels, rooms and bookings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from hotel_booking.domain.interval import StayInterval


class RoomType(str, Enum):
    SINGLE = "Single"
    DOUBLE = "Double"
    DELUXE = "Deluxe"


@dataclass(frozen=True)
class Room:
    room_id: int
    hotel_id: int
    room_type: RoomType
    capacity: int


@dataclass(frozen=True)
class Hotel:
    hotel_id: int
    name: str
    rooms: tuple[Room, ...] = ()


@dataclass(frozen=True)
class HotelSummary:
    hotel_id: int
    name: str


@dataclass(frozen=True)
class Booking:
    reference: str
    hotel_id: int
    room_id: int
    interval: StayInterval
    people: int
    booking_id: Optional[int] = None


@dataclass(frozen=True)
class BookingDetail:
    """Read projection returned by booking lookup."""

    reference: str
    hotel_name: str
    room_type: RoomType
    room_capacity: int
    start: datetime
    end: datetime
    people: int
