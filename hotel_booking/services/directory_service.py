"""Hotel search and booking lookup."""

from __future__ import annotations

from typing import Optional

from hotel_booking.domain.constraints import validate_search_keyword
from hotel_booking.domain.errors import BookingNotFoundError
from hotel_booking.domain.models import BookingDetail, HotelSummary
from hotel_booking.repository.data_repository import DataRepository
from hotel_booking.utils.config import Settings, get_settings


class HotelDirectoryService:
    def __init__(
        self,
        repository: Optional[DataRepository] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)

    def search_hotels(self, keyword: str | None) -> list[HotelSummary]:
        return self._repository.search_hotels(validate_search_keyword(keyword))

    def get_booking(self, reference: str) -> BookingDetail:
        detail = self._repository.get_booking_detail(reference)
        if detail is None:
            raise BookingNotFoundError(f"Booking not found: {reference}")
        return detail
