"""HTTP controller layer for hotel search and room availability."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field

from hotel_booking.controllers.dependencies import (
    get_availability_service,
    get_directory_service,
)
from hotel_booking.domain.errors import HotelNotFoundError, InvalidInputError, StorageError
from hotel_booking.domain.models import RoomType
from hotel_booking.services.availability_service import AvailabilityService
from hotel_booking.services.directory_service import HotelDirectoryService
from hotel_booking.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["availability"])


class HotelSummaryResponse(BaseModel):
    id: int = Field(gt=0)
    name: str


class RoomResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(gt=0)
    room_type: RoomType = Field(alias="roomType")
    capacity: int = Field(gt=0)


@router.get(
    "/hotels/search",
    response_model=list[HotelSummaryResponse],
    status_code=status.HTTP_200_OK,
)
def search_hotels(
    hotel_name: str = Query(alias="hotelName"),
    service: HotelDirectoryService = Depends(get_directory_service),
) -> list[HotelSummaryResponse]:
    try:
        hotels = service.search_hotels(hotel_name)
        return [HotelSummaryResponse(id=hotel.hotel_id, name=hotel.name) for hotel in hotels]
    except InvalidInputError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except StorageError as exc:
        logger.error("Hotel search storage failure: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Hotel storage is unavailable, try again later",
        ) from exc


@router.get(
    "/availability",
    response_model=list[RoomResponse],
    status_code=status.HTTP_200_OK,
)
def availability(
    from_: datetime = Query(alias="from"),
    to: datetime = Query(),
    people: int = Query(gt=0),
    hotel_id: int | None = Query(default=None, alias="hotelId", gt=0),
    hotel_name: str | None = Query(default=None, alias="hotelName"),
    service: AvailabilityService = Depends(get_availability_service),
) -> list[RoomResponse]:
    """Free rooms for the stay in room id order; the hotel id wins over its name."""
    try:
        rooms = service.available(
            start=from_,
            end=to,
            people=people,
            hotel_id=hotel_id,
            hotel_name=hotel_name,
        )
        return [
            RoomResponse(id=room.room_id, room_type=room.room_type, capacity=room.capacity)
            for room in rooms
        ]
    except HotelNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except InvalidInputError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except StorageError as exc:
        logger.error("Availability storage failure: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Booking storage is unavailable, try again later",
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected availability failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute availability",
        ) from exc
