"""HTTP controller layer for booking creation and lookup."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from hotel_booking.controllers.dependencies import (
    get_allocation_service,
    get_directory_service,
)
from hotel_booking.domain.errors import (
    BookingNotFoundError,
    HotelNotFoundError,
    InvalidInputError,
    NoSuitableRoomError,
    RoomUnavailableError,
    StorageError,
)
from hotel_booking.domain.models import RoomType
from hotel_booking.services.allocation_service import AllocationService
from hotel_booking.services.directory_service import HotelDirectoryService
from hotel_booking.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["booking"])


class BookingRequest(BaseModel):
    """Input DTO; ``from < to`` is checked by the allocation service."""

    model_config = ConfigDict(populate_by_name=True)

    hotel_id: int = Field(alias="hotelId", gt=0)
    from_: datetime = Field(alias="from")
    to: datetime
    people: int = Field(gt=0)


class BookingReferenceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    booking_reference: str = Field(alias="bookingReference")


class BookingDetailResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    booking_reference: str = Field(alias="bookingReference")
    from_: datetime = Field(alias="from")
    to: datetime
    people: int = Field(gt=0)
    hotel_name: str = Field(alias="hotelName")
    room_type: RoomType = Field(alias="roomType")
    room_capacity: int = Field(alias="roomCapacity", gt=0)


@router.post(
    "/book",
    response_model=BookingReferenceResponse,
    status_code=status.HTTP_200_OK,
)
def book(
    payload: BookingRequest,
    service: AllocationService = Depends(get_allocation_service),
) -> BookingReferenceResponse:
    """Book the first room that fits the party; no fallback on conflict.

    Declared sync so it runs in the threadpool: concurrent requests run in
    parallel and a disconnecting client cannot interrupt a commit midway.
    """
    try:
        booking = service.book(
            hotel_id=payload.hotel_id,
            start=payload.from_,
            end=payload.to,
            people=payload.people,
        )
        return BookingReferenceResponse(booking_reference=booking.reference)
    except HotelNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except (InvalidInputError, NoSuitableRoomError, RoomUnavailableError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except StorageError as exc:
        logger.error("Booking storage failure: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Booking storage is unavailable, try again later",
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected booking failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create booking",
        ) from exc


@router.get(
    "/booking/{reference}",
    response_model=BookingDetailResponse,
    status_code=status.HTTP_200_OK,
)
def get_booking(
    reference: str,
    service: HotelDirectoryService = Depends(get_directory_service),
) -> BookingDetailResponse:
    try:
        detail = service.get_booking(reference)
        return BookingDetailResponse(
            booking_reference=detail.reference,
            from_=detail.start,
            to=detail.end,
            people=detail.people,
            hotel_name=detail.hotel_name,
            room_type=detail.room_type,
            room_capacity=detail.room_capacity,
        )
    except BookingNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except StorageError as exc:
        logger.error("Booking lookup storage failure: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Booking storage is unavailable, try again later",
        ) from exc
