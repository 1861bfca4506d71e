"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from hotel_booking.repository.data_repository import DataRepository
from hotel_booking.services.allocation_service import AllocationService
from hotel_booking.services.availability_service import AvailabilityService
from hotel_booking.services.directory_service import HotelDirectoryService


def _require_state(request: Request, attribute: str, label: str):
    service = getattr(request.app.state, attribute, None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{label} is not initialized",
        )
    return service


def get_repository(request: Request) -> DataRepository:
    return _require_state(request, "repository", "Repository")


def get_allocation_service(request: Request) -> AllocationService:
    return _require_state(request, "allocation_service", "Allocation service")


def get_availability_service(request: Request) -> AvailabilityService:
    return _require_state(request, "availability_service", "Availability service")


def get_directory_service(request: Request) -> HotelDirectoryService:
    return _require_state(request, "directory_service", "Directory service")
