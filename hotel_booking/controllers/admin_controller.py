"""Controller layer for database maintenance and health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from hotel_booking.controllers.dependencies import get_repository
from hotel_booking.domain.errors import StorageError
from hotel_booking.repository.data_repository import DataRepository
from hotel_booking.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["admin"])


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health() -> HealthResponse:
    return HealthResponse(status="ok")


@router.post("/seed", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def seed(repository: DataRepository = Depends(get_repository)) -> MessageResponse:
    """Drop all data and load the demo hotel."""
    try:
        repository.reset_database(seed=True)
        return MessageResponse(message="Database reset and seeded successfully")
    except StorageError as exc:
        logger.error("Seed failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc


@router.post("/reset", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def reset(repository: DataRepository = Depends(get_repository)) -> MessageResponse:
    try:
        repository.reset_database(seed=False)
        return MessageResponse(message="Database dropped and recreated")
    except StorageError as exc:
        logger.error("Reset failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
