"""
app.py — FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires the repository, the booking ledger and all services, registers
routers, and runs startup initialization.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from hotel_booking.controllers.admin_controller import router as admin_router
from hotel_booking.controllers.availability_controller import router as availability_router
from hotel_booking.controllers.booking_controller import router as booking_router
from hotel_booking.repository.booking_ledger import BookingLedger
from hotel_booking.repository.data_repository import DataRepository
from hotel_booking.services.allocation_service import AllocationService
from hotel_booking.services.availability_service import AvailabilityService
from hotel_booking.services.directory_service import HotelDirectoryService
from hotel_booking.utils.config import Settings, get_settings
from hotel_booking.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Instantiates all services with explicit dependency injection via app.state.
    No global singletons — the one BookingLedger (and its per-room locks) is
    shared by the allocation and availability services of this app.
    """
    settings = settings or get_settings()

    # --- Repository (SQLite connection factory) ---
    repository = DataRepository(settings)

    # --- Ledger (per-room serialized commits) ---
    ledger = BookingLedger(repository)

    # --- Services (business logic, no direct DB access) ---
    allocation_service = AllocationService(
        repository=repository,
        ledger=ledger,
        settings=settings,
    )
    availability_service = AvailabilityService(
        repository=repository,
        ledger=ledger,
        settings=settings,
    )
    directory_service = HotelDirectoryService(
        repository=repository,
        settings=settings,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run startup initialization before accepting requests."""
        _startup(app, settings)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # --- Routers ---
    app.include_router(booking_router)
    app.include_router(availability_router)
    app.include_router(admin_router)

    # --- Inject services into app.state for dependency resolution ---
    app.state.repository = repository
    app.state.allocation_service = allocation_service
    app.state.availability_service = availability_service
    app.state.directory_service = directory_service

    return app


def _startup(app: FastAPI, settings: Settings) -> None:
    """
    Idempotent startup sequence. Safe to re-run on server restarts.

    Order matters:
      1. Schema (tables, indexes, overlap trigger) must exist before seeding.
      2. Demo hotel is seeded only into an empty database.
    """
    repository: DataRepository = app.state.repository

    logger.info("Startup: initializing database schema")
    repository.initialize_database()

    if settings.seed_demo_data_on_startup:
        logger.info("Startup: seeding demo hotel (skipped if Hotels table not empty)")
        repository.seed_demo_hotel_if_empty()

    logger.info("Startup complete — system ready")


# Module-level app object for uvicorn
app = create_app()
