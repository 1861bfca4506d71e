#!/usr/bin/env python3
"""Validate local hotel booking environment readiness."""

from __future__ import annotations

import importlib
import shutil
import sys
import tempfile
from dataclasses import replace
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hotel_booking.domain.errors import RoomUnavailableError
from hotel_booking.repository.data_repository import DEMO_ROOM_LAYOUT, DataRepository
from hotel_booking.services.allocation_service import AllocationService
from hotel_booking.services.availability_service import AvailabilityService
from hotel_booking.utils.config import get_settings

SEPARATOR_LINE = "=" * 44


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True
    temp_dir = tempfile.mkdtemp(prefix="hotel-booking-env-")

    # CHECK 1 — Python version >= 3.10
    if sys.version_info >= (3, 10):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.10",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2 — Required packages importable
    package_specs = [
        ("fastapi", "fastapi"),
        ("uvicorn", "uvicorn"),
        ("pydantic", "pydantic"),
        ("httpx", "httpx"),
        ("pytest", "pytest"),
    ]
    import_errors: list[str] = []
    from importlib.metadata import PackageNotFoundError, version

    for module_name, dist_name in package_specs:
        try:
            importlib.import_module(module_name)
            version(dist_name)
        except (ImportError, PackageNotFoundError) as exc:
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    try:
        validation_settings = replace(
            get_settings(),
            database_path=Path(temp_dir) / "hotel_booking_validation.db",
        )
        repository = DataRepository(validation_settings)

        # CHECK 3 — Database initialization
        try:
            repository.initialize_database()
            ok, line = _print_result("Database initialization", True)
        except Exception as exc:
            ok, line = _print_result("Database initialization", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 4 — Demo hotel seeding
        hotel_id = 0
        try:
            hotel_id = repository.seed_demo_hotel()
            hotel = repository.get_hotel_with_rooms(hotel_id)
            if hotel is None or len(hotel.rooms) != len(DEMO_ROOM_LAYOUT):
                raise RuntimeError("demo hotel rooms were not persisted")
            ok, line = _print_result("Demo hotel", True, f": {len(hotel.rooms)} rooms")
        except Exception as exc:
            ok, line = _print_result("Demo hotel", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 5 — Booking and conflict detection
        booked_room_id = None
        start = datetime(2026, 1, 10, 10, 0)
        end = datetime(2026, 1, 12, 10, 0)
        allocation_service = AllocationService(
            repository=repository,
            settings=validation_settings,
        )
        try:
            booking = allocation_service.book(hotel_id=hotel_id, start=start, end=end, people=2)
            booked_room_id = booking.room_id
            try:
                allocation_service.book(hotel_id=hotel_id, start=start, end=end, people=2)
            except RoomUnavailableError:
                pass
            else:
                raise RuntimeError("overlapping booking was accepted")
            ok, line = _print_result("Booking smoke test", True, f": {booking.reference}")
        except Exception as exc:
            ok, line = _print_result("Booking smoke test", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 6 — Availability excludes the booked room
        try:
            rooms = AvailabilityService(
                repository=repository,
                settings=validation_settings,
            ).available(hotel_id=hotel_id, start=start, end=end, people=2)
            if booked_room_id is None:
                raise RuntimeError("no booking to check against")
            if booked_room_id in {room.room_id for room in rooms}:
                raise RuntimeError(f"booked room {booked_room_id} reported as free")
            ok, line = _print_result("Availability query", True, f": {len(rooms)} free rooms")
        except Exception as exc:
            ok, line = _print_result("Availability query", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)

    print(SEPARATOR_LINE)
    print(" Hotel Booking Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
