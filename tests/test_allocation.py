from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from hotel_booking.domain.errors import (
    HotelNotFoundError,
    InvalidInputError,
    InvalidRangeError,
    NoSuitableRoomError,
    ReferenceCollisionError,
    RoomUnavailableError,
)
from hotel_booking.domain.models import RoomType
from hotel_booking.repository.booking_ledger import BookingLedger
from hotel_booking.repository.data_repository import DataRepository
from hotel_booking.services.allocation_service import AllocationService
from hotel_booking.utils.config import get_settings


FIRST_FROM = datetime(2026, 1, 10, 10)
FIRST_TO = datetime(2026, 1, 12, 10)


def _build_test_settings(tmp_path, filename: str):
    return replace(get_settings(), database_path=tmp_path / filename)


def _seeded_service(tmp_path, filename: str, **service_kwargs):
    settings = _build_test_settings(tmp_path, filename)
    repository = DataRepository(settings)
    repository.initialize_database()
    hotel_id = repository.seed_demo_hotel()
    service = AllocationService(repository=repository, settings=settings, **service_kwargs)
    return service, repository, hotel_id


def test_party_of_two_gets_first_double_room(tmp_path):
    service, repository, hotel_id = _seeded_service(tmp_path, "alloc_double.db")

    booking = service.book(hotel_id=hotel_id, start=FIRST_FROM, end=FIRST_TO, people=2)

    hotel = repository.get_hotel_with_rooms(hotel_id)
    first_double = next(room for room in hotel.rooms if room.capacity >= 2)
    assert booking.room_id == first_double.room_id
    assert first_double.room_type is RoomType.DOUBLE
    assert len(booking.reference) == 32


def test_overlap_on_assigned_room_fails_without_fallback(tmp_path):
    service, repository, hotel_id = _seeded_service(tmp_path, "alloc_no_fallback.db")
    service.book(hotel_id=hotel_id, start=FIRST_FROM, end=FIRST_TO, people=2)

    with pytest.raises(RoomUnavailableError, match="already booked"):
        service.book(
            hotel_id=hotel_id,
            start=datetime(2026, 1, 11, 9),
            end=datetime(2026, 1, 13, 10),
            people=2,
        )

    # The second Double room stays empty: no fallback to it.
    assert repository.count_bookings() == 1


def test_back_to_back_booking_succeeds(tmp_path):
    service, _, hotel_id = _seeded_service(tmp_path, "alloc_back_to_back.db")
    first = service.book(hotel_id=hotel_id, start=FIRST_FROM, end=FIRST_TO, people=2)

    second = service.book(
        hotel_id=hotel_id,
        start=FIRST_TO,
        end=datetime(2026, 1, 14, 10),
        people=2,
    )

    assert second.room_id == first.room_id
    assert second.reference != first.reference


def test_single_room_hotel_two_disjoint_then_overlap(tmp_path):
    settings = _build_test_settings(tmp_path, "alloc_single_room.db")
    repository = DataRepository(settings)
    repository.initialize_database()
    hotel_id = repository.create_hotel("Tiny Lodge", [(RoomType.DOUBLE, 2)])
    service = AllocationService(repository=repository, settings=settings)

    service.book(hotel_id=hotel_id, start=datetime(2026, 3, 1), end=datetime(2026, 3, 3), people=2)
    service.book(hotel_id=hotel_id, start=datetime(2026, 3, 5), end=datetime(2026, 3, 7), people=1)

    with pytest.raises(RoomUnavailableError):
        service.book(hotel_id=hotel_id, start=datetime(2026, 3, 2), end=datetime(2026, 3, 6), people=1)


def test_identical_requests_are_not_idempotent(tmp_path):
    service, _, hotel_id = _seeded_service(tmp_path, "alloc_not_idempotent.db")
    service.book(hotel_id=hotel_id, start=FIRST_FROM, end=FIRST_TO, people=1)

    with pytest.raises(RoomUnavailableError):
        service.book(hotel_id=hotel_id, start=FIRST_FROM, end=FIRST_TO, people=1)


def test_unknown_hotel_raises_not_found(tmp_path):
    service, _, _ = _seeded_service(tmp_path, "alloc_missing_hotel.db")

    with pytest.raises(HotelNotFoundError):
        service.book(hotel_id=999, start=FIRST_FROM, end=FIRST_TO, people=1)


def test_party_larger_than_any_room_raises_no_suitable_room(tmp_path):
    service, repository, hotel_id = _seeded_service(tmp_path, "alloc_too_large.db")

    with pytest.raises(NoSuitableRoomError):
        service.book(hotel_id=hotel_id, start=FIRST_FROM, end=FIRST_TO, people=5)
    assert repository.count_bookings() == 0


def test_validation_happens_before_storage(tmp_path):
    class ExplodingRepository:
        def get_hotel_with_rooms(self, hotel_id):
            raise AssertionError("storage must not be touched")

    service = AllocationService(
        repository=ExplodingRepository(),
        ledger=object(),
        settings=_build_test_settings(tmp_path, "unused.db"),
    )

    with pytest.raises(InvalidRangeError):
        service.book(hotel_id=1, start=FIRST_TO, end=FIRST_FROM, people=2)
    with pytest.raises(InvalidInputError):
        service.book(hotel_id=1, start=FIRST_FROM, end=FIRST_TO, people=0)


def test_reference_collision_is_retried_once(tmp_path):
    references = iter(["a" * 32, "a" * 32, "b" * 32])
    service, _, hotel_id = _seeded_service(
        tmp_path,
        "alloc_retry.db",
        reference_generator=lambda: next(references),
    )
    service.book(hotel_id=hotel_id, start=FIRST_FROM, end=FIRST_TO, people=1)

    second = service.book(
        hotel_id=hotel_id,
        start=datetime(2026, 2, 1),
        end=datetime(2026, 2, 2),
        people=1,
    )

    assert second.reference == "b" * 32


def test_repeated_reference_collision_surfaces_internal_error(tmp_path):
    service, repository, hotel_id = _seeded_service(
        tmp_path,
        "alloc_collision.db",
        reference_generator=lambda: "c" * 32,
    )
    service.book(hotel_id=hotel_id, start=FIRST_FROM, end=FIRST_TO, people=1)

    with pytest.raises(ReferenceCollisionError):
        service.book(
            hotel_id=hotel_id,
            start=datetime(2026, 2, 1),
            end=datetime(2026, 2, 2),
            people=1,
        )
    assert repository.count_bookings() == 1


def test_references_are_unique_across_many_bookings(tmp_path):
    service, repository, hotel_id = _seeded_service(tmp_path, "alloc_unique.db")

    references = {
        service.book(
            hotel_id=hotel_id,
            start=FIRST_FROM + timedelta(hours=2 * slot),
            end=FIRST_FROM + timedelta(hours=2 * slot + 1),
            people=1,
        ).reference
        for slot in range(60)
    }

    assert len(references) == 60
    assert repository.count_bookings() == 60


def test_concurrent_overlapping_requests_have_one_winner(tmp_path):
    settings = _build_test_settings(tmp_path, "alloc_race.db")
    repository = DataRepository(settings)
    repository.initialize_database()
    hotel_id = repository.create_hotel("Tiny Lodge", [(RoomType.SINGLE, 1)])
    service = AllocationService(
        repository=repository,
        ledger=BookingLedger(repository),
        settings=settings,
    )

    barrier = threading.Barrier(2)
    outcomes: list[str] = []
    outcomes_lock = threading.Lock()

    def attempt(start_hour: int) -> None:
        barrier.wait()
        try:
            service.book(
                hotel_id=hotel_id,
                start=datetime(2026, 1, 10, start_hour),
                end=datetime(2026, 1, 12, 10),
                people=1,
            )
            result = "ok"
        except RoomUnavailableError:
            result = "conflict"
        with outcomes_lock:
            outcomes.append(result)

    threads = [threading.Thread(target=attempt, args=(hour,)) for hour in (9, 10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(outcomes) == ["conflict", "ok"]
    assert repository.count_bookings() == 1
