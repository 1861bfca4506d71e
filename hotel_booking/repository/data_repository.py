"""Repository layer responsible for all database access."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from hotel_booking.domain.errors import StorageError
from hotel_booking.domain.interval import StayInterval
from hotel_booking.domain.models import (
    Booking,
    BookingDetail,
    Hotel,
    HotelSummary,
    Room,
    RoomType,
)
from hotel_booking.utils.config import Settings, get_settings
from hotel_booking.utils.logger import get_logger


logger = get_logger(__name__)

ROOM_OVERLAP_MESSAGE = "Room already booked for selected dates"

DEMO_ROOM_LAYOUT: tuple[tuple[RoomType, int], ...] = (
    (RoomType.SINGLE, 1),
    (RoomType.SINGLE, 1),
    (RoomType.DOUBLE, 2),
    (RoomType.DOUBLE, 2),
    (RoomType.DELUXE, 4),
    (RoomType.DELUXE, 4),
)


def format_timestamp(value: datetime) -> str:
    """Fixed-width text so SQL string comparison matches time order.

    ``isoformat`` always writes a four-digit year, so years below 1000 sort
    correctly too.
    """
    return value.isoformat(timespec="microseconds")


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value)


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise StorageError(f"{action} failed: {exc}") from exc


class DataRepository:
    """Encapsulates SQLite access so business logic stays storage-agnostic."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._db_path = Path(self._settings.database_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def _connect(
        self,
        isolation_level: Optional[str] = "DEFERRED",
    ) -> Iterator[sqlite3.Connection]:
        connection = sqlite3.connect(
            self._db_path,
            timeout=self._settings.sqlite_timeout_seconds,
            isolation_level=isolation_level,
        )
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON;")
        try:
            with connection:
                yield connection
        finally:
            connection.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Open a write transaction that holds the database write lock.

        ``BEGIN IMMEDIATE`` takes the reserved lock up front, so a read made
        inside the block cannot be invalidated by another writer before the
        block commits. Any exception, including cancellation, rolls back.
        """
        with self._connect(isolation_level=None) as connection:
            connection.execute("BEGIN IMMEDIATE;")
            yield connection

    def initialize_database(self) -> None:
        """Create all persistence artifacts before API startup."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("PRAGMA journal_mode = WAL;")

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Hotels (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        name TEXT NOT NULL,
                        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Rooms (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        hotel_id INTEGER NOT NULL,
                        room_type TEXT NOT NULL
                            CHECK (room_type IN ('Single', 'Double', 'Deluxe')),
                        capacity INTEGER NOT NULL CHECK (capacity > 0),
                        FOREIGN KEY (hotel_id) REFERENCES Hotels(id) ON DELETE CASCADE
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Bookings (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        reference TEXT NOT NULL UNIQUE,
                        hotel_id INTEGER NOT NULL,
                        room_id INTEGER NOT NULL,
                        start_at TEXT NOT NULL,
                        end_at TEXT NOT NULL,
                        people INTEGER NOT NULL CHECK (people > 0),
                        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                        CHECK (start_at < end_at),
                        FOREIGN KEY (hotel_id) REFERENCES Hotels(id) ON DELETE CASCADE,
                        FOREIGN KEY (room_id) REFERENCES Rooms(id) ON DELETE CASCADE
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_rooms_hotel
                    ON Rooms(hotel_id, id);
                    """
                )

                cursor.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_bookings_room_period
                    ON Bookings(room_id, start_at, end_at);
                    """
                )

                # Last line of defence for writers that bypass BookingLedger.
                cursor.execute(
                    f"""
                    CREATE TRIGGER IF NOT EXISTS trg_bookings_no_room_overlap
                    BEFORE INSERT ON Bookings
                    WHEN EXISTS (
                        SELECT 1
                        FROM Bookings
                        WHERE room_id = NEW.room_id
                          AND start_at < NEW.end_at
                          AND NEW.start_at < end_at
                    )
                    BEGIN
                        SELECT RAISE(ABORT, '{ROOM_OVERLAP_MESSAGE}');
                    END;
                    """
                )
            logger.info("Database initialized at %s", self._db_path)
        except sqlite3.Error as exc:
            raise StorageError(f"Database initialization failed: {exc}") from exc

    def reset_database(self, seed: bool = False) -> None:
        """Drop every table and recreate the schema, optionally re-seeding."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("DROP TRIGGER IF EXISTS trg_bookings_no_room_overlap;")
                cursor.execute("DROP TABLE IF EXISTS Bookings;")
                cursor.execute("DROP TABLE IF EXISTS Rooms;")
                cursor.execute("DROP TABLE IF EXISTS Hotels;")
            logger.info("Database reset at %s", self._db_path)
        except sqlite3.Error as exc:
            raise StorageError(f"Database reset failed: {exc}") from exc

        self.initialize_database()
        if seed:
            self.seed_demo_hotel()

    def seed_demo_hotel(self) -> int:
        """Insert the demo hotel with its fixed room layout."""
        hotel_id = self.create_hotel(self._settings.demo_hotel_name, DEMO_ROOM_LAYOUT)
        logger.info(
            "Demo hotel seeded | hotel_id=%s | name=%s | rooms=%s",
            hotel_id,
            self._settings.demo_hotel_name,
            len(DEMO_ROOM_LAYOUT),
        )
        return hotel_id

    def seed_demo_hotel_if_empty(self) -> None:
        """Seed the demo hotel only when no hotel exists yet."""
        with _storage_errors("Demo seed check"):
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) AS count FROM Hotels;")
                hotel_count = int(cursor.fetchone()["count"])
        if hotel_count > 0:
            logger.info("Hotel data already present; skipping seed")
            return
        self.seed_demo_hotel()

    def create_hotel(
        self,
        name: str,
        rooms: Sequence[tuple[RoomType, int]],
    ) -> int:
        """Insert a hotel and its rooms in one transaction; return the hotel id."""
        with _storage_errors("Hotel creation"):
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("INSERT INTO Hotels (name) VALUES (?);", (name,))
                hotel_id = int(cursor.lastrowid)
                cursor.executemany(
                    """
                    INSERT INTO Rooms (hotel_id, room_type, capacity)
                    VALUES (?, ?, ?);
                    """,
                    [(hotel_id, room_type.value, capacity) for room_type, capacity in rooms],
                )
        return hotel_id

    def get_hotel_with_rooms(self, hotel_id: int) -> Optional[Hotel]:
        with _storage_errors("Hotel lookup"):
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT id, name FROM Hotels WHERE id = ?;", (hotel_id,))
                row = cursor.fetchone()
                if row is None:
                    return None
                return self._load_hotel(cursor, int(row["id"]), str(row["name"]))

    def find_hotel_by_name(self, name: str) -> Optional[Hotel]:
        """Exact-name lookup; the lowest id wins when names repeat."""
        with _storage_errors("Hotel lookup"):
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT id, name FROM Hotels WHERE name = ? ORDER BY id ASC LIMIT 1;",
                    (name,),
                )
                row = cursor.fetchone()
                if row is None:
                    return None
                return self._load_hotel(cursor, int(row["id"]), str(row["name"]))

    def _load_hotel(self, cursor: sqlite3.Cursor, hotel_id: int, name: str) -> Hotel:
        cursor.execute(
            """
            SELECT id, hotel_id, room_type, capacity
            FROM Rooms
            WHERE hotel_id = ?
            ORDER BY id ASC;
            """,
            (hotel_id,),
        )
        rooms = tuple(
            Room(
                room_id=int(row["id"]),
                hotel_id=int(row["hotel_id"]),
                room_type=RoomType(row["room_type"]),
                capacity=int(row["capacity"]),
            )
            for row in cursor.fetchall()
        )
        return Hotel(hotel_id=hotel_id, name=name, rooms=rooms)

    def search_hotels(self, keyword: str) -> List[HotelSummary]:
        """Case-insensitive substring match on hotel name."""
        with _storage_errors("Hotel search"):
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    SELECT id, name
                    FROM Hotels
                    WHERE instr(lower(name), lower(?)) > 0
                    ORDER BY id ASC;
                    """,
                    (keyword,),
                )
                return [
                    HotelSummary(hotel_id=int(row["id"]), name=str(row["name"]))
                    for row in cursor.fetchall()
                ]

    def find_overlapping_bookings(
        self,
        room_id: int,
        interval: StayInterval,
        connection: Optional[sqlite3.Connection] = None,
    ) -> List[Booking]:
        """Return bookings on ``room_id`` that overlap ``interval``.

        Pass ``connection`` to read inside an open transaction. Raw
        ``sqlite3`` errors propagate so the ledger can classify them.
        """
        query = """
            SELECT id, reference, hotel_id, room_id, start_at, end_at, people
            FROM Bookings
            WHERE room_id = ?
              AND start_at < ?
              AND ? < end_at
            ORDER BY start_at ASC;
        """
        params = (room_id, format_timestamp(interval.end), format_timestamp(interval.start))
        if connection is not None:
            rows = connection.execute(query, params).fetchall()
        else:
            with self._connect() as conn:
                rows = conn.execute(query, params).fetchall()
        return [self._row_to_booking(row) for row in rows]

    def insert_booking(self, connection: sqlite3.Connection, booking: Booking) -> int:
        """Insert within the caller's transaction and return the new row id."""
        cursor = connection.execute(
            """
            INSERT INTO Bookings (reference, hotel_id, room_id, start_at, end_at, people)
            VALUES (?, ?, ?, ?, ?, ?);
            """,
            (
                booking.reference,
                booking.hotel_id,
                booking.room_id,
                format_timestamp(booking.interval.start),
                format_timestamp(booking.interval.end),
                booking.people,
            ),
        )
        return int(cursor.lastrowid)

    def list_bookings_for_room(self, room_id: int) -> List[Booking]:
        with _storage_errors("Booking listing"):
            with self._connect() as conn:
                rows = conn.execute(
                    """
                    SELECT id, reference, hotel_id, room_id, start_at, end_at, people
                    FROM Bookings
                    WHERE room_id = ?
                    ORDER BY start_at ASC;
                    """,
                    (room_id,),
                ).fetchall()
        return [self._row_to_booking(row) for row in rows]

    def get_booking_detail(self, reference: str) -> Optional[BookingDetail]:
        with _storage_errors("Booking lookup"):
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    SELECT
                        b.reference,
                        b.start_at,
                        b.end_at,
                        b.people,
                        h.name AS hotel_name,
                        r.room_type,
                        r.capacity
                    FROM Bookings AS b
                    INNER JOIN Hotels AS h ON h.id = b.hotel_id
                    INNER JOIN Rooms AS r ON r.id = b.room_id
                    WHERE b.reference = ?;
                    """,
                    (reference,),
                )
                row = cursor.fetchone()
        if row is None:
            return None
        return BookingDetail(
            reference=str(row["reference"]),
            hotel_name=str(row["hotel_name"]),
            room_type=RoomType(row["room_type"]),
            room_capacity=int(row["capacity"]),
            start=parse_timestamp(row["start_at"]),
            end=parse_timestamp(row["end_at"]),
            people=int(row["people"]),
        )

    def count_bookings(self) -> int:
        with _storage_errors("Booking count"):
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) AS count FROM Bookings;")
                return int(cursor.fetchone()["count"])

    @staticmethod
    def _row_to_booking(row: sqlite3.Row) -> Booking:
        return Booking(
            booking_id=int(row["id"]),
            reference=str(row["reference"]),
            hotel_id=int(row["hotel_id"]),
            room_id=int(row["room_id"]),
            interval=StayInterval(
                start=parse_timestamp(row["start_at"]),
                end=parse_timestamp(row["end_at"]),
            ),
            people=int(row["people"]),
        )
