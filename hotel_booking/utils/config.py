"""Environment-driven application settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


DEFAULT_DATABASE_PATH = Path("data") / "hotel_booking.db"
ENV_PREFIX = "HOTEL_BOOKING_"


def _env(name: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(f"{ENV_PREFIX}{name}")
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Immutable runtime configuration.

    Tests derive isolated variants with ``dataclasses.replace`` instead of
    mutating process environment.
    """

    app_name: str
    app_version: str
    database_path: Path
    log_level: str
    host: str
    port: int
    sqlite_timeout_seconds: float
    seed_demo_data_on_startup: bool
    demo_hotel_name: str
    reference_generation_attempts: int


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process from HOTEL_BOOKING_* variables."""
    return Settings(
        app_name=_env("APP_NAME", "Hotel Booking API"),
        app_version=_env("APP_VERSION", "1.0.0"),
        database_path=Path(
            _env("DATABASE_PATH", str(DEFAULT_DATABASE_PATH))
        ),
        log_level=_env("LOG_LEVEL", "INFO"),
        host=_env("HOST", "127.0.0.1"),
        port=int(_env("PORT", "8000")),
        sqlite_timeout_seconds=float(_env("SQLITE_TIMEOUT_SECONDS", "30")),
        seed_demo_data_on_startup=_env_bool("SEED_DEMO_DATA", True),
        demo_hotel_name=_env("DEMO_HOTEL_NAME", "River View Retreat"),
        reference_generation_attempts=int(_env("REFERENCE_GENERATION_ATTEMPTS", "2")),
    )
