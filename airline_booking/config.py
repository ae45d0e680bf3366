"""Runtime settings for the airline booking console."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DATA_DIR = Path(os.environ.get("AIRLINE_DATA_DIR", "./.airline-data"))
DEFAULT_ADMIN_PASSWORD = os.environ.get("AIRLINE_ADMIN_PASSWORD", "ela2121")
DEFAULT_CURRENCY = os.environ.get("AIRLINE_CURRENCY", "ETB")
DEFAULT_LOG_LEVEL = os.environ.get("AIRLINE_LOG_LEVEL", "WARNING")

FLIGHTS_FILE = "flights.txt"
PASSENGERS_FILE = "passengers.txt"
BOOKINGS_FILE = "bookings.txt"
BOOKING_SEQUENCE_FILE = "booking_sequence.txt"


@dataclass
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    admin_password: str = DEFAULT_ADMIN_PASSWORD
    currency: str = DEFAULT_CURRENCY
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the environment at call time rather than import time."""

        return cls(
            data_dir=Path(os.environ.get("AIRLINE_DATA_DIR", str(DEFAULT_DATA_DIR))),
            admin_password=os.environ.get("AIRLINE_ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD),
            currency=os.environ.get("AIRLINE_CURRENCY", DEFAULT_CURRENCY),
            log_level=os.environ.get("AIRLINE_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )

    @property
    def flights_path(self) -> Path:
        return self.data_dir / FLIGHTS_FILE

    @property
    def passengers_path(self) -> Path:
        return self.data_dir / PASSENGERS_FILE

    @property
    def bookings_path(self) -> Path:
        return self.data_dir / BOOKINGS_FILE

    @property
    def booking_sequence_path(self) -> Path:
        return self.data_dir / BOOKING_SEQUENCE_FILE

    def ensure_data_dir(self) -> Path:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self.data_dir


def authenticate_admin(password: str, settings: Settings | None = None) -> bool:
    expected = (settings or Settings.from_env()).admin_password
    return password == expected
