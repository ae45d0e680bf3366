"""Flat-file mirror of flights, passengers and bookings.

Each file holds one comma separated record per line and is rewritten in
full on every save. A fourth file keeps the next booking sequence number.
"""
from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import Settings
from .errors import PersistenceError
from .models import Booking, Flight, Passenger
from .seating import normalize_seat

logger = logging.getLogger(__name__)

FLIGHT_FIELDS: Sequence[str] = (
    "flightNo",
    "destination",
    "dayTime",
    "distance",
    "plane",
    "duration",
    "totalSeats",
    "price",
)
PASSENGER_FIELDS: Sequence[str] = (
    "name",
    "passport",
    "id",
    "contact",
    "destination",
    "registrationEpochSeconds",
)
BOOKING_FIELDS: Sequence[str] = (
    "bookingId",
    "flightNo",
    "passengerId",
    "seatNumber",
    "bookingEpochSeconds",
    "isPaid",
)

StateLines = Tuple[List[str], List[str], List[str]]


def _format_price(price: float) -> str:
    return f"{price:g}"


def _join(values: Iterable[object]) -> str:
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="").writerow(values)
    return buffer.getvalue()


def _split(line: str, expected: int) -> List[str]:
    row = next(csv.reader([line]))
    if len(row) != expected:
        raise ValueError(f"expected {expected} fields, found {len(row)}")
    return row


def encode_flight(flight: Flight) -> str:
    # Capacity is written, not the remaining count: availability is replayed
    # from bookings on load.
    return _join(
        (
            flight.flight_no,
            flight.destination,
            flight.day_time,
            flight.distance,
            flight.plane,
            flight.duration,
            flight.total_seats,
            _format_price(flight.price),
        )
    )


def decode_flight(line: str) -> Flight:
    flight_no, destination, day_time, distance, plane, duration, seats, price = _split(
        line, len(FLIGHT_FIELDS)
    )
    return Flight(
        flight_no=flight_no,
        destination=destination,
        day_time=day_time,
        distance=distance,
        plane=plane,
        duration=duration,
        total_seats=int(seats),
        price=float(price),
    )


def encode_passenger(passenger: Passenger) -> str:
    return _join(
        (
            passenger.name,
            passenger.passport,
            passenger.government_id,
            passenger.contact,
            passenger.destination,
            int(passenger.registered_at),
        )
    )


def decode_passenger(line: str) -> Passenger:
    name, passport, government_id, contact, destination, registered = _split(
        line, len(PASSENGER_FIELDS)
    )
    return Passenger(
        name=name,
        passport=passport,
        government_id=government_id,
        contact=contact,
        destination=destination,
        registered_at=int(registered),
    )


def encode_booking(booking: Booking) -> str:
    return _join(
        (
            booking.booking_id,
            booking.flight_no,
            booking.passenger_id,
            booking.seat_number,
            int(booking.booked_at),
            1 if booking.is_paid else 0,
        )
    )


def decode_booking(line: str) -> Booking:
    booking_id, flight_no, passenger_id, seat, booked_at, paid = _split(
        line, len(BOOKING_FIELDS)
    )
    return Booking(
        booking_id=booking_id,
        flight_no=flight_no,
        passenger_id=passenger_id,
        seat_number=normalize_seat(seat),
        booked_at=int(booked_at),
        is_paid=paid.strip() == "1",
    )


def _read_lines(path: Path) -> List[str]:
    if not path.exists():
        return []
    try:
        with path.open("r", encoding="utf-8") as fh:
            return [line.rstrip("\r\n") for line in fh if line.strip()]
    except OSError as exc:
        raise PersistenceError(f"Cannot read {path}: {exc}") from exc


def _decode_all(path: Path, decoder):
    records = []
    for number, line in enumerate(_read_lines(path), start=1):
        try:
            records.append(decoder(line))
        except ValueError as exc:
            logger.warning("Skipping malformed record %s:%d (%s)", path.name, number, exc)
    return records


def read_records(settings: Settings) -> Tuple[List[Flight], List[Passenger], List[Booking]]:
    """Read all three files; missing files yield empty collections."""

    flights = _decode_all(settings.flights_path, decode_flight)
    passengers = _decode_all(settings.passengers_path, decode_passenger)
    bookings = _decode_all(settings.bookings_path, decode_booking)
    logger.info(
        "Loaded %d flights, %d passengers, %d bookings from %s",
        len(flights),
        len(passengers),
        len(bookings),
        settings.data_dir,
    )
    return flights, passengers, bookings


def read_booking_sequence(settings: Settings) -> int:
    """Return the stored next booking sequence, or 0 when none is recorded."""

    lines = _read_lines(settings.booking_sequence_path)
    if not lines:
        return 0
    try:
        return int(lines[0].strip())
    except ValueError:
        logger.warning("Ignoring malformed booking sequence %r", lines[0])
        return 0


def write_lines(
    settings: Settings, lines: StateLines, *, booking_sequence: Optional[int] = None
) -> None:
    """Rewrite the three files from ``lines``, plus the sequence file when given."""

    flight_lines, passenger_lines, booking_lines = lines
    targets = [
        (settings.flights_path, flight_lines),
        (settings.passengers_path, passenger_lines),
        (settings.bookings_path, booking_lines),
    ]
    if booking_sequence is not None:
        targets.append((settings.booking_sequence_path, [str(booking_sequence)]))
    try:
        settings.ensure_data_dir()
        for path, content in targets:
            with path.open("w", encoding="utf-8") as fh:
                for line in content:
                    fh.write(line + "\n")
    except OSError as exc:
        raise PersistenceError(f"Error saving data: {exc}") from exc
