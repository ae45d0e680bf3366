"""Utilities to populate the booking state with sample data for tests and demos."""
from __future__ import annotations

import random
from typing import Dict, Sequence

from .errors import BookingError
from .models import PassengerDraft
from .services import AirlineState, BookingEngine, add_aircraft, add_flight

DESTINATIONS: Sequence[str] = (
    "Paris",
    "Nairobi",
    "Dubai",
    "London",
    "Cairo",
    "Johannesburg",
    "Frankfurt",
    "Lagos",
)
AIRCRAFT: Sequence[tuple] = (
    ("Boeing 787", 100, ("WiFi", "Meals")),
    ("Airbus A350", 100, ("WiFi", "Meals", "Lounge")),
    ("Dash 8-400", 70, ("Meals",)),
)
FIRST_NAMES = ("Abebe", "Selam", "Dawit", "Hanna", "Yonas", "Liya", "Kebede", "Marta")
LAST_NAMES = ("Bekele", "Tadesse", "Girma", "Alemu", "Haile", "Mulugeta")


def generate_sample_data(
    state: AirlineState,
    *,
    flights: int = 6,
    bookings: int = 40,
    seed: int = 42,
) -> Dict[str, int]:
    """Populate ``state`` with deterministic pseudo-random flights and bookings.

    Sample passengers never match a bank account, so every booking goes
    through the pay-on-confirm path.
    """

    rng = random.Random(seed)
    for model, seats, features in AIRCRAFT:
        if model not in state.aircraft:
            add_aircraft(state, model=model, total_seats=seats, features=features)

    created = 0
    for index in range(flights):
        flight_no = f"AF{101 + index}"
        if flight_no in state.flights:
            continue
        add_flight(
            state,
            flight_no=flight_no,
            aircraft_model=rng.choice(AIRCRAFT)[0],
            destination=rng.choice(DESTINATIONS),
            day_time=f"Day{rng.randint(1, 7)} {rng.randint(5, 22):02d}:{rng.choice((0, 15, 30, 45)):02d}",
            distance=f"{rng.randint(4, 90) * 100}km",
            duration=f"{rng.randint(1, 12)}h",
            price=float(rng.choice((2500, 3200, 4100, 5600))),
        )
        created += 1

    engine = BookingEngine(state)
    flight_numbers = list(state.flights)
    successful = 0
    if not flight_numbers:
        return {"flights": 0, "bookings": 0}
    for index in range(bookings):
        draft = PassengerDraft(
            name=f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
            passport=f"EP{index:06d}",
            government_id=f"{900000 + index}",
            contact=f"2519{index:08d}",
        )
        seat = f"{rng.choice('ABCDEFGHIJ')}{rng.randint(1, 10)}"
        try:
            engine.book(rng.choice(flight_numbers), draft, seat, confirm=lambda amount: True)
            successful += 1
        except BookingError:
            continue
    return {"flights": created, "bookings": successful}
