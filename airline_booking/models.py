"""Domain records for the airline booking system."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List

from .roster import Roster
from .seating import SeatMap


@dataclass
class Aircraft:
    model: str
    total_seats: int
    features: List[str] = field(default_factory=list)


@dataclass
class PassengerDraft:
    """Identity fields collected from a passenger before a booking exists."""

    name: str
    passport: str
    government_id: str
    contact: str


@dataclass
class Passenger:
    name: str
    passport: str
    government_id: str
    contact: str
    seat_number: str = ""
    destination: str = ""
    registered_at: int = 0

    @classmethod
    def from_draft(
        cls, draft: PassengerDraft, *, seat_number: str, destination: str, registered_at: int
    ) -> "Passenger":
        return cls(
            name=draft.name,
            passport=draft.passport,
            government_id=draft.government_id,
            contact=draft.contact,
            seat_number=seat_number,
            destination=destination,
            registered_at=registered_at,
        )

    def copy(self) -> "Passenger":
        return replace(self)


@dataclass
class Booking:
    booking_id: str
    flight_no: str
    passenger_id: str
    seat_number: str
    booked_at: int
    is_paid: bool = True


@dataclass
class BankAccount:
    name: str
    balance: float


@dataclass
class Flight:
    """A scheduled flight with its own seat grid and passenger roster.

    ``total_seats`` is the declared capacity and ``available_seats`` the
    number still bookable, so ``total_seats - available_seats`` always equals
    both the occupied seat count and the roster size.
    """

    flight_no: str
    destination: str
    day_time: str
    distance: str
    plane: str
    duration: str
    total_seats: int
    price: float
    available_seats: int = -1
    seat_map: SeatMap = field(default_factory=SeatMap, repr=False, compare=False)
    roster: Roster = field(default_factory=Roster, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.available_seats < 0:
            self.available_seats = self.total_seats

    @property
    def booked_seats(self) -> int:
        return self.total_seats - self.available_seats

    def reset_occupancy(self) -> None:
        self.seat_map.reset()
        self.roster.clear()
        self.available_seats = self.total_seats

    def is_consistent(self) -> bool:
        return self.seat_map.occupied_count() == self.booked_seats == len(self.roster)
