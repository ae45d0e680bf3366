"""Business logic for the airline booking system."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .bank import PaymentAuthority
from .config import Settings
from .errors import (
    BookingNotFound,
    CatalogError,
    DuplicateIdentity,
    FlightUnavailable,
    InsufficientFunds,
    InvalidPassengerDetails,
    SeatUnavailable,
    SeatUnknown,
    UserCancelled,
    VerificationFailed,
)
from .ledger import Ledger
from .models import Aircraft, Booking, Flight, Passenger, PassengerDraft
from .seating import is_valid_format, normalize_seat
from .storage import (
    StateLines,
    encode_booking,
    encode_flight,
    encode_passenger,
    read_booking_sequence,
    read_records,
    write_lines,
)
from .validators import draft_problems

logger = logging.getLogger(__name__)

SeatChoice = Union[str, Iterable[str]]
ConfirmPayment = Callable[[float], bool]
SeatRejected = Callable[[Exception], None]


@dataclass
class AirlineState:
    """Everything the console works on, owned by one process-level session."""

    flights: Dict[str, Flight] = field(default_factory=dict)
    passengers: List[Passenger] = field(default_factory=list)
    ledger: Ledger = field(default_factory=Ledger)
    bank: PaymentAuthority = field(default_factory=PaymentAuthority)
    aircraft: Dict[str, Aircraft] = field(default_factory=dict)


class BookingState(str, Enum):
    VALIDATING = "validating"
    SEAT_HELD = "seat_held"
    PAYMENT_RESOLVED = "payment_resolved"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass
class BookingAttempt:
    operation: str
    flight_no: str
    state: BookingState = BookingState.VALIDATING
    seat: Optional[str] = None

    def advance(self, state: BookingState) -> None:
        logger.debug("%s on %s: %s -> %s", self.operation, self.flight_no, self.state.value, state.value)
        self.state = state


@dataclass
class BookingReceipt:
    booking: Booking
    passenger: Passenger
    charged: float
    balance: Optional[float]

    @property
    def paid(self) -> bool:
        return self.booking.is_paid


def _iter_candidates(seats: SeatChoice) -> Iterator[str]:
    if isinstance(seats, str):
        yield seats
    else:
        yield from seats


def _latest_registration(
    passengers: Iterable[Passenger], government_id: str, destination: str
) -> Optional[Passenger]:
    match = None
    for passenger in passengers:
        if passenger.government_id == government_id and passenger.destination == destination:
            match = passenger
    return match


def rebuild_seat_state_from_bookings(
    flights: Iterable[Flight],
    bookings: Iterable[Booking],
    passengers: Iterable[Passenger] = (),
) -> List[Booking]:
    """Reset every seat grid and roster, then replay ``bookings`` onto them.

    Returns the bookings that could not be placed: unknown flight, seat
    outside the grid, seat already taken by an earlier record, or a second
    booking for an identity already on the flight.
    """

    by_number = {flight.flight_no: flight for flight in flights}
    registry = list(passengers)
    for flight in by_number.values():
        flight.reset_occupancy()

    skipped = []
    for booking in bookings:
        flight = by_number.get(booking.flight_no)
        seat = normalize_seat(booking.seat_number)
        if (
            flight is None
            or not flight.seat_map.exists(seat)
            or not flight.seat_map.is_free(seat)
            or booking.passenger_id in flight.roster
        ):
            logger.warning(
                "Booking %s for %s seat %s cannot be placed", booking.booking_id, booking.flight_no, seat
            )
            skipped.append(booking)
            continue
        flight.seat_map.reserve(seat)
        flight.available_seats -= 1

        registered = _latest_registration(registry, booking.passenger_id, flight.destination)
        if registered is not None:
            entry = registered.copy()
            entry.seat_number = seat
        else:
            entry = Passenger(
                name="",
                passport="",
                government_id=booking.passenger_id,
                contact="",
                seat_number=seat,
                destination=flight.destination,
                registered_at=booking.booked_at,
            )
        flight.roster.add(entry)
    return skipped


class BookingEngine:
    """Performs book, cancel and postpone as single run-to-completion transactions.

    Every failure after a seat has been held releases that seat before the
    error propagates, so the seat map never shows an occupied seat without a
    matching ledger entry.
    """

    def __init__(self, state: AirlineState, *, clock: Callable[[], float] = time.time) -> None:
        self.state = state
        self.clock = clock

    def _now(self) -> int:
        return int(self.clock())

    def get_flight(self, flight_no: str) -> Flight:
        flight = self.state.flights.get(flight_no)
        if flight is None:
            raise FlightUnavailable(f"Flight {flight_no} not found")
        return flight

    def _validate_draft(self, draft: PassengerDraft) -> None:
        problems = draft_problems(draft)
        if problems:
            raise InvalidPassengerDetails("Invalid passenger details: " + "; ".join(problems))

    def _reserve(self, flight: Flight, candidate: str, exclude: Optional[str]) -> str:
        seat = normalize_seat(candidate)
        holders = [
            b for b in self.state.ledger.find_by_seat(flight.flight_no, seat) if b.booking_id != exclude
        ]
        if is_valid_format(seat) and holders:
            raise SeatUnavailable(f"Seat {seat} is already reserved in the booking system")
        return flight.seat_map.reserve(seat)

    def _hold_seat(
        self,
        flight: Flight,
        seats: SeatChoice,
        on_rejected: Optional[SeatRejected],
        exclude: Optional[str] = None,
    ) -> str:
        last_error: Optional[Exception] = None
        for candidate in _iter_candidates(seats):
            try:
                return self._reserve(flight, candidate, exclude)
            except (SeatUnknown, SeatUnavailable) as exc:
                logger.info("Seat %r rejected on %s: %s", candidate, flight.flight_no, exc)
                last_error = exc
                if on_rejected is not None:
                    on_rejected(exc)
        if last_error is not None:
            raise last_error
        raise UserCancelled("No seat was selected")

    def _vacate(self, flight: Flight, passenger_id: str, seat_number: str) -> None:
        flight.roster.remove_by_identity(passenger_id)
        if flight.seat_map.release(seat_number):
            flight.available_seats += 1

    def book(
        self,
        flight_no: str,
        draft: PassengerDraft,
        seats: SeatChoice,
        *,
        confirm: Optional[ConfirmPayment] = None,
        on_rejected: Optional[SeatRejected] = None,
    ) -> BookingReceipt:
        """Reserve a seat, settle payment and record the booking atomically."""

        attempt = BookingAttempt("book", flight_no)
        flight = self.get_flight(flight_no)
        if flight.available_seats <= 0:
            raise FlightUnavailable(f"No seats available on flight {flight_no}")
        self._validate_draft(draft)
        if self.state.ledger.has_identity_on_flight(draft.government_id, flight_no):
            raise DuplicateIdentity(f"ID {draft.government_id} is already booked on flight {flight_no}")

        attempt.seat = self._hold_seat(flight, seats, on_rejected)
        attempt.advance(BookingState.SEAT_HELD)

        booking: Optional[Booking] = None
        try:
            bank = self.state.bank
            balance: Optional[float] = None
            if bank.has_account(draft.name):
                if not bank.debit(draft.name, flight.price):
                    raise InsufficientFunds(
                        f"Insufficient funds: fare {flight.price:g}, balance {bank.balance_of(draft.name):g}"
                    )
                balance = bank.balance_of(draft.name)
            elif confirm is None or not confirm(flight.price):
                raise UserCancelled("Booking cancelled")
            attempt.advance(BookingState.PAYMENT_RESOLVED)

            now = self._now()
            passenger = Passenger.from_draft(
                draft, seat_number=attempt.seat, destination=flight.destination, registered_at=now
            )
            booking = self.state.ledger.create(
                flight_no, draft.government_id, attempt.seat, booked_at=now, is_paid=True
            )
            flight.roster.add(passenger.copy())
            flight.available_seats -= 1
            self.state.passengers.append(passenger)
        except Exception:
            if booking is not None:
                self.state.ledger.cancel(booking.booking_id)
            flight.seat_map.release(attempt.seat)
            attempt.advance(BookingState.ROLLED_BACK)
            logger.info("Released seat %s on %s after failed booking", attempt.seat, flight_no)
            raise

        attempt.advance(BookingState.COMMITTED)
        logger.info("Booked %s seat %s on %s", booking.booking_id, attempt.seat, flight_no)
        return BookingReceipt(
            booking=booking,
            passenger=passenger,
            charged=flight.price,
            balance=balance,
        )

    def cancel(self, booking_id: str) -> Booking:
        """Free the seat and roster entry, then drop the ledger record. No refund is issued."""

        booking = self.state.ledger.find_by_booking_id(booking_id)
        if booking is None:
            raise BookingNotFound(f"Booking {booking_id} not found")
        flight = self.state.flights.get(booking.flight_no)
        if flight is not None:
            self._vacate(flight, booking.passenger_id, booking.seat_number)
        self.state.ledger.cancel(booking_id)
        logger.info("Cancelled %s on %s", booking_id, booking.flight_no)
        return booking

    def verify_owner(self, booking_id: str, passenger_id: str) -> Booking:
        booking = self.state.ledger.find_by_booking_id(booking_id)
        if booking is None:
            raise BookingNotFound(f"Booking {booking_id} not found")
        if booking.passenger_id != passenger_id:
            raise VerificationFailed("Invalid passenger ID! Verification failed")
        return booking

    def postpone(
        self,
        booking_id: str,
        verify_passenger_id: str,
        draft: PassengerDraft,
        seats: SeatChoice,
        *,
        on_rejected: Optional[SeatRejected] = None,
    ) -> Booking:
        """Move a booking to new passenger details and a new seat, keeping its id.

        The old seat is released before the new one is chosen and stays
        released if seat selection is abandoned.
        """

        booking = self.verify_owner(booking_id, verify_passenger_id)
        flight = self.get_flight(booking.flight_no)
        self._validate_draft(draft)
        if self.state.ledger.has_identity_on_flight(
            draft.government_id, flight.flight_no, exclude=booking_id
        ):
            raise DuplicateIdentity(
                f"ID {draft.government_id} is already booked on flight {flight.flight_no}"
            )

        old_id = booking.passenger_id
        if flight.seat_map.release(booking.seat_number):
            flight.available_seats += 1
        seat = self._hold_seat(flight, seats, on_rejected, exclude=booking_id)
        flight.available_seats -= 1

        now = self._now()
        passenger = Passenger.from_draft(
            draft, seat_number=seat, destination=flight.destination, registered_at=now
        )
        if not flight.roster.replace(old_id, passenger.copy()):
            flight.roster.add(passenger.copy())

        registered = _latest_registration(self.state.passengers, old_id, flight.destination)
        if registered is None:
            self.state.passengers.append(passenger)
        else:
            registered.name = passenger.name
            registered.passport = passenger.passport
            registered.government_id = passenger.government_id
            registered.contact = passenger.contact
            registered.seat_number = seat
            registered.registered_at = now

        booking.passenger_id = draft.government_id
        booking.seat_number = seat
        booking.booked_at = now
        logger.info("Postponed %s on %s to seat %s", booking_id, flight.flight_no, seat)
        return booking

    def current_bookings(self, passenger_id: str) -> List[Tuple[Booking, Optional[Passenger]]]:
        """Return active bookings for ``passenger_id`` with their registry details."""

        results = []
        for booking in self.state.ledger.find_by_passenger_id(passenger_id):
            flight = self.state.flights.get(booking.flight_no)
            destination = flight.destination if flight else ""
            results.append(
                (booking, _latest_registration(self.state.passengers, passenger_id, destination))
            )
        return results

    def rebuild_seat_state_from_bookings(self) -> List[Booking]:
        return rebuild_seat_state_from_bookings(
            self.state.flights.values(), self.state.ledger, self.state.passengers
        )

    def serialize_state(self) -> StateLines:
        return (
            [encode_flight(flight) for flight in self.state.flights.values()],
            [encode_passenger(passenger) for passenger in self.state.passengers],
            [encode_booking(booking) for booking in self.state.ledger],
        )


def load_state(settings: Settings, *, bank: Optional[PaymentAuthority] = None) -> AirlineState:
    """Read the flat files and reconcile seat occupancy from the bookings."""

    flights, passengers, bookings = read_records(settings)
    ledger = Ledger(next_sequence=read_booking_sequence(settings))
    for booking in bookings:
        if booking.booking_id in ledger:
            logger.warning("Ignoring duplicate booking id %s", booking.booking_id)
            continue
        ledger.add(booking)
    state = AirlineState(
        flights={flight.flight_no: flight for flight in flights},
        passengers=passengers,
        ledger=ledger,
        bank=bank or PaymentAuthority(),
    )
    rebuild_seat_state_from_bookings(state.flights.values(), state.ledger, state.passengers)
    return state


def save_state(state: AirlineState, settings: Settings) -> None:
    write_lines(
        settings,
        BookingEngine(state).serialize_state(),
        booking_sequence=state.ledger.next_sequence,
    )


def add_aircraft(
    state: AirlineState,
    *,
    model: str,
    total_seats: int,
    features: Iterable[str] = (),
) -> Aircraft:
    if not model:
        raise CatalogError("aircraft model is required")
    if total_seats <= 0:
        raise CatalogError("aircraft must have at least one seat")
    if model in state.aircraft:
        raise CatalogError(f"aircraft {model} already exists")
    aircraft = Aircraft(model=model, total_seats=total_seats, features=[f.strip() for f in features if f.strip()])
    state.aircraft[model] = aircraft
    return aircraft


def delete_aircraft(state: AirlineState, model: str) -> Aircraft:
    if model not in state.aircraft:
        raise CatalogError(f"aircraft {model} not found")
    if any(flight.plane == model for flight in state.flights.values()):
        raise CatalogError(f"aircraft {model} is assigned to a flight and cannot be deleted")
    return state.aircraft.pop(model)


def add_flight(
    state: AirlineState,
    *,
    flight_no: str,
    aircraft_model: str,
    destination: str,
    day_time: str,
    distance: str,
    duration: str,
    price: float,
) -> Flight:
    """Create a flight whose capacity comes from the chosen aircraft."""

    if not flight_no:
        raise CatalogError("flight number is required")
    if flight_no in state.flights:
        raise CatalogError(f"flight {flight_no} already exists")
    aircraft = state.aircraft.get(aircraft_model)
    if aircraft is None:
        raise CatalogError(f"aircraft {aircraft_model} not found")
    if price < 0:
        raise CatalogError("price cannot be negative")
    flight = Flight(
        flight_no=flight_no,
        destination=destination,
        day_time=day_time,
        distance=distance,
        plane=aircraft.model,
        duration=duration,
        total_seats=aircraft.total_seats,
        price=price,
    )
    state.flights[flight_no] = flight
    return flight


def delete_flight(state: AirlineState, flight_no: str) -> List[Booking]:
    """Remove a flight and every booking on it. Returns the purged bookings."""

    flight = state.flights.pop(flight_no, None)
    if flight is None:
        raise CatalogError(f"flight {flight_no} not found")
    flight.reset_occupancy()
    removed = state.ledger.purge_flight(flight_no)
    logger.info("Deleted flight %s and %d bookings", flight_no, len(removed))
    return removed


def list_available_flights(state: AirlineState) -> List[Flight]:
    return [flight for flight in state.flights.values() if flight.available_seats > 0]


def search_flights(state: AirlineState, *, destination: str = "") -> List[Flight]:
    needle = destination.strip().lower()
    return [flight for flight in state.flights.values() if needle in flight.destination.lower()]

