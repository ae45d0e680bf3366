"""Airline booking console: seat allocation, passenger rosters and bookings."""
from .bank import PaymentAuthority
from .config import Settings
from .errors import (
    BookingError,
    BookingNotFound,
    CatalogError,
    DuplicateIdentity,
    FlightUnavailable,
    InsufficientFunds,
    InvalidPassengerDetails,
    InvalidSeatFormat,
    PersistenceError,
    SeatUnavailable,
    SeatUnknown,
    UserCancelled,
    VerificationFailed,
)
from .ledger import Ledger
from .models import Aircraft, BankAccount, Booking, Flight, Passenger, PassengerDraft
from .roster import Roster
from .seating import SeatMap
from .services import (
    AirlineState,
    BookingEngine,
    BookingReceipt,
    add_aircraft,
    add_flight,
    delete_aircraft,
    delete_flight,
    list_available_flights,
    load_state,
    rebuild_seat_state_from_bookings,
    save_state,
    search_flights,
)
from .cli import main as cli_main

__all__ = [
    "Aircraft",
    "AirlineState",
    "BankAccount",
    "Booking",
    "BookingEngine",
    "BookingError",
    "BookingNotFound",
    "BookingReceipt",
    "CatalogError",
    "DuplicateIdentity",
    "Flight",
    "FlightUnavailable",
    "InsufficientFunds",
    "InvalidPassengerDetails",
    "InvalidSeatFormat",
    "Ledger",
    "Passenger",
    "PassengerDraft",
    "PaymentAuthority",
    "PersistenceError",
    "Roster",
    "SeatMap",
    "SeatUnavailable",
    "SeatUnknown",
    "Settings",
    "UserCancelled",
    "VerificationFailed",
    "add_aircraft",
    "add_flight",
    "cli_main",
    "delete_aircraft",
    "delete_flight",
    "list_available_flights",
    "load_state",
    "rebuild_seat_state_from_bookings",
    "save_state",
    "search_flights",
]
