"""Exceptions raised by the booking engine and its collaborators."""
from __future__ import annotations


class BookingError(RuntimeError):
    """Base class for recoverable booking failures reported to the operator."""


class FlightUnavailable(BookingError):
    """Raised when a flight does not exist or has no seats left."""


class DuplicateIdentity(BookingError):
    """Raised when a government id already holds a booking on the flight."""


class InvalidPassengerDetails(BookingError):
    """Raised when passenger fields fail their format checks."""


class SeatUnknown(BookingError):
    """Raised when a seat id is not part of the flight's seat grid."""


class InvalidSeatFormat(SeatUnknown):
    """Raised when a seat id is not shaped like ``A1``."""


class SeatUnavailable(BookingError):
    """Raised when the requested seat is already occupied."""


class InsufficientFunds(BookingError):
    """Raised when a prepaid balance cannot cover the fare."""


class UserCancelled(BookingError):
    """Raised when the passenger declines a pay-on-confirm booking."""


class BookingNotFound(BookingError):
    """Raised when no active booking carries the requested id."""


class VerificationFailed(BookingError):
    """Raised when the verifying passenger id does not own the booking."""


class CatalogError(ValueError):
    """Raised for invalid aircraft or flight catalog operations."""


class PersistenceError(RuntimeError):
    """Raised when the flat-file mirror cannot be read or written."""


__all__ = [
    "BookingError",
    "BookingNotFound",
    "CatalogError",
    "DuplicateIdentity",
    "FlightUnavailable",
    "InsufficientFunds",
    "InvalidPassengerDetails",
    "InvalidSeatFormat",
    "PersistenceError",
    "SeatUnavailable",
    "SeatUnknown",
    "UserCancelled",
    "VerificationFailed",
]
