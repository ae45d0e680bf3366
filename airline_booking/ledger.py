"""Global ledger of active bookings."""
from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, Iterator, List, Optional

from .models import Booking

logger = logging.getLogger(__name__)

BOOKING_ID_PREFIX = "B"
BOOKING_ID_BASE = 1000

_BOOKING_ID_PATTERN = re.compile(rf"^{BOOKING_ID_PREFIX}(\d+)$")


class Ledger:
    """Active bookings keyed by booking id, in creation order.

    Booking ids start at ``B1000`` and never repeat: the sequence is the
    larger of ``len(ledger) + 1000`` and one past the highest id ever seen,
    so cancelling and rebooking cannot hand out an id that is still live or
    was issued before. ``next_sequence`` carries that high-water mark across
    a save and reload, since cancelled ids no longer appear in the records.
    """

    def __init__(
        self, bookings: Iterable[Booking] = (), *, next_sequence: int = BOOKING_ID_BASE
    ) -> None:
        self._bookings: Dict[str, Booking] = {}
        self._next_sequence = max(BOOKING_ID_BASE, next_sequence)
        for booking in bookings:
            self.add(booking)

    def _observe(self, booking_id: str) -> None:
        match = _BOOKING_ID_PATTERN.match(booking_id)
        if match:
            self._next_sequence = max(self._next_sequence, int(match.group(1)) + 1)

    @property
    def next_sequence(self) -> int:
        return max(self._next_sequence, len(self._bookings) + BOOKING_ID_BASE)

    def next_booking_id(self) -> str:
        return f"{BOOKING_ID_PREFIX}{self.next_sequence}"

    def add(self, booking: Booking) -> Booking:
        """Insert an existing record, e.g. one read back from disk."""

        if booking.booking_id in self._bookings:
            raise ValueError(f"duplicate booking id {booking.booking_id}")
        self._bookings[booking.booking_id] = booking
        self._observe(booking.booking_id)
        return booking

    def create(
        self,
        flight_no: str,
        passenger_id: str,
        seat_number: str,
        *,
        booked_at: int,
        is_paid: bool = True,
    ) -> Booking:
        booking = Booking(
            booking_id=self.next_booking_id(),
            flight_no=flight_no,
            passenger_id=passenger_id,
            seat_number=seat_number,
            booked_at=booked_at,
            is_paid=is_paid,
        )
        self.add(booking)
        logger.debug("Ledger created %s for %s on %s", booking.booking_id, passenger_id, flight_no)
        return booking

    def cancel(self, booking_id: str) -> Optional[Booking]:
        return self._bookings.pop(booking_id, None)

    def purge_flight(self, flight_no: str) -> List[Booking]:
        removed = self.find_by_flight_id(flight_no)
        for booking in removed:
            del self._bookings[booking.booking_id]
        return removed

    def find_by_booking_id(self, booking_id: str) -> Optional[Booking]:
        return self._bookings.get(booking_id)

    def find_by_passenger_id(self, passenger_id: str) -> List[Booking]:
        return [b for b in self._bookings.values() if b.passenger_id == passenger_id]

    def find_by_flight_id(self, flight_no: str) -> List[Booking]:
        return [b for b in self._bookings.values() if b.flight_no == flight_no]

    def find_by_seat(self, flight_no: str, seat_number: str) -> List[Booking]:
        return [
            b
            for b in self._bookings.values()
            if b.flight_no == flight_no and b.seat_number == seat_number
        ]

    def has_identity_on_flight(
        self, passenger_id: str, flight_no: str, *, exclude: Optional[str] = None
    ) -> bool:
        return any(
            b.passenger_id == passenger_id and b.flight_no == flight_no and b.booking_id != exclude
            for b in self._bookings.values()
        )

    def __iter__(self) -> Iterator[Booking]:
        return iter(list(self._bookings.values()))

    def __len__(self) -> int:
        return len(self._bookings)

    def __contains__(self, booking_id: object) -> bool:
        return booking_id in self._bookings
