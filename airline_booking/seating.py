"""Seat grid bookkeeping for a single flight."""
from __future__ import annotations

from typing import Dict, Iterator, List, Sequence, Tuple

from .errors import InvalidSeatFormat, SeatUnavailable, SeatUnknown

SEAT_COLUMNS: Sequence[str] = tuple("ABCDEFGHIJ")
SEAT_ROWS: Sequence[int] = tuple(range(1, 11))


def normalize_seat(seat_id: str) -> str:
    return seat_id.strip().upper()


def is_valid_format(seat_id: str) -> bool:
    """Return ``True`` for ids shaped like ``A1`` or ``j10``."""

    seat = normalize_seat(seat_id)
    return len(seat) >= 2 and seat[0].isalpha() and seat[1:].isdigit()


class SeatMap:
    """Mapping of seat id to occupancy for the fixed 10 x 10 grid.

    The grid is always generated with 100 seats, even when the aircraft
    declares a different capacity.
    """

    columns: Sequence[str] = SEAT_COLUMNS
    rows: Sequence[int] = SEAT_ROWS

    def __init__(self) -> None:
        self._occupied: Dict[str, bool] = {}
        self.reset()

    def reset(self) -> None:
        self._occupied = {
            f"{column}{row}": False for row in self.rows for column in self.columns
        }

    is_valid_format = staticmethod(is_valid_format)

    def exists(self, seat_id: str) -> bool:
        return normalize_seat(seat_id) in self._occupied

    def is_free(self, seat_id: str) -> bool:
        """Return whether ``seat_id`` is unoccupied.

        Raises :class:`SeatUnknown` for ids outside the grid; call
        :meth:`exists` first when a plain ``False`` is wanted.
        """

        seat = normalize_seat(seat_id)
        if seat not in self._occupied:
            raise SeatUnknown(f"Seat {seat} doesn't exist on this aircraft")
        return not self._occupied[seat]

    def reserve(self, seat_id: str) -> str:
        """Mark ``seat_id`` occupied and return its normalised form."""

        seat = normalize_seat(seat_id)
        if not is_valid_format(seat):
            raise InvalidSeatFormat(f"Invalid seat format '{seat_id}'. Use a format like A1 or B2")
        if seat not in self._occupied:
            raise SeatUnknown(f"Seat {seat} doesn't exist on this aircraft")
        if self._occupied[seat]:
            raise SeatUnavailable(f"Seat {seat} is already booked")
        self._occupied[seat] = True
        return seat

    def release(self, seat_id: str) -> bool:
        """Free ``seat_id``; releasing a free or unknown seat is a no-op."""

        seat = normalize_seat(seat_id)
        if not self._occupied.get(seat):
            return False
        self._occupied[seat] = False
        return True

    def occupied_count(self) -> int:
        return sum(1 for taken in self._occupied.values() if taken)

    def occupied_seats(self) -> List[str]:
        return [seat for seat, taken in self._occupied.items() if taken]

    def free_seats(self) -> List[str]:
        return [seat for seat, taken in self._occupied.items() if not taken]

    def iter_rows(self) -> Iterator[Tuple[int, List[bool]]]:
        for row in self.rows:
            yield row, [self._occupied[f"{column}{row}"] for column in self.columns]

    def __len__(self) -> int:
        return len(self._occupied)

    def __contains__(self, seat_id: object) -> bool:
        return isinstance(seat_id, str) and self.exists(seat_id)
