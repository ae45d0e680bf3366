"""Ordered per-flight passenger roster."""
from __future__ import annotations

from collections import OrderedDict
from typing import TYPE_CHECKING, Iterator, List, Optional

if TYPE_CHECKING:  # pragma: no cover - import for type hints only
    from .models import Passenger


class Roster:
    """Passengers currently holding a seat on one flight, keyed by government id.

    Iteration follows insertion order. Removed entries never reappear.
    """

    def __init__(self) -> None:
        self._entries: "OrderedDict[str, Passenger]" = OrderedDict()

    def add(self, passenger: Passenger) -> None:
        if passenger.government_id in self._entries:
            raise ValueError(f"passenger {passenger.government_id} already on roster")
        self._entries[passenger.government_id] = passenger

    def remove_by_identity(self, government_id: str) -> Optional[Passenger]:
        return self._entries.pop(government_id, None)

    def find(self, government_id: str) -> Optional[Passenger]:
        return self._entries.get(government_id)

    def replace(self, government_id: str, passenger: Passenger) -> bool:
        """Swap the entry for ``government_id`` without changing its position."""

        if government_id not in self._entries:
            return False
        if passenger.government_id != government_id and passenger.government_id in self._entries:
            raise ValueError(f"passenger {passenger.government_id} already on roster")
        self._entries = OrderedDict(
            (passenger.government_id, passenger) if key == government_id else (key, entry)
            for key, entry in self._entries.items()
        )
        return True

    def clear(self) -> None:
        self._entries.clear()

    def passengers(self) -> List[Passenger]:
        return list(self._entries.values())

    def __iter__(self) -> Iterator[Passenger]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, government_id: object) -> bool:
        return government_id in self._entries
