"""In-memory implementation of BookingSource (no network)."""

from collections.abc import Iterable
from typing import Any

from shipbook.domain import BookingRecord


class InMemoryBookingSource:
    """Holds a fixed booking list. Raw payloads are validated when they are added."""

    def __init__(self, bookings: Iterable[BookingRecord | dict[str, Any]] = ()) -> None:
        self._bookings: list[BookingRecord] = []
        self.replace(bookings)

    def replace(self, bookings: Iterable[BookingRecord | dict[str, Any]]) -> None:
        """Swap in a new booking list in one step."""
        self._bookings = [
            b if isinstance(b, BookingRecord) else BookingRecord.from_dict(b) for b in bookings
        ]

    def list_bookings(self) -> list[BookingRecord]:
        return list(self._bookings)
