"""Application ports (interfaces). Implemented by infrastructure adapters."""

from typing import Protocol

from shipbook.domain import BookingRecord


class BookingSource(Protocol):
    """Supplies the full booking list of the current account."""

    def list_bookings(self) -> list[BookingRecord]:
        """Return every booking in the order the booking service lists them.

        Raises BookingSourceError when the list cannot be fetched.
        """
        ...
