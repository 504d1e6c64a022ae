"""Contact directories for one booking source: refresh, list, search and detail."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from shipbook.application.aggregator import aggregate
from shipbook.application.directory import (
    RECENT_BOOKINGS_LIMIT,
    booking_summary,
    directory_stats,
    filter_by_text,
    find_possible_duplicates,
    recent_bookings,
    select_contact,
)
from shipbook.application.dto import (
    BookingSummary,
    ContactDirectories,
    DirectoryStats,
    DuplicateGroup,
)
from shipbook.application.ports import BookingSource
from shipbook.domain import BookingRecord, Contact, ContactRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    bookings: list[BookingRecord]
    directories: ContactDirectories


@dataclass(frozen=True)
class ContactDetail:
    contact: Contact
    recent_bookings: list[BookingRecord]


class ContactService:
    """Fetch bookings -> aggregate -> answer queries. One snapshot per refresh."""

    def __init__(
        self,
        source: BookingSource,
        *,
        normalize_phone: Callable[[str], str | None] | None = None,
    ) -> None:
        self._source = source
        self._normalize_phone = normalize_phone
        self._snapshot: _Snapshot | None = None

    def refresh(self) -> ContactDirectories:
        """Fetch the booking list and rebuild both directories from scratch.

        The new snapshot replaces the old one only once it is fully built.
        BookingSourceError propagates and leaves the previous snapshot in place.
        """
        bookings = list(self._source.list_bookings())
        directories = aggregate(bookings)
        self._snapshot = _Snapshot(bookings=bookings, directories=directories)
        logger.info(
            "Contacts refreshed: %d bookings, %d senders, %d receivers",
            len(bookings),
            len(directories.senders),
            len(directories.receivers),
        )
        return directories

    def _current(self) -> _Snapshot:
        if self._snapshot is None:
            self.refresh()
        return self._snapshot

    def directories(self) -> ContactDirectories:
        return self._current().directories

    def list_contacts(self, role: ContactRole, query: str = "") -> list[Contact]:
        """Directory for role, filtered by query (empty query returns everything)."""
        return filter_by_text(self._current().directories.for_role(role), query)

    def get_contact(
        self,
        role: ContactRole,
        name: str,
        phone: str | None,
        *,
        limit: int = RECENT_BOOKINGS_LIMIT,
    ) -> ContactDetail | None:
        """Return the contact with its booking history slice, or None if not found."""
        contact = select_contact(self._current().directories.for_role(role), name, phone)
        if contact is None:
            return None
        return ContactDetail(contact=contact, recent_bookings=recent_bookings(contact, limit))

    def stats(self, role: ContactRole) -> DirectoryStats:
        return directory_stats(self._current().directories.for_role(role))

    def summary(self) -> BookingSummary:
        snapshot = self._current()
        return booking_summary(snapshot.bookings, snapshot.directories)

    def possible_duplicates(self, role: ContactRole) -> list[DuplicateGroup]:
        """Contacts of role that share a normalized phone. Empty without a normalizer."""
        if self._normalize_phone is None:
            return []
        return find_possible_duplicates(
            self._current().directories.for_role(role), self._normalize_phone
        )
