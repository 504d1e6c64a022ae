"""Application layer: aggregation, directory queries, ports and DTOs. Depends only on domain."""

from shipbook.application.aggregator import aggregate
from shipbook.application.contact_service import ContactDetail, ContactService
from shipbook.application.directory import (
    booking_summary,
    directory_stats,
    filter_by_text,
    find_possible_duplicates,
    latest_bookings,
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

__all__ = [
    "BookingSource",
    "BookingSummary",
    "ContactDetail",
    "ContactDirectories",
    "ContactService",
    "DirectoryStats",
    "DuplicateGroup",
    "aggregate",
    "booking_summary",
    "directory_stats",
    "filter_by_text",
    "find_possible_duplicates",
    "latest_bookings",
    "recent_bookings",
    "select_contact",
]
