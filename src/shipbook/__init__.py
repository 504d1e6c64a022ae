"""
Shipbook core: sender and receiver contact directories derived from bookings.

- domain: BookingRecord, Contact, errors. No outer dependencies.
- application: aggregate(), directory queries, ContactService, BookingSource port.
- infrastructure: adapters (InMemoryBookingSource, HttpBookingSource), phone normalization, settings.
"""

from shipbook.application import (
    BookingSource,
    BookingSummary,
    ContactDetail,
    ContactDirectories,
    ContactService,
    DirectoryStats,
    aggregate,
    filter_by_text,
    recent_bookings,
    select_contact,
)
from shipbook.domain import (
    BookingRecord,
    BookingSourceError,
    Contact,
    ContactRole,
    InvalidRecordError,
)
from shipbook.infrastructure import HttpBookingSource, InMemoryBookingSource

__all__ = [
    "BookingRecord",
    "BookingSource",
    "BookingSourceError",
    "BookingSummary",
    "Contact",
    "ContactDetail",
    "ContactDirectories",
    "ContactRole",
    "ContactService",
    "DirectoryStats",
    "HttpBookingSource",
    "InMemoryBookingSource",
    "InvalidRecordError",
    "aggregate",
    "filter_by_text",
    "recent_bookings",
    "select_contact",
]
