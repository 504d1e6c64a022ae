"""Read-only queries over a contact directory: search, lookup, booking history and totals."""

from collections.abc import Callable, Iterable
from decimal import Decimal

from shipbook.application.dto import (
    BookingSummary,
    ContactDirectories,
    DirectoryStats,
    DuplicateGroup,
)
from shipbook.domain import BookingRecord, Contact

RECENT_BOOKINGS_LIMIT = 5


def filter_by_text(directory: list[Contact], query: str) -> list[Contact]:
    """Return contacts whose name or email contains query (case-insensitive) or whose phone contains it.

    An empty query returns the directory itself.
    """
    if not query:
        return directory
    needle = query.lower()
    return [
        contact
        for contact in directory
        if needle in contact.name.lower()
        or query in contact.phone
        or (contact.email and needle in contact.email.lower())
    ]


def select_contact(directory: Iterable[Contact], name: str, phone: str | None) -> Contact | None:
    """Return the contact with exactly this name and phone, or None."""
    phone = phone or ""
    for contact in directory:
        if contact.name == name and contact.phone == phone:
            return contact
    return None


def recent_bookings(contact: Contact, limit: int = RECENT_BOOKINGS_LIMIT) -> list[BookingRecord]:
    """First `limit` bookings in the order they were encountered during aggregation."""
    return list(contact.bookings[: max(limit, 0)])


def latest_bookings(contact: Contact, limit: int = RECENT_BOOKINGS_LIMIT) -> list[BookingRecord]:
    """Newest `limit` bookings by created_at; equal timestamps keep encounter order."""
    ordered = sorted(contact.bookings, key=lambda b: b.created_at, reverse=True)
    return ordered[: max(limit, 0)]


def directory_stats(directory: list[Contact]) -> DirectoryStats:
    total_contacts = len(directory)
    total_revenue = sum((c.total_amount for c in directory), Decimal(0))
    average = total_revenue / total_contacts if total_contacts else Decimal(0)
    return DirectoryStats(
        total_contacts=total_contacts,
        total_revenue=total_revenue,
        average_revenue_per_contact=average,
    )


def booking_summary(
    bookings: list[BookingRecord], directories: ContactDirectories
) -> BookingSummary:
    """Page-level totals. Revenue is summed over bookings, so a booking counts once."""
    return BookingSummary(
        total_senders=len(directories.senders),
        total_receivers=len(directories.receivers),
        total_bookings=len(bookings),
        total_revenue=sum((b.amount for b in bookings), Decimal(0)),
    )


def find_possible_duplicates(
    directory: list[Contact], normalize: Callable[[str], str | None]
) -> list[DuplicateGroup]:
    """Group contacts whose phones normalize to the same value.

    Grouping keys are never merged; this only reports candidates. Contacts with
    a phone that does not normalize are left out.
    """
    groups: dict[str, list[Contact]] = {}
    for contact in directory:
        normalized = normalize(contact.phone) if contact.phone else None
        if normalized:
            groups.setdefault(normalized, []).append(contact)
    return [
        DuplicateGroup(normalized_phone=phone, contacts=contacts)
        for phone, contacts in groups.items()
        if len(contacts) > 1
    ]
