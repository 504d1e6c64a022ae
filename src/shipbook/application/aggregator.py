"""
Contact aggregation.

Turns a flat booking list into sender and receiver directories in a single
ordered pass. Contacts are grouped on the exact (name, phone) pair; email, GST
number and primary city come from the first booking seen for a contact.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from shipbook.application.dto import ContactDirectories
from shipbook.domain import BookingRecord, Contact, ContactRole

logger = logging.getLogger(__name__)


@dataclass
class _ContactWorkingSet:
    name: str
    phone: str
    last_booking_at: datetime
    email: str | None = None
    gst_number: str | None = None
    primary_city: str | None = None
    booking_count: int = 0
    total_amount: Decimal = Decimal(0)
    bookings: list[BookingRecord] = field(default_factory=list)

    def add(self, booking: BookingRecord) -> None:
        self.booking_count += 1
        self.total_amount += booking.amount
        self.bookings.append(booking)
        if booking.created_at > self.last_booking_at:
            self.last_booking_at = booking.created_at

    def freeze(self, role: ContactRole) -> Contact:
        return Contact(
            name=self.name,
            phone=self.phone,
            role=role,
            booking_count=self.booking_count,
            total_amount=self.total_amount,
            last_booking_at=self.last_booking_at,
            bookings=tuple(self.bookings),
            email=self.email,
            gst_number=self.gst_number,
            primary_city=self.primary_city,
        )


def _side(booking: BookingRecord, role: ContactRole) -> tuple[str | None, ...]:
    """(name, phone, email, gst, primary city) for one side of a booking."""
    if role is ContactRole.SENDER:
        return (
            booking.sender_name,
            booking.sender_phone,
            booking.sender_email,
            booking.sender_gst_number,
            booking.pickup_city or booking.pickup_address,
        )
    return (
        booking.receiver_name,
        booking.receiver_phone,
        booking.receiver_email,
        booking.receiver_gst_number,
        booking.delivery_city or booking.delivery_address,
    )


def _record(
    contacts: dict[tuple[str, str], _ContactWorkingSet],
    booking: BookingRecord,
    role: ContactRole,
) -> None:
    name, phone, email, gst_number, city = _side(booking, role)
    if not name:
        return
    phone = phone or ""
    working = contacts.get((name, phone))
    if working is None:
        working = _ContactWorkingSet(
            name=name,
            phone=phone,
            last_booking_at=booking.created_at,
            email=email,
            gst_number=gst_number,
            primary_city=city,
        )
        contacts[(name, phone)] = working
    working.add(booking)


def _to_directory(
    contacts: dict[tuple[str, str], _ContactWorkingSet], role: ContactRole
) -> list[Contact]:
    # sorted() is stable and dicts keep insertion order, so ties stay in first-appearance order.
    return sorted(
        (working.freeze(role) for working in contacts.values()),
        key=lambda contact: -contact.booking_count,
    )


def aggregate(bookings: Iterable[BookingRecord]) -> ContactDirectories:
    """Build sender and receiver directories from bookings.

    A booking without a sender name (or receiver name) is skipped on that side
    only. Absent amounts count as zero. The input is not modified.
    """
    senders: dict[tuple[str, str], _ContactWorkingSet] = {}
    receivers: dict[tuple[str, str], _ContactWorkingSet] = {}
    count = 0
    for booking in bookings:
        count += 1
        _record(senders, booking, ContactRole.SENDER)
        _record(receivers, booking, ContactRole.RECEIVER)
    logger.debug(
        "Aggregated %d bookings into %d senders and %d receivers",
        count,
        len(senders),
        len(receivers),
    )
    return ContactDirectories(
        senders=_to_directory(senders, ContactRole.SENDER),
        receivers=_to_directory(receivers, ContactRole.RECEIVER),
    )
