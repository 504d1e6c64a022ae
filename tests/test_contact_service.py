"""Unit tests for ContactService. No network; in-memory booking source only."""

from decimal import Decimal

import pytest

from shipbook.application import ContactService
from shipbook.domain import BookingRecord, BookingSourceError, ContactRole
from shipbook.infrastructure import InMemoryBookingSource, phone_normalizer

BOOKINGS = [
    {
        "senderName": "Alice",
        "senderPhone": "+12025551111",
        "receiverName": "Bob",
        "receiverPhone": "+12025552222",
        "totalAmount": 100,
        "createdAt": "2024-02-01T08:00:00Z",
        "trackingNumber": "TRK1",
    },
    {
        "senderName": "Alice",
        "senderPhone": "+12025551111",
        "receiverName": "Carol",
        "totalAmount": 40,
        "createdAt": "2024-02-03T08:00:00Z",
        "trackingNumber": "TRK2",
    },
]


def _service(bookings=BOOKINGS) -> ContactService:
    return ContactService(
        InMemoryBookingSource(bookings), normalize_phone=phone_normalizer("US")
    )


class _FailingSource:
    def __init__(self) -> None:
        self.calls = 0

    def list_bookings(self) -> list[BookingRecord]:
        self.calls += 1
        raise BookingSourceError("Failed to fetch bookings")


def test_list_contacts_aggregates_on_first_use() -> None:
    service = _service()
    senders = service.list_contacts(ContactRole.SENDER)
    assert len(senders) == 1
    assert senders[0].name == "Alice"
    assert senders[0].booking_count == 2

    receivers = service.list_contacts(ContactRole.RECEIVER)
    assert [r.name for r in receivers] == ["Bob", "Carol"]


def test_search_case_insensitive() -> None:
    service = _service()
    assert len(service.list_contacts(ContactRole.RECEIVER, "carol")) == 1
    assert len(service.list_contacts(ContactRole.RECEIVER, "CAROL")) == 1
    assert service.list_contacts(ContactRole.RECEIVER, "nonexistent") == []


def test_get_contact_returns_detail_with_recent_bookings() -> None:
    service = _service()
    detail = service.get_contact(ContactRole.SENDER, "Alice", "+12025551111")
    assert detail is not None
    assert detail.contact.total_amount == Decimal(140)
    assert [b.extra_fields["trackingNumber"] for b in detail.recent_bookings] == ["TRK1", "TRK2"]

    limited = service.get_contact(ContactRole.SENDER, "Alice", "+12025551111", limit=1)
    assert len(limited.recent_bookings) == 1


def test_get_contact_not_found() -> None:
    service = _service()
    assert service.get_contact(ContactRole.SENDER, "Bob", "+12025552222") is None


def test_stats_and_summary() -> None:
    service = _service()
    stats = service.stats(ContactRole.RECEIVER)
    assert stats.total_contacts == 2
    assert stats.total_revenue == Decimal(140)
    assert stats.average_revenue_per_contact == Decimal(70)

    summary = service.summary()
    assert summary.total_senders == 1
    assert summary.total_receivers == 2
    assert summary.total_bookings == 2
    assert summary.total_revenue == Decimal(140)


def test_refresh_rebuilds_from_scratch() -> None:
    source = InMemoryBookingSource(BOOKINGS)
    service = ContactService(source)
    assert service.summary().total_bookings == 2

    source.replace([{"senderName": "Dave", "createdAt": "2024-03-01T00:00:00Z"}])
    # Snapshot is kept until refresh.
    assert service.summary().total_bookings == 2

    directories = service.refresh()
    assert [c.name for c in directories.senders] == ["Dave"]
    assert directories.receivers == []
    assert service.summary().total_bookings == 1


def test_empty_source() -> None:
    service = _service([])
    assert service.list_contacts(ContactRole.SENDER) == []
    assert service.summary().total_revenue == Decimal(0)


def test_source_error_propagates() -> None:
    service = ContactService(_FailingSource())
    with pytest.raises(BookingSourceError):
        service.list_contacts(ContactRole.SENDER)


def test_failed_refresh_keeps_previous_snapshot() -> None:
    source = InMemoryBookingSource(BOOKINGS)
    service = ContactService(source)
    service.refresh()

    failing = _FailingSource()
    service._source = failing
    with pytest.raises(BookingSourceError):
        service.refresh()
    assert failing.calls == 1
    assert service.summary().total_bookings == 2


def test_possible_duplicates_uses_normalizer() -> None:
    bookings = [
        {"receiverName": "Bob", "receiverPhone": "+1 202 555 2222", "createdAt": "2024-01-01T00:00:00Z"},
        {"receiverName": "Bob", "receiverPhone": "(202) 555-2222", "createdAt": "2024-01-02T00:00:00Z"},
    ]
    groups = _service(bookings).possible_duplicates(ContactRole.RECEIVER)
    assert len(groups) == 1
    assert groups[0].normalized_phone == "+12025552222"


def test_possible_duplicates_without_normalizer_is_empty() -> None:
    service = ContactService(InMemoryBookingSource(BOOKINGS))
    assert service.possible_duplicates(ContactRole.SENDER) == []
