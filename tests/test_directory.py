"""Tests for directory queries: text filter, lookup, booking slices, stats and duplicates."""

from decimal import Decimal

from shipbook.application import (
    aggregate,
    booking_summary,
    directory_stats,
    filter_by_text,
    find_possible_duplicates,
    latest_bookings,
    recent_bookings,
    select_contact,
)
from shipbook.domain import BookingRecord
from shipbook.infrastructure import phone_normalizer


def _booking(**fields) -> BookingRecord:
    fields.setdefault("createdAt", "2024-01-01T00:00:00Z")
    return BookingRecord.from_dict(fields)


def _senders():
    return aggregate(
        [
            _booking(senderName="Asha Traders", senderPhone="9876543210", senderEmail="ops@asha.in", totalAmount=300),
            _booking(senderName="Kumar Stores", senderPhone="9123456780", totalAmount=100),
            _booking(senderName="Asha Traders", senderPhone="9876543210", totalAmount=200),
            _booking(senderName="Bharat Logistics", senderPhone="9000000001", senderEmail="hello@BHARAT.com"),
        ]
    ).senders


def test_empty_query_returns_directory_unchanged() -> None:
    senders = _senders()
    assert filter_by_text(senders, "") is senders


def test_filter_matches_name_case_insensitively() -> None:
    result = filter_by_text(_senders(), "asha")
    assert [c.name for c in result] == ["Asha Traders"]


def test_filter_matches_phone_substring() -> None:
    result = filter_by_text(_senders(), "91234")
    assert [c.name for c in result] == ["Kumar Stores"]


def test_filter_matches_email_case_insensitively() -> None:
    result = filter_by_text(_senders(), "bharat.COM")
    assert [c.name for c in result] == ["Bharat Logistics"]


def test_filter_preserves_directory_order() -> None:
    senders = _senders()
    result = filter_by_text(senders, "9")
    assert result == senders


def test_filter_no_match() -> None:
    assert filter_by_text(_senders(), "nonexistent") == []


def test_select_contact_exact_key() -> None:
    senders = _senders()
    contact = select_contact(senders, "Kumar Stores", "9123456780")
    assert contact is not None
    assert contact.total_amount == Decimal(100)


def test_select_contact_miss_returns_none() -> None:
    senders = _senders()
    assert select_contact(senders, "Kumar Stores", "0000") is None
    assert select_contact(senders, "kumar stores", "9123456780") is None
    assert select_contact([], "A", "1") is None


def test_select_contact_blank_phone() -> None:
    senders = aggregate([_booking(senderName="Walk-in")]).senders
    assert select_contact(senders, "Walk-in", None) is senders[0]
    assert select_contact(senders, "Walk-in", "") is senders[0]


def _history_contact():
    bookings = [
        _booking(senderName="A", senderPhone="1", createdAt=f"2024-01-{day:02d}T00:00:00Z", trackingNumber=f"T{day}")
        for day in (3, 1, 7, 2, 9, 4, 8)
    ]
    return aggregate(bookings).senders[0]


def test_recent_bookings_takes_first_encountered() -> None:
    contact = _history_contact()
    tracking = [b.extra_fields["trackingNumber"] for b in recent_bookings(contact)]
    assert tracking == ["T3", "T1", "T7", "T2", "T9"]


def test_recent_bookings_limit() -> None:
    contact = _history_contact()
    assert len(recent_bookings(contact, 2)) == 2
    assert len(recent_bookings(contact, 50)) == 7
    assert recent_bookings(contact, 0) == []


def test_latest_bookings_sorted_newest_first() -> None:
    contact = _history_contact()
    tracking = [b.extra_fields["trackingNumber"] for b in latest_bookings(contact, 3)]
    assert tracking == ["T9", "T8", "T7"]


def test_directory_stats() -> None:
    stats = directory_stats(_senders())
    assert stats.total_contacts == 3
    assert stats.total_revenue == Decimal(600)
    assert stats.average_revenue_per_contact == Decimal(200)


def test_directory_stats_empty() -> None:
    stats = directory_stats([])
    assert stats.total_contacts == 0
    assert stats.total_revenue == Decimal(0)
    assert stats.average_revenue_per_contact == Decimal(0)


def test_booking_summary_counts_each_booking_once() -> None:
    bookings = [
        _booking(senderName="S", receiverName="R", totalAmount=100),
        _booking(senderName="S", totalAmount=50),
        _booking(totalAmount=25),
    ]
    summary = booking_summary(bookings, aggregate(bookings))
    assert summary.total_senders == 1
    assert summary.total_receivers == 1
    assert summary.total_bookings == 3
    assert summary.total_revenue == Decimal(175)


def test_possible_duplicates_groups_equivalent_phones() -> None:
    senders = aggregate(
        [
            _booking(senderName="Acme", senderPhone="+1 202 555 1234"),
            _booking(senderName="Acme", senderPhone="202 555 1234"),
            _booking(senderName="Other", senderPhone="not a phone"),
            _booking(senderName="Solo", senderPhone="+1 202 555 9999"),
        ]
    ).senders
    groups = find_possible_duplicates(senders, phone_normalizer("US"))
    assert len(groups) == 1
    assert groups[0].normalized_phone == "+12025551234"
    assert [c.phone for c in groups[0].contacts] == ["+1 202 555 1234", "202 555 1234"]
