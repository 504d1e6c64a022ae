"""Result types returned by the aggregation and query use cases."""

from dataclasses import dataclass, field
from decimal import Decimal

from shipbook.domain import Contact, ContactRole


@dataclass(frozen=True)
class ContactDirectories:
    """Sender and receiver directories from one aggregation run, each ordered by booking count."""

    senders: list[Contact] = field(default_factory=list)
    receivers: list[Contact] = field(default_factory=list)

    def for_role(self, role: ContactRole) -> list[Contact]:
        return self.senders if role is ContactRole.SENDER else self.receivers


@dataclass(frozen=True)
class DirectoryStats:
    total_contacts: int
    total_revenue: Decimal
    average_revenue_per_contact: Decimal


@dataclass(frozen=True)
class BookingSummary:
    """Headline numbers for the contacts page: directory sizes plus booking totals."""

    total_senders: int
    total_receivers: int
    total_bookings: int
    total_revenue: Decimal


@dataclass(frozen=True)
class DuplicateGroup:
    """Contacts with distinct keys whose phones normalize to the same number."""

    normalized_phone: str
    contacts: list[Contact]
