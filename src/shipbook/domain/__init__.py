"""Domain layer: booking records, contacts and errors. No dependencies on outer layers."""

from shipbook.domain.entities import BookingRecord, Contact, ContactRole
from shipbook.domain.errors import BookingSourceError, InvalidRecordError, ShipbookError

__all__ = [
    "BookingRecord",
    "BookingSourceError",
    "Contact",
    "ContactRole",
    "InvalidRecordError",
    "ShipbookError",
]
