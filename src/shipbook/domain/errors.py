"""Exceptions raised by the shipbook core and its adapters."""


class ShipbookError(Exception):
    """Base class for shipbook errors."""


class InvalidRecordError(ShipbookError, ValueError):
    """A booking payload cannot be turned into a BookingRecord."""


class BookingSourceError(ShipbookError):
    """The booking list could not be fetched from its source."""
