"""Infrastructure layer: concrete BookingSource implementations, phone normalization, settings."""

from shipbook.infrastructure.http_source import HttpBookingSource
from shipbook.infrastructure.memory_source import InMemoryBookingSource
from shipbook.infrastructure.phone import normalize_phone, phone_normalizer
from shipbook.infrastructure.settings import Settings, load_settings

__all__ = [
    "HttpBookingSource",
    "InMemoryBookingSource",
    "Settings",
    "load_settings",
    "normalize_phone",
    "phone_normalizer",
]
