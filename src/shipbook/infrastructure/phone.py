"""Phone number normalization to E.164, used to spot contacts that may be the same person."""

from collections.abc import Callable

import phonenumbers


def normalize_phone(raw: str, default_region: str | None = None) -> str | None:
    """Parse and return E.164 form of the number, or None if invalid.

    default_region applies to numbers written without a leading + (e.g.
    "98765 43210" with default_region "IN"). It is ignored when the number
    carries its own country code.
    """
    if not raw or not str(raw).strip():
        return None
    raw = str(raw).strip()
    try:
        parsed = phonenumbers.parse(raw, default_region)
    except phonenumbers.NumberParseException:
        return None
    if not phonenumbers.is_valid_number(parsed):
        return None
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


def phone_normalizer(default_region: str | None) -> Callable[[str], str | None]:
    """Bind default_region so the result can be handed to ContactService."""

    def _normalize(raw: str) -> str | None:
        return normalize_phone(raw, default_region=default_region)

    return _normalize
