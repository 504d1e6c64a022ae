"""Runtime settings read from the environment (.env is loaded by the entrypoint)."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from shipbook.infrastructure.http_source import DEFAULT_TIMEOUT

DEFAULT_PHONE_REGION = "IN"


@dataclass(frozen=True)
class Settings:
    bookings_url: str | None = None
    bookings_token: str | None = None
    bookings_cookie: str | None = None
    bookings_timeout: float = DEFAULT_TIMEOUT
    default_phone_region: str | None = DEFAULT_PHONE_REGION


def _clean(value: str | None) -> str | None:
    return (value or "").strip() or None


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from BOOKINGS_URL, BOOKINGS_TOKEN, BOOKINGS_COOKIE, BOOKINGS_TIMEOUT, DEFAULT_PHONE_REGION."""
    env = os.environ if environ is None else environ
    timeout_raw = _clean(env.get("BOOKINGS_TIMEOUT"))
    try:
        timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
    except ValueError as e:
        raise ValueError(f"BOOKINGS_TIMEOUT must be a number, got {timeout_raw!r}") from e
    region = _clean(env.get("DEFAULT_PHONE_REGION", DEFAULT_PHONE_REGION))
    return Settings(
        bookings_url=_clean(env.get("BOOKINGS_URL")),
        bookings_token=_clean(env.get("BOOKINGS_TOKEN")),
        bookings_cookie=_clean(env.get("BOOKINGS_COOKIE")),
        bookings_timeout=timeout,
        default_phone_region=region.upper() if region else None,
    )
