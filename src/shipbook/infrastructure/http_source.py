"""BookingSource that reads the booking list from the booking service's REST API."""

import json
import logging
import urllib.error
import urllib.request
from collections.abc import Callable
from typing import Any

from shipbook.domain import BookingRecord, BookingSourceError

logger = logging.getLogger(__name__)

BOOKINGS_PATH = "/api/bookings"
DEFAULT_TIMEOUT = 10.0


class HttpBookingSource:
    """GET <base_url>/api/bookings and validate every row into a BookingRecord.

    Any transport failure, non-2xx status or non-array payload raises
    BookingSourceError. Nothing is retried. Rows that fail validation raise
    InvalidRecordError.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        cookie: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        urlopen: Callable[..., Any] = urllib.request.urlopen,
    ) -> None:
        self._url = base_url.rstrip("/") + BOOKINGS_PATH
        self._token = token
        self._cookie = cookie
        self._timeout = timeout
        self._urlopen = urlopen

    def _request(self) -> urllib.request.Request:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        if self._cookie:
            headers["Cookie"] = self._cookie
        return urllib.request.Request(self._url, headers=headers, method="GET")

    def _fetch_payload(self) -> Any:
        try:
            with self._urlopen(self._request(), timeout=self._timeout) as r:
                status = getattr(r, "status", 200)
                if status < 200 or status >= 300:
                    raise BookingSourceError(f"Failed to fetch bookings: HTTP {status}")
                return json.loads(r.read().decode())
        except urllib.error.HTTPError as e:
            logger.warning("Booking service returned %s for %s", e.code, self._url)
            raise BookingSourceError(f"Failed to fetch bookings: HTTP {e.code}") from e
        except (urllib.error.URLError, OSError) as e:
            logger.warning("Booking service unreachable at %s: %s", self._url, e)
            raise BookingSourceError(f"Failed to fetch bookings: {e}") from e
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Booking service sent an unreadable body: %s", e)
            raise BookingSourceError("Failed to fetch bookings: invalid JSON") from e

    def list_bookings(self) -> list[BookingRecord]:
        payload = self._fetch_payload()
        if not isinstance(payload, list):
            raise BookingSourceError("Failed to fetch bookings: expected a JSON array")
        return [BookingRecord.from_dict(row) for row in payload]
