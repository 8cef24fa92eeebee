"""
Date parsing and formatting for request signing.

The signer reads the current time as an RFC-1123 string and parses it back,
so the ``Date`` header and the signed expiry are derived from the same text.
"""

from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Callable, Optional

RFC1123_FORMAT = "%a, %d %b %Y %H:%M:%S GMT"
ISO8601_SECONDS_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class DateService:
    """Converts between datetimes and the wire formats used by Azure Storage."""

    def rfc1123_date_format(self, value: datetime) -> str:
        """Format a datetime as RFC-1123, e.g. ``Wed, 01 Jan 2020 00:00:00 GMT``."""
        return format_datetime(_as_utc(value), usegmt=True)

    def rfc1123_date_parse(self, value: str) -> datetime:
        """
        Parse an RFC-1123 date string.

        Args:
            value: Date string such as ``Wed, 01 Jan 2020 00:00:00 GMT``

        Returns:
            Timezone-aware UTC datetime

        Raises:
            ValueError: If the string is not RFC-1123
        """
        if not isinstance(value, str):
            raise ValueError(f"Invalid RFC-1123 date: {value!r}")
        return datetime.strptime(value.strip(), RFC1123_FORMAT).replace(tzinfo=timezone.utc)

    def iso8601_seconds_date_format(self, value: datetime) -> str:
        """Format a datetime as ISO-8601 UTC with second precision."""
        return _as_utc(value).strftime(ISO8601_SECONDS_FORMAT)


class SystemTimestampProvider:
    """
    Timestamp provider returning the current time as an RFC-1123 string.

    Args:
        date_service: Formatter for the returned string
        clock: Optional callable returning the current datetime
    """

    def __init__(
        self,
        date_service: Optional[DateService] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.date_service = date_service or DateService()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def __call__(self) -> str:
        return self.date_service.rfc1123_date_format(self._clock())
