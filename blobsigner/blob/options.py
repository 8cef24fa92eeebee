"""
Translation of caller-facing get options into request headers.
"""

from typing import Dict, Optional

from blobsigner.auth.exceptions import MissingArgumentError
from blobsigner.blob.models import GetOptions
from blobsigner.core.date_service import DateService


def _quote_etag(etag: str) -> str:
    if etag == "*" or (etag.startswith('"') and etag.endswith('"')):
        return etag
    return f'"{etag}"'


def _format_range(start: Optional[int], end: Optional[int]) -> str:
    return f"{'' if start is None else start}-{'' if end is None else end}"


class GetOptionsTranslator:
    """Maps GetOptions to Range and conditional headers."""

    def __init__(self, date_service: Optional[DateService] = None):
        self.date_service = date_service or DateService()

    def translate(self, options: GetOptions) -> Dict[str, str]:
        """
        Build request headers for a read.

        Args:
            options: Requested byte ranges and preconditions

        Returns:
            Header map, empty when no option is set

        Raises:
            MissingArgumentError: If options is None
        """
        if options is None:
            raise MissingArgumentError("options")

        headers: Dict[str, str] = {}
        if options.ranges:
            headers["Range"] = "bytes=" + ",".join(
                _format_range(start, end) for start, end in options.ranges
            )
        if options.if_modified_since is not None:
            headers["If-Modified-Since"] = self.date_service.rfc1123_date_format(
                options.if_modified_since
            )
        if options.if_unmodified_since is not None:
            headers["If-Unmodified-Since"] = self.date_service.rfc1123_date_format(
                options.if_unmodified_since
            )
        if options.etag_match is not None:
            headers["If-Match"] = _quote_etag(options.etag_match)
        if options.etag_none_match is not None:
            headers["If-None-Match"] = _quote_etag(options.etag_none_match)
        return headers
