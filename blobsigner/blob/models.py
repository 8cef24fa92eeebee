"""
Blob SAS Models

Pydantic models for signing operations, caller-facing get options,
blobs to be written, and the signed request handed back to callers.
"""

from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BlobOperation(str, Enum):
    """Operations a blob SAS can authorize."""
    READ = "read"
    WRITE = "write"
    DELETE = "delete"

    @property
    def permission(self) -> str:
        """Single-letter signed permission (``sp``)."""
        return _PERMISSIONS[self]

    @property
    def http_method(self) -> str:
        """HTTP verb of the authorized request."""
        return _HTTP_METHODS[self]


_PERMISSIONS = {
    BlobOperation.READ: "r",
    BlobOperation.WRITE: "w",
    BlobOperation.DELETE: "d",
}

_HTTP_METHODS = {
    BlobOperation.READ: "GET",
    BlobOperation.WRITE: "PUT",
    BlobOperation.DELETE: "DELETE",
}


ByteRange = Tuple[Optional[int], Optional[int]]


def _check_range(start: Optional[int], end: Optional[int]) -> ByteRange:
    if start is None and end is None:
        raise ValueError("Byte range needs a start or an end")
    if start is not None and start < 0:
        raise ValueError(f"Range start must be non-negative, got {start}")
    if end is not None and end < 0:
        raise ValueError(f"Range end must be non-negative, got {end}")
    if start is not None and end is not None and end < start:
        raise ValueError(f"Range end {end} is before start {start}")
    return (start, end)


class GetOptions(BaseModel):
    """
    Caller-facing options for reading a blob.

    Byte ranges are inclusive ``(start, end)`` pairs. ``(start, None)`` reads
    from ``start`` to the end of the blob, ``(None, n)`` reads the last ``n``
    bytes. The builder methods return ``self`` so calls can be chained::

        GetOptions().range(0, 1023).if_none_match("0x8D")
    """

    ranges: List[ByteRange] = Field(default_factory=list)
    if_modified_since: Optional[datetime] = None
    if_unmodified_since: Optional[datetime] = None
    etag_match: Optional[str] = None
    etag_none_match: Optional[str] = None

    @field_validator("ranges")
    @classmethod
    def validate_ranges(cls, v: List[ByteRange]) -> List[ByteRange]:
        return [_check_range(start, end) for start, end in v]

    def range(self, start: int, end: int) -> "GetOptions":
        self.ranges.append(_check_range(start, end))
        return self

    def start_at(self, offset: int) -> "GetOptions":
        self.ranges.append(_check_range(offset, None))
        return self

    def tail(self, count: int) -> "GetOptions":
        self.ranges.append(_check_range(None, count))
        return self

    def modified_since(self, value: datetime) -> "GetOptions":
        self.if_modified_since = value
        return self

    def unmodified_since(self, value: datetime) -> "GetOptions":
        self.if_unmodified_since = value
        return self

    def if_match(self, etag: str) -> "GetOptions":
        self.etag_match = etag
        return self

    def if_none_match(self, etag: str) -> "GetOptions":
        self.etag_none_match = etag
        return self


class Blob(BaseModel):
    """
    A blob about to be written.

    The content length is the declared ``content_length`` when present,
    otherwise the size of ``payload``.
    """

    name: str
    content_length: Optional[int] = Field(default=None, ge=0)
    payload: Optional[bytes] = None

    def resolve_content_length(self) -> Optional[int]:
        if self.content_length is not None:
            return self.content_length
        if self.payload is not None:
            return len(self.payload)
        return None


class SignOptions(BaseModel):
    """Per-call signing parameters."""

    ttl_seconds: Optional[int] = Field(
        default=None,
        ge=0,
        description="Signature lifetime; None uses the signer default"
    )
    content_length: Optional[int] = Field(default=None, ge=0)
    headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra request headers, e.g. translated get options"
    )

    model_config = ConfigDict(frozen=True)


class SignedRequest(BaseModel):
    """
    A pre-authorized HTTP request ready for dispatch.

    ``query_params`` keeps insertion order; ``sig`` is always last.
    """

    method: str
    endpoint: str
    headers: Mapping[str, str]
    query_params: Tuple[Tuple[str, str], ...]

    model_config = ConfigDict(frozen=True)

    @field_validator("headers")
    @classmethod
    def freeze_headers(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(v))

    @property
    def query_string(self) -> str:
        return "&".join(
            f"{quote(key, safe='')}={quote(value, safe=':')}"
            for key, value in self.query_params
        )

    @property
    def url(self) -> str:
        return f"{self.endpoint}?{self.query_string}"

    def get_query_param(self, key: str) -> Optional[str]:
        for name, value in self.query_params:
            if name == key:
                return value
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "endpoint": self.endpoint,
            "url": self.url,
            "headers": dict(self.headers),
            "query_params": dict(self.query_params),
        }
