"""
Blob request signer.

Issues time-limited, pre-authorized requests (service SAS) that read, create
or delete a single blob without handing out the account key. Each call reads
the clock once, signs once and returns a fresh immutable request.

Author: blobsigner contributors
"""

import logging
from datetime import timedelta
from typing import Callable, Optional, Union
from urllib.parse import quote

from blobsigner.auth.exceptions import MissingArgumentError, UnresolvableContentLengthError
from blobsigner.auth.sharedkey import (
    CredentialsProvider,
    SharedKeyCredentials,
    SharedKeyLiteAuthentication,
    StringSigner,
)
from blobsigner.blob.canonicalizer import (
    API_VERSION,
    SIGNED_RESOURCE_BLOB,
    CanonicalForm,
    canonicalized_resource,
)
from blobsigner.blob.models import Blob, BlobOperation, GetOptions, SignedRequest, SignOptions
from blobsigner.blob.options import GetOptionsTranslator
from blobsigner.core.config_manager import DEFAULT_EXPIRY_SECONDS, SignerConfig
from blobsigner.core.date_service import DateService, SystemTimestampProvider
from blobsigner.core.logging_config import log_with_context

logger = logging.getLogger(__name__)

STORAGE_URL_TEMPLATE = "https://{identity}.blob.core.windows.net/"

BLOB_TYPE_HEADER = "x-ms-blob-type"
BLOCK_BLOB = "BlockBlob"

RESERVED_HEADERS = frozenset({"date", "content-length", BLOB_TYPE_HEADER})


def _require(value, argument: str):
    if value is None or (isinstance(value, str) and not value):
        raise MissingArgumentError(argument)
    return value


class BlobRequestSigner:
    """
    Signs read, write and delete requests for single blobs.

    The signer holds only values fixed at construction and is safe to share
    between threads, provided the timestamp provider and the authentication
    primitive are.

    Example:
        signer = BlobRequestSigner.from_config(config)
        request = signer.sign_read("mycontainer", "myblob.txt", ttl_seconds=60)
        requests.get(request.url, headers=request.headers)
    """

    def __init__(
        self,
        identity: str,
        auth: StringSigner,
        timestamp_provider: Callable[[], str],
        date_service: DateService,
        options_translator: GetOptionsTranslator,
        default_ttl_seconds: int = DEFAULT_EXPIRY_SECONDS
    ):
        """
        Initialize the signer.

        Args:
            identity: Storage account name
            auth: Authentication primitive producing the ``sig`` value
            timestamp_provider: Callable returning the current time as RFC-1123
            date_service: RFC-1123 parser and ISO-8601 formatter
            options_translator: Converts GetOptions to request headers
            default_ttl_seconds: Lifetime used when a call gives no TTL

        Raises:
            MissingArgumentError: If a collaborator is absent
        """
        self.identity = _require(identity, "identity")
        self.auth = _require(auth, "auth")
        self.timestamp_provider = _require(timestamp_provider, "timestamp_provider")
        self.date_service = _require(date_service, "date_service")
        self.options_translator = _require(options_translator, "options_translator")
        if default_ttl_seconds is None or default_ttl_seconds < 0:
            raise ValueError("default_ttl_seconds must be a non-negative integer")
        self.default_ttl_seconds = default_ttl_seconds
        self.storage_url = STORAGE_URL_TEMPLATE.format(identity=identity)
        self.api_version = API_VERSION

    @classmethod
    def from_credentials(
        cls,
        credentials: Union[SharedKeyCredentials, CredentialsProvider],
        timestamp_provider: Optional[Callable[[], str]] = None,
        date_service: Optional[DateService] = None,
        default_ttl_seconds: int = DEFAULT_EXPIRY_SECONDS
    ) -> "BlobRequestSigner":
        """Build a Shared Key Lite signer from account credentials."""
        if isinstance(credentials, CredentialsProvider):
            credentials = credentials.get()
        _require(credentials, "credentials")
        date_service = date_service or DateService()
        return cls(
            identity=credentials.account_name,
            auth=SharedKeyLiteAuthentication(credentials),
            timestamp_provider=timestamp_provider or SystemTimestampProvider(date_service),
            date_service=date_service,
            options_translator=GetOptionsTranslator(date_service),
            default_ttl_seconds=default_ttl_seconds,
        )

    @classmethod
    def from_config(
        cls,
        config: SignerConfig,
        timestamp_provider: Optional[Callable[[], str]] = None
    ) -> "BlobRequestSigner":
        """Build a signer from loaded configuration."""
        _require(config, "config")
        credentials = SharedKeyCredentials(
            account_name=config.account_name,
            account_key=config.account_key,
        )
        return cls.from_credentials(
            credentials,
            timestamp_provider=timestamp_provider,
            default_ttl_seconds=config.default_ttl_seconds,
        )

    def sign_read(
        self,
        container: str,
        name: str,
        ttl_seconds: Optional[int] = None
    ) -> SignedRequest:
        """Sign a GET of one blob."""
        return self.sign(
            BlobOperation.READ, container, name,
            SignOptions(ttl_seconds=ttl_seconds)
        )

    def sign_read_with_options(
        self,
        container: str,
        name: str,
        get_options: GetOptions
    ) -> SignedRequest:
        """Sign a GET of one blob carrying range and conditional headers."""
        _require(container, "container")
        _require(name, "name")
        headers = self.options_translator.translate(_require(get_options, "options"))
        return self.sign(
            BlobOperation.READ, container, name,
            SignOptions(headers=headers)
        )

    def sign_write(
        self,
        container: str,
        name: str,
        blob: Blob,
        ttl_seconds: Optional[int] = None
    ) -> SignedRequest:
        """
        Sign a PUT creating or overwriting a block blob.

        Raises:
            MissingArgumentError: If container, name or blob is absent
            UnresolvableContentLengthError: If the blob's size is unknown
        """
        _require(container, "container")
        _require(name, "name")
        _require(blob, "blob")
        content_length = blob.resolve_content_length()
        if content_length is None:
            raise UnresolvableContentLengthError(blob.name)
        return self.sign(
            BlobOperation.WRITE, container, name,
            SignOptions(ttl_seconds=ttl_seconds, content_length=content_length)
        )

    def sign_delete(
        self,
        container: str,
        name: str,
        ttl_seconds: Optional[int] = None
    ) -> SignedRequest:
        """Sign a DELETE of one blob."""
        return self.sign(
            BlobOperation.DELETE, container, name,
            SignOptions(ttl_seconds=ttl_seconds)
        )

    def sign(
        self,
        operation: BlobOperation,
        container: str,
        name: str,
        options: Optional[SignOptions] = None
    ) -> SignedRequest:
        """
        Sign one blob operation.

        Args:
            operation: Operation to authorize
            container: Container name
            name: Blob name
            options: TTL, content length and extra headers

        Returns:
            Signed request with ``sv``, ``se``, ``sr``, ``sp`` and ``sig``

        Raises:
            MissingArgumentError: If container or name is absent
            ValueError: If operation is not a BlobOperation
        """
        _require(operation, "operation")
        _require(container, "container")
        _require(name, "name")
        operation = BlobOperation(operation)
        options = options or SignOptions()
        ttl_seconds = self.default_ttl_seconds if options.ttl_seconds is None else options.ttl_seconds

        # Header and expiry come from the same text
        now_string = self.timestamp_provider()
        now = self.date_service.rfc1123_date_parse(now_string)
        expiration = now + timedelta(seconds=ttl_seconds)
        iso8601 = self.date_service.iso8601_seconds_date_format(expiration)

        permission = operation.permission
        resource = canonicalized_resource(self.identity, container, name)
        string_to_sign = CanonicalForm(
            permission=permission,
            expiry=iso8601,
            resource=resource,
            api_version=self.api_version,
        ).to_string()
        signature = self.auth.calculate_signature(string_to_sign)

        # Extra headers never replace the signed Date or the declared length
        headers = {
            key: value for key, value in options.headers.items()
            if key.lower() not in RESERVED_HEADERS
        }
        headers["Date"] = now_string
        if options.content_length is not None:
            headers["Content-Length"] = str(options.content_length)
        if operation is BlobOperation.WRITE:
            headers[BLOB_TYPE_HEADER] = BLOCK_BLOB

        query_params = (
            ("sv", self.api_version),
            ("se", iso8601),
            ("sr", SIGNED_RESOURCE_BLOB),
            ("sp", permission),
            ("sig", signature),
        )

        log_with_context(
            logger, logging.DEBUG, f"Signed {operation.http_method} request for {resource}",
            resource=resource, permission=permission, expiry=iso8601
        )

        return SignedRequest(
            method=operation.http_method,
            endpoint=self._endpoint(container, name),
            headers=headers,
            query_params=query_params,
        )

    def _endpoint(self, container: str, name: str) -> str:
        # '/' in blob names marks virtual directories and stays unescaped
        return f"{self.storage_url}{quote(container, safe='')}/{quote(name, safe='/')}"
