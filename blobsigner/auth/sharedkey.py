"""
Shared Key Lite authentication primitive for Azure Blob Storage SAS.

Computes the ``sig`` value of a shared access signature:

    Signature = Base64(HMAC-SHA256(UTF8(StringToSign), Base64Decode(AccountKey)))

Reference: https://docs.microsoft.com/en-us/rest/api/storageservices/create-service-sas
"""

import base64
import binascii
import hashlib
import hmac
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from blobsigner.auth.exceptions import InvalidAccountKeyError, MissingArgumentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SharedKeyCredentials:
    """Credentials for SharedKey authentication."""
    
    account_name: str
    account_key: str  # Base64-encoded

    def __repr__(self) -> str:
        return f"SharedKeyCredentials(account_name={self.account_name!r}, account_key='***')"


class CredentialsProvider(ABC):
    """Supplies the account identity and key once, before first use."""

    @abstractmethod
    def get(self) -> SharedKeyCredentials:
        """Return the storage account credentials."""
        pass


class StaticCredentialsProvider(CredentialsProvider):
    """Credentials provider backed by fixed values."""

    def __init__(self, credentials: SharedKeyCredentials):
        if credentials is None:
            raise MissingArgumentError("credentials")
        self._credentials = credentials

    def get(self) -> SharedKeyCredentials:
        return self._credentials


class StringSigner(ABC):
    """
    Authentication primitive: signs a canonical string.

    Implementations must be deterministic for a fixed secret key and safe
    to call from multiple threads.
    """

    @abstractmethod
    def calculate_signature(self, string_to_sign: str) -> str:
        """
        Sign a canonical string.

        Args:
            string_to_sign: Canonical string-to-sign

        Returns:
            Opaque signature string
        """
        pass


class SharedKeyLiteAuthentication(StringSigner):
    """HMAC-SHA256 signer keyed with the decoded storage account key."""

    def __init__(self, credentials: SharedKeyCredentials):
        """
        Initialize the signer.

        Args:
            credentials: Storage account name and base64-encoded key

        Raises:
            MissingArgumentError: If credentials are absent
            InvalidAccountKeyError: If the key is not valid base64
        """
        if credentials is None:
            raise MissingArgumentError("credentials")
        self.account_name = credentials.account_name
        try:
            self._key_bytes = base64.b64decode(credentials.account_key, validate=True)
        except (binascii.Error, TypeError, ValueError) as exc:
            raise InvalidAccountKeyError() from exc
        if not self._key_bytes:
            raise InvalidAccountKeyError("Account key cannot be empty")

    def calculate_signature(self, string_to_sign: str) -> str:
        signature_bytes = hmac.new(
            self._key_bytes,
            string_to_sign.encode("utf-8"),
            hashlib.sha256
        ).digest()
        return base64.b64encode(signature_bytes).decode("utf-8")


def compute_signature(string_to_sign: str, account_key: str) -> str:
    """
    Compute an HMAC-SHA256 signature with a base64-encoded key.
    
    Args:
        string_to_sign: Canonical string to sign
        account_key: Base64-encoded account key
    
    Returns:
        Base64-encoded signature
    """
    credentials = SharedKeyCredentials(account_name="", account_key=account_key)
    return SharedKeyLiteAuthentication(credentials).calculate_signature(string_to_sign)
