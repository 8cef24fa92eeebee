"""Tests for the Shared Key Lite authentication primitive."""

import base64
import hashlib
import hmac

import pytest

from blobsigner.auth.exceptions import InvalidAccountKeyError, MissingArgumentError
from blobsigner.auth.sharedkey import (
    SharedKeyCredentials,
    SharedKeyLiteAuthentication,
    StaticCredentialsProvider,
    compute_signature,
)


@pytest.fixture
def account_key():
    """Generate a test account key."""
    return base64.b64encode(b"test-account-key-12345678901234567890").decode()


@pytest.fixture
def credentials(account_key):
    return SharedKeyCredentials(account_name="testaccount", account_key=account_key)


class TestSharedKeyLiteAuthentication:
    """Test suite for SharedKeyLiteAuthentication."""

    def test_hmac_sha256(self, credentials, account_key):
        string_to_sign = "r\n\n2020-01-01T00:15:00Z\n/blob/testaccount/c/b\n\n\n\n2017-04-17\n\n\n\n\n"
        expected = base64.b64encode(
            hmac.new(
                base64.b64decode(account_key),
                string_to_sign.encode("utf-8"),
                hashlib.sha256,
            ).digest()
        ).decode("utf-8")

        auth = SharedKeyLiteAuthentication(credentials)

        assert auth.calculate_signature(string_to_sign) == expected

    def test_deterministic(self, credentials):
        auth = SharedKeyLiteAuthentication(credentials)

        assert auth.calculate_signature("abc") == auth.calculate_signature("abc")
        assert auth.calculate_signature("abc") != auth.calculate_signature("abd")

    def test_key_changes_signature(self, credentials):
        other = SharedKeyCredentials(
            account_name="testaccount",
            account_key=base64.b64encode(b"another-key").decode(),
        )

        assert SharedKeyLiteAuthentication(credentials).calculate_signature("abc") != \
            SharedKeyLiteAuthentication(other).calculate_signature("abc")

    def test_unicode_input(self, credentials):
        signature = SharedKeyLiteAuthentication(credentials).calculate_signature("/blob/a/c/naïve.txt")

        assert len(base64.b64decode(signature)) == 32

    @pytest.mark.parametrize("key", ["not base64!!", ""])
    def test_invalid_key(self, key):
        with pytest.raises(InvalidAccountKeyError) as exc_info:
            SharedKeyLiteAuthentication(SharedKeyCredentials(account_name="a", account_key=key))

        assert exc_info.value.error_code == "InvalidAccountKey"

    def test_missing_credentials(self):
        with pytest.raises(MissingArgumentError):
            SharedKeyLiteAuthentication(None)

    def test_compute_signature_helper(self, credentials, account_key):
        assert compute_signature("abc", account_key) == \
            SharedKeyLiteAuthentication(credentials).calculate_signature("abc")


class TestCredentials:
    """Test suite for credentials and providers."""

    def test_repr_hides_key(self, credentials, account_key):
        assert account_key not in repr(credentials)
        assert "testaccount" in repr(credentials)

    def test_static_provider(self, credentials):
        assert StaticCredentialsProvider(credentials).get() is credentials

    def test_static_provider_requires_credentials(self):
        with pytest.raises(MissingArgumentError):
            StaticCredentialsProvider(None)
