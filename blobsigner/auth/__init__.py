"""
blobsigner authentication module.

Provides the Shared Key Lite signing primitive, account credentials,
and the signing error taxonomy.
"""

from blobsigner.auth.exceptions import (
    SigningError,
    MissingArgumentError,
    UnresolvableContentLengthError,
    InvalidAccountKeyError,
)
from blobsigner.auth.sharedkey import (
    CredentialsProvider,
    SharedKeyCredentials,
    SharedKeyLiteAuthentication,
    StaticCredentialsProvider,
    StringSigner,
    compute_signature,
)

__all__ = [
    # Exceptions
    "SigningError",
    "MissingArgumentError",
    "UnresolvableContentLengthError",
    "InvalidAccountKeyError",
    # SharedKey Auth
    "CredentialsProvider",
    "SharedKeyCredentials",
    "SharedKeyLiteAuthentication",
    "StaticCredentialsProvider",
    "StringSigner",
    "compute_signature",
]
