"""Blob SAS signing."""

from .canonicalizer import API_VERSION, BLOB_SAS_FIELDS, CanonicalForm, build_string_to_sign
from .models import Blob, BlobOperation, GetOptions, SignedRequest, SignOptions
from .options import GetOptionsTranslator
from .signer import BlobRequestSigner

__all__ = [
    "API_VERSION",
    "BLOB_SAS_FIELDS",
    "CanonicalForm",
    "build_string_to_sign",
    "Blob",
    "BlobOperation",
    "GetOptions",
    "SignedRequest",
    "SignOptions",
    "GetOptionsTranslator",
    "BlobRequestSigner",
]
