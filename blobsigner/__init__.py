"""
blobsigner: Shared Access Signatures for Azure Blob Storage

Issues time-limited, signed requests for reading, writing and deleting
single blobs without sharing the storage account key.
"""

__version__ = "0.1.0"

from .blob.signer import BlobRequestSigner
from .blob.models import Blob, BlobOperation, GetOptions, SignedRequest, SignOptions

__all__ = [
    "BlobRequestSigner",
    "Blob",
    "BlobOperation",
    "GetOptions",
    "SignedRequest",
    "SignOptions",
    "__version__",
]
