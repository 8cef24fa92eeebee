"""String-to-sign construction for Azure Blob service SAS.

The storage service rebuilds this string independently from the SAS query
parameters and compares signatures, so every field must match byte for
byte. The field list and its order are fixed for signed version 2017-04-17.

Reference: https://docs.microsoft.com/rest/api/storageservices/create-service-sas
"""

from dataclasses import dataclass
from typing import Tuple

API_VERSION = "2017-04-17"

# Signed resource type for a single blob
SIGNED_RESOURCE_BLOB = "b"

BLOB_SAS_FIELDS = (
    "signedpermission",
    "signedstart",
    "signedexpiry",
    "canonicalizedresource",
    "signedidentifier",
    "signedIP",
    "signedProtocol",
    "signedversion",
    "rscc",
    "rscd",
    "rsce",
    "rscl",
    "rsct",
)


def canonicalized_resource(identity: str, container: str, name: str) -> str:
    """Build ``/blob/{account}/{container}/{name}`` from unescaped names."""
    return f"/blob/{identity}/{container}/{name}"


@dataclass(frozen=True)
class CanonicalForm:
    """The 13 ordered fields of a blob SAS string-to-sign."""

    permission: str
    expiry: str
    resource: str
    api_version: str = API_VERSION

    @property
    def fields(self) -> Tuple[str, ...]:
        return (
            self.permission,  # signedpermission
            "",  # signedstart
            self.expiry,  # signedexpiry
            self.resource,  # canonicalizedresource
            "",  # signedidentifier
            "",  # signedIP
            "",  # signedProtocol
            self.api_version,  # signedversion
            "",  # rscc
            "",  # rscd
            "",  # rsce
            "",  # rscl
            "",  # rsct
        )

    def to_string(self) -> str:
        return "\n".join(self.fields)


def build_string_to_sign(
    permission: str,
    expiry: str,
    identity: str,
    container: str,
    name: str,
    api_version: str = API_VERSION
) -> str:
    """
    Build the string-to-sign for a blob SAS.

    Args:
        permission: Signed permission letter (r, w or d)
        expiry: Expiry as ISO-8601 with second precision
        identity: Storage account name
        container: Container name
        name: Blob name
        api_version: Signed service version

    Returns:
        Newline-joined canonical string
    """
    form = CanonicalForm(
        permission=permission,
        expiry=expiry,
        resource=canonicalized_resource(identity, container, name),
        api_version=api_version,
    )
    return form.to_string()
