"""Object storage access for S3-compatible services."""

from .clients import S3ClientConfig, S3ClientManager
from .credentials import CredentialResolver
from .enrichment import MetadataEnricher
from .listing import S3PrefixLister, breadcrumbs
from .search import SearchFilter
from .signing import SignedUrlIssuer

__all__ = [
    "CredentialResolver",
    "MetadataEnricher",
    "S3ClientConfig",
    "S3ClientManager",
    "S3PrefixLister",
    "SearchFilter",
    "SignedUrlIssuer",
    "breadcrumbs",
]
