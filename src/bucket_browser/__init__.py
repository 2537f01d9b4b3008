"""Storage access layer for browsing an S3 bucket.

This package resolves credentials through an ordered provider chain, lists a
bucket one folder level at a time, enriches listed objects with their content
types, filters listings by key, and issues time-limited download URLs. A web
UI or the bundled CLI sits on top of it.

Key Features:
    - Web identity, static and instance-metadata credentials, in that order
    - Paginated, delimiter-aware listings
    - Concurrent, best-effort content-type enrichment
    - Presigned download URLs
    - CLI interface

Recommended Usage:
    >>> import asyncio
    >>> from bucket_browser import ListQuery, StorageBrowser, settings
    >>> browser = StorageBrowser.from_settings(settings)
    >>> page = asyncio.run(browser.list_objects(ListQuery(prefix="photos/")))
    >>> page.prefixes
    ['photos/2023/', 'photos/2024/']

Advanced Usage:
    Import the individual components to wire them differently:

    >>> from bucket_browser.objectstorage import S3PrefixLister, MetadataEnricher
"""

__version__ = "0.1.0"

from .browser import StorageBrowser
from .core import settings
from .core.exceptions import (
    BucketBrowserError,
    ConfigurationError,
    CredentialSourceError,
    ListingError,
    NoCredentialsError,
    SigningError,
)
from .objectstorage import (
    CredentialResolver,
    MetadataEnricher,
    S3ClientConfig,
    S3ClientManager,
    S3PrefixLister,
    SearchFilter,
    SignedUrlIssuer,
    breadcrumbs,
)
from .schemas import (
    Breadcrumb,
    Credentials,
    ListingPage,
    ListQuery,
    SearchQuery,
    StorageObject,
)

__all__ = [
    # Facade
    "StorageBrowser",
    "settings",
    # Domain models
    "Breadcrumb",
    "Credentials",
    "ListingPage",
    "ListQuery",
    "SearchQuery",
    "StorageObject",
    # Components
    "CredentialResolver",
    "MetadataEnricher",
    "S3ClientConfig",
    "S3ClientManager",
    "S3PrefixLister",
    "SearchFilter",
    "SignedUrlIssuer",
    "breadcrumbs",
    # Errors
    "BucketBrowserError",
    "ConfigurationError",
    "CredentialSourceError",
    "ListingError",
    "NoCredentialsError",
    "SigningError",
]
