"""Core utilities and shared components for bucket-browser."""

from .config import Settings, settings
from .exceptions import (
    BucketBrowserError,
    ConfigurationError,
    CredentialSourceError,
    ListingError,
    NoCredentialsError,
    SigningError,
)
from .observability import get_logger, get_tracer

__all__ = [
    "Settings",
    "settings",
    "BucketBrowserError",
    "ConfigurationError",
    "CredentialSourceError",
    "ListingError",
    "NoCredentialsError",
    "SigningError",
    "get_logger",
    "get_tracer",
]
