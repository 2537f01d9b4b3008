"""Credential resolution through an ordered provider chain."""

from .providers import (
    CredentialProvider,
    InstanceMetadataProvider,
    ProviderOutcome,
    StaticCredentialsProvider,
    WebIdentityProvider,
)
from .resolver import CredentialResolver

__all__ = [
    "CredentialProvider",
    "CredentialResolver",
    "InstanceMetadataProvider",
    "ProviderOutcome",
    "StaticCredentialsProvider",
    "WebIdentityProvider",
]
