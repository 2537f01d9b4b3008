"""Ordered credential resolution."""

import asyncio
from typing import Sequence

from bucket_browser.core import Settings, get_logger, get_tracer
from bucket_browser.core.exceptions import NoCredentialsError
from bucket_browser.schemas import Credentials

from .providers import (
    CredentialProvider,
    InstanceMetadataProvider,
    StaticCredentialsProvider,
    WebIdentityProvider,
)

logger = get_logger(__name__)
tracer = get_tracer(__name__)


class CredentialResolver:
    """Tries providers strictly in order and returns the first success.

    Providers are awaited one at a time; a lower-priority provider is never
    attempted while a higher one is in flight, and never attempted at all
    once a higher one has succeeded.
    """

    def __init__(self, providers: Sequence[CredentialProvider]):
        self.providers = list(providers)

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialResolver":
        """Build the default web identity -> static -> instance metadata chain."""
        return cls(
            [
                WebIdentityProvider(
                    role_arn=settings.role_arn,
                    token_file=settings.web_identity_token_file,
                    session_name=settings.role_session_name,
                    region_name=settings.region_name,
                ),
                StaticCredentialsProvider(
                    access_key_id=settings.access_key_id,
                    secret_access_key=settings.secret_access_key,
                    session_token=settings.session_token,
                ),
                InstanceMetadataProvider(timeout=settings.metadata_timeout),
            ]
        )

    async def resolve(self) -> Credentials:
        """Resolve credentials, one attempt per provider.

        Raises:
            NoCredentialsError: If every provider failed; carries one reason
                per provider.
        """
        reasons: list[str] = []
        with tracer.start_as_current_span("credentials.resolve"):
            for provider in self.providers:
                outcome = await asyncio.to_thread(provider.resolve)
                if outcome.credentials is not None:
                    logger.info("Credentials resolved", source=outcome.provider)
                    return outcome.credentials

                reasons.append(f"{outcome.provider}: {outcome.reason}")
                logger.info(
                    "Credential provider unavailable",
                    provider=outcome.provider,
                    skipped=outcome.skipped,
                    reason=outcome.reason,
                )

        logger.error("No credential provider succeeded", reasons=reasons)
        raise NoCredentialsError(reasons)
