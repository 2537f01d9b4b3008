"""Credential providers.

Each provider makes a single attempt and reports a ``ProviderOutcome``
instead of raising, so the resolver can fold over them in priority order.

Providers, highest priority first:
    1. Web identity federation (role ARN + token file, exchanged with STS)
    2. Static access key / secret key from configuration
    3. Instance metadata service (role attached to the host)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import boto3
from botocore import UNSIGNED
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError
from botocore.utils import InstanceMetadataFetcher

from bucket_browser.core import get_logger
from bucket_browser.core.exceptions import CredentialSourceError
from bucket_browser.schemas import Credentials

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProviderOutcome:
    """Result of one provider attempt: credentials, or the reason there are none."""

    provider: str
    credentials: Optional[Credentials] = None
    reason: Optional[str] = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.credentials is not None

    @classmethod
    def success(cls, provider: str, credentials: Credentials) -> "ProviderOutcome":
        return cls(provider=provider, credentials=credentials)

    @classmethod
    def failure(
        cls, provider: str, reason: str, skipped: bool = False
    ) -> "ProviderOutcome":
        return cls(provider=provider, reason=reason, skipped=skipped)


class CredentialProvider:
    """Base class for a single credential source."""

    name = "provider"

    def is_configured(self) -> bool:
        """Whether the configuration this provider needs is present."""
        return True

    def missing_configuration(self) -> str:
        return "not configured"

    def fetch(self) -> Credentials:
        """Produce credentials or raise ``CredentialSourceError``."""
        raise NotImplementedError

    def resolve(self) -> ProviderOutcome:
        """Attempt this provider once."""
        if not self.is_configured():
            return ProviderOutcome.failure(
                self.name, self.missing_configuration(), skipped=True
            )
        try:
            credentials = self.fetch()
        except CredentialSourceError as e:
            return ProviderOutcome.failure(self.name, e.reason)
        except Exception as e:
            logger.warning(
                "Credential provider failed unexpectedly",
                provider=self.name,
                error=str(e),
            )
            return ProviderOutcome.failure(self.name, f"unexpected error: {e}")
        return ProviderOutcome.success(self.name, credentials)


class WebIdentityProvider(CredentialProvider):
    """Exchanges a projected identity token for temporary credentials via STS."""

    name = "web-identity"

    def __init__(
        self,
        role_arn: Optional[str],
        token_file: Optional[str],
        session_name: str = "bucket-browser",
        region_name: str = "us-east-1",
        client_factory: Callable[..., object] = boto3.client,
    ):
        self.role_arn = role_arn
        self.token_file = token_file
        self.session_name = session_name
        self.region_name = region_name
        self._client_factory = client_factory

    def is_configured(self) -> bool:
        return bool(self.role_arn and self.token_file)

    def missing_configuration(self) -> str:
        return "role ARN and web identity token file are not both configured"

    def _read_token(self, token_file: str) -> str:
        try:
            token = Path(token_file).read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            raise CredentialSourceError(
                self.name, f"cannot read token file '{token_file}': {e}"
            )
        if not token:
            raise CredentialSourceError(self.name, f"token file '{token_file}' is empty")
        return token

    def fetch(self) -> Credentials:
        if not (self.role_arn and self.token_file):
            raise CredentialSourceError(self.name, self.missing_configuration())
        token = self._read_token(self.token_file)
        # AssumeRoleWithWebIdentity is authenticated by the token itself
        sts = self._client_factory(
            "sts",
            region_name=self.region_name,
            config=Config(signature_version=UNSIGNED),
        )
        try:
            response = sts.assume_role_with_web_identity(
                RoleArn=self.role_arn,
                RoleSessionName=self.session_name,
                WebIdentityToken=token,
            )
        except (BotoCoreError, ClientError) as e:
            raise CredentialSourceError(
                self.name, f"token exchange for role '{self.role_arn}' failed: {e}"
            )

        issued = response.get("Credentials") or {}
        if not (issued.get("AccessKeyId") and issued.get("SecretAccessKey")):
            raise CredentialSourceError(
                self.name, f"STS returned no credentials for role '{self.role_arn}'"
            )

        logger.debug("Web identity token exchanged", role_arn=self.role_arn)
        return Credentials(
            access_key_id=issued["AccessKeyId"],
            secret_access_key=issued["SecretAccessKey"],
            session_token=issued.get("SessionToken"),
            expiration=issued.get("Expiration"),
            source=self.name,
        )


class StaticCredentialsProvider(CredentialProvider):
    """Access key and secret supplied through configuration."""

    name = "static"

    def __init__(
        self,
        access_key_id: Optional[str],
        secret_access_key: Optional[str],
        session_token: Optional[str] = None,
    ):
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.session_token = session_token

    def is_configured(self) -> bool:
        return bool(self.access_key_id and self.secret_access_key)

    def missing_configuration(self) -> str:
        return "access key ID and secret access key are not both configured"

    def fetch(self) -> Credentials:
        if not (self.access_key_id and self.secret_access_key):
            raise CredentialSourceError(self.name, self.missing_configuration())
        return Credentials(
            access_key_id=self.access_key_id,
            secret_access_key=self.secret_access_key,
            session_token=self.session_token,
            source=self.name,
        )


class InstanceMetadataProvider(CredentialProvider):
    """Temporary credentials for the role attached to the current host."""

    name = "instance-metadata"

    def __init__(
        self,
        timeout: float = 1.0,
        fetcher_factory: Callable[..., object] = InstanceMetadataFetcher,
    ):
        self.timeout = timeout
        self._fetcher_factory = fetcher_factory

    def fetch(self) -> Credentials:
        fetcher = self._fetcher_factory(timeout=self.timeout, num_attempts=1)
        try:
            issued = fetcher.retrieve_iam_role_credentials()
        except BotoCoreError as e:
            raise CredentialSourceError(
                self.name, f"metadata service request failed: {e}"
            )

        # The fetcher reports an unreachable service or a missing role as {}
        if not issued or not (issued.get("access_key") and issued.get("secret_key")):
            raise CredentialSourceError(
                self.name, "metadata service unreachable or no role attached"
            )

        logger.debug("Instance role credentials fetched", role=issued.get("role_name"))
        return Credentials(
            access_key_id=issued["access_key"],
            secret_access_key=issued["secret_key"],
            session_token=issued.get("token"),
            expiration=issued.get("expiry_time"),
            source=self.name,
        )
