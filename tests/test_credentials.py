"""Tests for credential providers and the resolution chain."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from bucket_browser.core.exceptions import NoCredentialsError
from bucket_browser.objectstorage.credentials import (
    CredentialProvider,
    CredentialResolver,
    InstanceMetadataProvider,
    ProviderOutcome,
    StaticCredentialsProvider,
    WebIdentityProvider,
)
from bucket_browser.schemas import Credentials

ROLE_ARN = "arn:aws:iam::123456789012:role/bucket-reader"


def _imds_fetcher(issued):
    """Fetcher factory double returning ``issued`` from the metadata service."""
    fetcher = MagicMock()
    fetcher.retrieve_iam_role_credentials.return_value = issued
    return MagicMock(return_value=fetcher)


def _sts_factory(response=None, error=None):
    sts = MagicMock()
    if error is not None:
        sts.assume_role_with_web_identity.side_effect = error
    else:
        sts.assume_role_with_web_identity.return_value = response
    return MagicMock(return_value=sts), sts


def _stub_provider(name, credentials=None):
    provider = MagicMock(spec=CredentialProvider)
    if credentials is None:
        provider.resolve.return_value = ProviderOutcome.failure(name, f"{name} failed")
    else:
        provider.resolve.return_value = ProviderOutcome.success(name, credentials)
    return provider


@pytest.fixture
def token_file(tmp_path):
    path = tmp_path / "token"
    path.write_text("eyJhbGciOiJSUzI1NiJ9.test-token\n")
    return str(path)


IMDS_CREDENTIALS = {
    "role_name": "web-host",
    "access_key": "ASIAIMDS",
    "secret_key": "imds-secret",
    "token": "imds-token",
    "expiry_time": "2030-01-01T00:00:00Z",
}


class TestWebIdentityProvider:
    """Test web identity federation."""

    def test_skipped_without_role_arn(self, token_file):
        """Test provider is skipped when the role ARN is missing."""
        outcome = WebIdentityProvider(None, token_file).resolve()

        assert not outcome.ok
        assert outcome.skipped is True

    def test_skipped_without_token_file(self):
        """Test provider is skipped when the token file is missing."""
        outcome = WebIdentityProvider(ROLE_ARN, None).resolve()

        assert outcome.skipped is True

    def test_exchange_with_sts(self, mocked_aws, token_file):
        """Test token exchange against mocked STS."""
        outcome = WebIdentityProvider(ROLE_ARN, token_file).resolve()

        assert outcome.ok
        assert outcome.credentials.source == "web-identity"
        assert outcome.credentials.session_token
        assert outcome.credentials.expiration is not None

    def test_exchange_passes_token_and_role(self, token_file):
        """Test the token file contents are sent to STS."""
        factory, sts = _sts_factory(
            response={
                "Credentials": {
                    "AccessKeyId": "ASIAWEB",
                    "SecretAccessKey": "web-secret",
                    "SessionToken": "web-token",
                    "Expiration": datetime(2030, 1, 1, tzinfo=timezone.utc),
                }
            }
        )
        provider = WebIdentityProvider(
            ROLE_ARN, token_file, session_name="ui", client_factory=factory
        )

        outcome = provider.resolve()

        assert outcome.credentials.access_key_id == "ASIAWEB"
        sts.assume_role_with_web_identity.assert_called_once_with(
            RoleArn=ROLE_ARN,
            RoleSessionName="ui",
            WebIdentityToken="eyJhbGciOiJSUzI1NiJ9.test-token",
        )

    def test_unreadable_token_file(self, tmp_path):
        """Test a missing token file is a provider failure, not a crash."""
        provider = WebIdentityProvider(ROLE_ARN, str(tmp_path / "missing"))

        outcome = provider.resolve()

        assert not outcome.ok
        assert outcome.skipped is False
        assert "cannot read token file" in outcome.reason

    def test_failed_exchange(self, token_file):
        """Test an STS error becomes a failure reason."""
        error = ClientError(
            {"Error": {"Code": "InvalidIdentityToken", "Message": "bad token"}},
            "AssumeRoleWithWebIdentity",
        )
        factory, _ = _sts_factory(error=error)

        outcome = WebIdentityProvider(ROLE_ARN, token_file, client_factory=factory).resolve()

        assert not outcome.ok
        assert "token exchange" in outcome.reason
        assert "InvalidIdentityToken" in outcome.reason

    def test_undecodable_token_file(self, tmp_path):
        """Test a token file that is not UTF-8 is a provider failure."""
        path = tmp_path / "token"
        path.write_bytes(b"\xff\xfe\x00bad")

        outcome = WebIdentityProvider(ROLE_ARN, str(path)).resolve()

        assert not outcome.ok
        assert outcome.skipped is False
        assert "cannot read token file" in outcome.reason

    def test_response_without_credentials(self, token_file):
        """Test an STS response lacking credentials is a failure reason."""
        factory, _ = _sts_factory(response={})

        outcome = WebIdentityProvider(ROLE_ARN, token_file, client_factory=factory).resolve()

        assert not outcome.ok
        assert "returned no credentials" in outcome.reason


class TestStaticCredentialsProvider:
    """Test configured access keys."""

    def test_configured(self):
        """Test static keys are returned as-is."""
        outcome = StaticCredentialsProvider("AKIA", "secret", "token").resolve()

        assert outcome.credentials == Credentials(
            access_key_id="AKIA",
            secret_access_key="secret",
            session_token="token",
            source="static",
        )

    @pytest.mark.parametrize("key,secret", [(None, "secret"), ("AKIA", None), ("", "")])
    def test_skipped_when_incomplete(self, key, secret):
        """Test provider is skipped unless both key and secret are set."""
        outcome = StaticCredentialsProvider(key, secret).resolve()

        assert outcome.skipped is True


class TestInstanceMetadataProvider:
    """Test the instance metadata service provider."""

    def test_role_credentials(self):
        """Test credentials for the attached role."""
        factory = _imds_fetcher(IMDS_CREDENTIALS)

        outcome = InstanceMetadataProvider(timeout=0.5, fetcher_factory=factory).resolve()

        assert outcome.credentials.access_key_id == "ASIAIMDS"
        assert outcome.credentials.source == "instance-metadata"
        assert outcome.credentials.expiration.year == 2030
        factory.assert_called_once_with(timeout=0.5, num_attempts=1)

    def test_service_unreachable(self):
        """Test an unreachable service is a failure reason."""
        outcome = InstanceMetadataProvider(fetcher_factory=_imds_fetcher({})).resolve()

        assert not outcome.ok
        assert "no role attached" in outcome.reason

    def test_incomplete_role_credentials(self):
        """Test metadata credentials without a secret are a failure reason."""
        factory = _imds_fetcher({"access_key": "ASIAIMDS", "token": "t"})

        outcome = InstanceMetadataProvider(fetcher_factory=factory).resolve()

        assert not outcome.ok
        assert "no role attached" in outcome.reason

    def test_unexpected_error_becomes_failure(self):
        """Test an unexpected exception from a source is absorbed as a reason."""
        fetcher = MagicMock()
        fetcher.retrieve_iam_role_credentials.side_effect = ValueError("garbled")

        outcome = InstanceMetadataProvider(
            fetcher_factory=MagicMock(return_value=fetcher)
        ).resolve()

        assert not outcome.ok
        assert outcome.skipped is False
        assert "garbled" in outcome.reason


class TestCredentialResolver:
    """Test ordered resolution."""

    @pytest.fixture
    def all_sources(self, token_file):
        """Every provider configured and reachable."""
        sts_factory, sts = _sts_factory(
            response={
                "Credentials": {
                    "AccessKeyId": "ASIAWEB",
                    "SecretAccessKey": "web-secret",
                    "SessionToken": "web-token",
                    "Expiration": datetime.now(timezone.utc) + timedelta(hours=1),
                }
            }
        )
        imds_factory = _imds_fetcher(IMDS_CREDENTIALS)
        static = StaticCredentialsProvider("AKIASTATIC", "static-secret")
        static.fetch = MagicMock(wraps=static.fetch)
        providers = [
            WebIdentityProvider(ROLE_ARN, token_file, client_factory=sts_factory),
            static,
            InstanceMetadataProvider(fetcher_factory=imds_factory),
        ]
        return providers, static, imds_factory

    async def test_federation_wins(self, all_sources):
        """Test federation is used and lower providers are never invoked."""
        providers, static, imds_factory = all_sources

        credentials = await CredentialResolver(providers).resolve()

        assert credentials.source == "web-identity"
        assert static.fetch.call_count == 0
        assert imds_factory.call_count == 0

    async def test_static_when_federation_unconfigured(self, all_sources):
        """Test fallback to static keys."""
        providers, _, imds_factory = all_sources
        providers[0] = WebIdentityProvider(None, None)

        credentials = await CredentialResolver(providers).resolve()

        assert credentials.source == "static"
        assert imds_factory.call_count == 0

    async def test_undecodable_token_falls_back(self, tmp_path):
        """Test a binary token file does not stop the chain."""
        path = tmp_path / "token"
        path.write_bytes(b"\xff\xfe\x00bad")
        resolver = CredentialResolver(
            [
                WebIdentityProvider(ROLE_ARN, str(path)),
                StaticCredentialsProvider("AKIA", "secret"),
            ]
        )

        credentials = await resolver.resolve()

        assert credentials.source == "static"

    async def test_instance_metadata_last(self):
        """Test fallback to the metadata service."""
        resolver = CredentialResolver(
            [
                WebIdentityProvider(None, None),
                StaticCredentialsProvider(None, None),
                InstanceMetadataProvider(fetcher_factory=_imds_fetcher(IMDS_CREDENTIALS)),
            ]
        )

        credentials = await resolver.resolve()

        assert credentials.source == "instance-metadata"

    async def test_all_fail(self, tmp_path):
        """Test every reason is reported when no provider succeeds."""
        resolver = CredentialResolver(
            [
                WebIdentityProvider(ROLE_ARN, str(tmp_path / "missing")),
                StaticCredentialsProvider(None, None),
                InstanceMetadataProvider(fetcher_factory=_imds_fetcher({})),
            ]
        )

        with pytest.raises(NoCredentialsError) as exc_info:
            await resolver.resolve()

        reasons = exc_info.value.reasons
        assert len(reasons) == 3
        assert len(set(reasons)) == 3
        assert reasons[0].startswith("web-identity:")
        assert reasons[1].startswith("static:")
        assert reasons[2].startswith("instance-metadata:")
        assert "cannot read token file" in str(exc_info.value)

    async def test_stops_at_first_success(self):
        """Test providers after the first success are not attempted."""
        first = _stub_provider("first")
        second = _stub_provider(
            "second", Credentials(access_key_id="A", secret_access_key="S", source="second")
        )
        third = _stub_provider("third")

        credentials = await CredentialResolver([first, second, third]).resolve()

        assert credentials.source == "second"
        first.resolve.assert_called_once()
        third.resolve.assert_not_called()

    async def test_empty_chain(self):
        """Test an empty chain fails rather than inventing credentials."""
        with pytest.raises(NoCredentialsError):
            await CredentialResolver([]).resolve()
