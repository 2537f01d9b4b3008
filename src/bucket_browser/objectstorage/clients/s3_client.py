"""S3 client configuration and lifecycle management.

This module provides the transport to the object store: a thin async wrapper
over a boto3 S3 client whose credentials come from a ``CredentialResolver``.

Lifecycle:
    The manager is either *uninitialized* (optionally with a resolution in
    flight) or *ready* (credentials plus a boto3 client). Every operation goes
    through ``ensure_ready()``, which resolves credentials on first use,
    shares one pending resolution between concurrent callers, and resolves
    again once temporary credentials are about to expire.

S3-Compatible Services:
    Supports custom endpoints for services like MinIO, DigitalOcean Spaces,
    and other S3-compatible object storage providers via endpoint_url.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

import boto3
from botocore.client import Config
from pydantic import BaseModel, ConfigDict, Field

from bucket_browser.core import get_logger
from bucket_browser.objectstorage.credentials import CredentialResolver
from bucket_browser.schemas import Credentials

logger = get_logger(__name__)

DEFAULT_REFRESH_MARGIN = 300


class S3ClientConfig(BaseModel):
    """Configuration for S3 client connections.

    Example:
        # AWS bucket
        config = S3ClientConfig(bucket="reports", region_name="eu-west-1")

        # MinIO endpoint
        config = S3ClientConfig(
            bucket="reports", endpoint_url="http://localhost:9000"
        )
    """

    model_config = ConfigDict(extra="forbid")

    bucket: str = Field(..., min_length=1, description="Bucket to browse")
    region_name: str = Field("us-east-1", description="AWS region name")
    endpoint_url: Optional[str] = Field(
        None, description="Custom S3 endpoint URL for S3-compatible services"
    )


@dataclass(frozen=True)
class _Uninitialized:
    pending: Optional["asyncio.Task[_Ready]"] = None


@dataclass(frozen=True)
class _Ready:
    credentials: Credentials
    client: Any


class S3ClientManager:
    """Manages the S3 client and exposes the object store calls."""

    def __init__(
        self,
        config: S3ClientConfig,
        resolver: CredentialResolver,
        client_factory: Callable[..., object] = boto3.client,
        refresh_margin: float = DEFAULT_REFRESH_MARGIN,
    ):
        """Initialize S3 client manager.

        Args:
            config: S3 client configuration
            resolver: Credential chain used on first use and on expiry
            client_factory: Callable building the boto3 client
            refresh_margin: Seconds before expiry at which credentials are
                resolved again
        """
        self.config = config
        self.resolver = resolver
        self.refresh_margin = refresh_margin
        self._client_factory = client_factory
        self._state: Union[_Uninitialized, _Ready] = _Uninitialized()
        logger.info(
            "S3 client manager initialized",
            bucket=config.bucket,
            region=config.region_name,
        )

    @property
    def bucket(self) -> str:
        return self.config.bucket

    @property
    def is_ready(self) -> bool:
        return isinstance(self._state, _Ready)

    async def ensure_ready(self) -> _Ready:
        """Return the ready state, resolving credentials if needed.

        Raises:
            NoCredentialsError: If the credential chain fails
        """
        state = self._state
        if isinstance(state, _Ready):
            if not state.credentials.expires_within(self.refresh_margin):
                return state
            logger.info(
                "Credentials expiring, resolving again",
                source=state.credentials.source,
            )
        elif state.pending is not None:
            return await asyncio.shield(state.pending)

        pending = asyncio.ensure_future(self._initialize())
        self._state = _Uninitialized(pending=pending)
        return await asyncio.shield(pending)

    async def _initialize(self) -> _Ready:
        try:
            credentials = await self.resolver.resolve()
            ready = _Ready(
                credentials=credentials, client=self._create_client(credentials)
            )
        except BaseException:
            self._state = _Uninitialized()
            raise
        self._state = ready
        return ready

    async def credentials(self) -> Credentials:
        """Resolved credentials for this client."""
        return (await self.ensure_ready()).credentials

    def _create_client(self, credentials: Credentials):
        """Create boto3 S3 client with the resolved credentials."""
        kwargs: Dict[str, Any] = {
            "region_name": self.config.region_name,
            "aws_access_key_id": credentials.access_key_id,
            "aws_secret_access_key": credentials.secret_access_key,
            "config": Config(signature_version="s3v4"),
        }
        if credentials.session_token:
            kwargs["aws_session_token"] = credentials.session_token
        if self.config.endpoint_url:
            kwargs["endpoint_url"] = self.config.endpoint_url

        client = self._client_factory("s3", **kwargs)
        logger.info("S3 client created", credential_source=credentials.source)
        return client

    async def list_objects_v2(
        self,
        prefix: str = "",
        delimiter: str = "",
        max_keys: int = 1000,
        continuation_token: Optional[str] = None,
    ) -> dict:
        """Issue one ListObjectsV2 call and return the raw response."""
        ready = await self.ensure_ready()
        params: Dict[str, Any] = {"Bucket": self.bucket, "MaxKeys": max_keys}
        if prefix:
            params["Prefix"] = prefix
        if delimiter:
            params["Delimiter"] = delimiter
        if continuation_token:
            params["ContinuationToken"] = continuation_token
        return await asyncio.to_thread(ready.client.list_objects_v2, **params)

    async def head_object(self, key: str) -> dict:
        """Issue one HeadObject call and return the raw response."""
        ready = await self.ensure_ready()
        return await asyncio.to_thread(
            ready.client.head_object, Bucket=self.bucket, Key=key
        )

    async def generate_presigned_url(
        self,
        key: str,
        expires_in: int,
        response_params: Optional[Dict[str, str]] = None,
    ) -> str:
        """Sign a GetObject URL locally; no request is sent."""
        ready = await self.ensure_ready()
        params: Dict[str, str] = {"Bucket": self.bucket, "Key": key}
        params.update(response_params or {})
        return ready.client.generate_presigned_url(
            "get_object", Params=params, ExpiresIn=expires_in
        )
