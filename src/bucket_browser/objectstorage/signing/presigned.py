"""Issuing presigned GetObject URLs."""

from typing import Optional

from bucket_browser.core import get_logger, get_tracer
from bucket_browser.core.exceptions import SigningError
from bucket_browser.objectstorage.clients import S3ClientManager

logger = get_logger(__name__)
tracer = get_tracer(__name__)

DEFAULT_TTL = 3600
# SigV4 presigned URLs are valid for at most seven days
MAX_TTL = 7 * 24 * 3600


class SignedUrlIssuer:
    """Produces direct-download URLs for single keys."""

    def __init__(self, client_manager: S3ClientManager):
        self.client_manager = client_manager

    async def sign(
        self,
        key: str,
        ttl_seconds: int = DEFAULT_TTL,
        download_name: Optional[str] = None,
    ) -> str:
        """Return a URL granting read access to ``key`` for ``ttl_seconds``.

        The key is not checked for existence; a missing key only shows up
        when the URL is fetched.

        Args:
            key: Object key
            ttl_seconds: Validity of the URL, 1 second to 7 days
            download_name: If set, the URL makes browsers save the object
                under this filename

        Returns:
            The signed URL

        Raises:
            SigningError: If the key is empty, the TTL is out of range, or
                credentials cannot be resolved
        """
        if not key:
            raise SigningError("Cannot sign a URL for an empty key")
        if not 1 <= ttl_seconds <= MAX_TTL:
            raise SigningError(
                f"URL lifetime must be between 1 and {MAX_TTL} seconds, "
                f"got {ttl_seconds}"
            )

        response_params = {}
        if download_name:
            safe_name = download_name.replace('"', "")
            response_params["ResponseContentDisposition"] = (
                f'attachment; filename="{safe_name}"'
            )

        bucket = self.client_manager.bucket
        with tracer.start_as_current_span("signing.sign"):
            try:
                url = await self.client_manager.generate_presigned_url(
                    key, ttl_seconds, response_params
                )
            except Exception as e:
                error_msg = f"Failed to sign URL for '{key}' in bucket '{bucket}': {e}"
                logger.error(error_msg, error=str(e))
                raise SigningError(error_msg) from e

        logger.info("Signed URL issued", bucket=bucket, key=key, ttl=ttl_seconds)
        return url
