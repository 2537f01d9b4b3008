"""Delimiter-aware listing of one page of objects and common prefixes."""

from datetime import datetime, timezone

from bucket_browser.core import get_logger, get_tracer
from bucket_browser.core.exceptions import ListingError, NoCredentialsError
from bucket_browser.objectstorage.clients import S3ClientManager
from bucket_browser.schemas import Breadcrumb, ListingPage, ListQuery, StorageObject

logger = get_logger(__name__)
tracer = get_tracer(__name__)


class S3PrefixLister:
    """Lists one level of a bucket as folders (common prefixes) and files."""

    def __init__(self, client_manager: S3ClientManager):
        """Initialize S3 prefix lister.

        Args:
            client_manager: Transport to the bucket
        """
        self.client_manager = client_manager

    async def list(self, query: ListQuery) -> ListingPage:
        """Fetch one listing page.

        With ``delimiter="/"`` the page holds exactly one level under
        ``query.prefix``: objects at that level, plus one common prefix per
        sub-folder. Deeper levels need another call with the sub-folder as
        prefix. For example, with objects:
        - photos/readme.txt
        - photos/2023/a.jpg
        - photos/2024/b.jpg

        listing prefix ``photos/`` returns the object ``photos/readme.txt``
        and the prefixes ``photos/2023/`` and ``photos/2024/``.

        Args:
            query: Prefix, delimiter, page size and continuation token

        Returns:
            The page, with content types not yet filled in

        Raises:
            ListingError: If the listing call fails or returns an
                inconsistent page
            NoCredentialsError: If no credentials could be resolved
        """
        bucket = self.client_manager.bucket
        logger.info(
            "Listing objects",
            bucket=bucket,
            prefix=query.prefix,
            delimiter=query.delimiter,
            max_keys=query.max_keys,
            continued=query.continuation_token is not None,
        )

        with tracer.start_as_current_span("listing.list") as span:
            span.set_attribute("s3.bucket", bucket)
            span.set_attribute("s3.prefix", query.prefix)
            try:
                response = await self.client_manager.list_objects_v2(
                    prefix=query.prefix,
                    delimiter=query.delimiter,
                    max_keys=query.max_keys,
                    continuation_token=query.continuation_token,
                )
            except NoCredentialsError:
                raise
            except Exception as e:
                error_msg = (
                    f"Failed to list objects in bucket '{bucket}' "
                    f"under prefix '{query.prefix}': {e}"
                )
                logger.error(error_msg, error=str(e))
                raise ListingError(error_msg) from e

            page = self._build_page(response)

        logger.info(
            "Objects listed",
            bucket=bucket,
            prefix=query.prefix,
            object_count=len(page.objects),
            prefix_count=len(page.prefixes),
            truncated=page.truncated,
        )
        return page

    def _build_page(self, response: dict) -> ListingPage:
        now = datetime.now(timezone.utc)
        objects = [
            StorageObject(
                key=entry.get("Key", ""),
                size=entry.get("Size") or 0,
                last_modified=entry.get("LastModified") or now,
                etag=(entry.get("ETag") or "").strip('"'),
            )
            for entry in response.get("Contents", [])
        ]
        prefixes = [
            common["Prefix"]
            for common in response.get("CommonPrefixes", [])
            if common.get("Prefix")
        ]

        truncated = bool(response.get("IsTruncated", False))
        token = response.get("NextContinuationToken") or None
        if truncated and token is None:
            raise ListingError(
                f"Bucket '{self.client_manager.bucket}' reported a truncated "
                "page without a continuation token"
            )

        return ListingPage(
            objects=objects,
            prefixes=prefixes,
            truncated=truncated,
            next_continuation_token=token if truncated else None,
        )


def breadcrumbs(prefix: str, delimiter: str = "/") -> list[Breadcrumb]:
    """Split a prefix into navigable segments.

    ``"photos/2024/"`` becomes ``photos -> "photos/"`` and
    ``2024 -> "photos/2024/"``.
    """
    if not delimiter:
        return [Breadcrumb(name=prefix, prefix=prefix)] if prefix else []

    crumbs: list[Breadcrumb] = []
    path = ""
    for part in prefix.split(delimiter):
        if not part:
            continue
        path = f"{path}{part}{delimiter}"
        crumbs.append(Breadcrumb(name=part, prefix=path))
    return crumbs
