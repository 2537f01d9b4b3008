"""Narrowing a listing page to keys that contain a search term.

Search covers the single page fetched for the query, not the whole bucket.
``filter`` returns the matching objects only; ``filter_page`` also keeps the
continuation token so callers can fetch the next page of matches.
"""

from typing import Optional

from bucket_browser.core import get_logger
from bucket_browser.objectstorage.enrichment import MetadataEnricher
from bucket_browser.objectstorage.listing import S3PrefixLister
from bucket_browser.schemas import ListingPage, SearchQuery, StorageObject

logger = get_logger(__name__)


def matches(key: str, query: str) -> bool:
    """Case-insensitive substring match; an empty query matches everything."""
    return query.casefold() in key.casefold()


class SearchFilter:
    """Filters one listing page by key substring."""

    def __init__(
        self, lister: S3PrefixLister, enricher: Optional[MetadataEnricher] = None
    ):
        self.lister = lister
        self.enricher = enricher

    async def filter(self, query: SearchQuery) -> list[StorageObject]:
        """Return the objects of one page whose key contains ``query.query``.

        Prefixes, truncation and the continuation token are not part of the
        result.
        """
        page = await self.filter_page(query)
        return page.objects

    async def filter_page(self, query: SearchQuery) -> ListingPage:
        """Like ``filter`` but keep matching prefixes and pagination."""
        page = await self.lister.list(query)

        objects = [obj for obj in page.objects if matches(obj.key, query.query)]
        prefixes = [prefix for prefix in page.prefixes if matches(prefix, query.query)]
        if self.enricher is not None:
            objects = await self.enricher.enrich(objects)

        logger.info(
            "Search completed",
            prefix=query.prefix,
            query=query.query,
            scanned=len(page.objects),
            matched=len(objects),
        )
        return page.model_copy(update={"objects": objects, "prefixes": prefixes})
