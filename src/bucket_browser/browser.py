"""Storage browser facade used by the UI and the CLI."""

from typing import Optional

from bucket_browser.core import Settings, get_logger
from bucket_browser.core.exceptions import ConfigurationError
from bucket_browser.objectstorage import (
    CredentialResolver,
    MetadataEnricher,
    S3ClientConfig,
    S3ClientManager,
    S3PrefixLister,
    SearchFilter,
    SignedUrlIssuer,
)
from bucket_browser.schemas import ListingPage, ListQuery, SearchQuery, StorageObject

logger = get_logger(__name__)


class StorageBrowser:
    """Lists, searches and signs URLs for one bucket."""

    def __init__(
        self,
        client_manager: S3ClientManager,
        enrich_concurrency: Optional[int] = 32,
        enrich_timeout: Optional[float] = 10.0,
        signed_url_ttl: int = 3600,
        page_size: int = 1000,
    ):
        self.client_manager = client_manager
        self.lister = S3PrefixLister(client_manager)
        self.enricher = MetadataEnricher(
            client_manager, max_concurrency=enrich_concurrency, timeout=enrich_timeout
        )
        self.search_filter = SearchFilter(self.lister, self.enricher)
        self.issuer = SignedUrlIssuer(client_manager)
        self.signed_url_ttl = signed_url_ttl
        self.page_size = page_size

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageBrowser":
        """Wire a browser from application settings.

        Raises:
            ConfigurationError: If no bucket is configured
        """
        if not settings.bucket:
            raise ConfigurationError(
                "No bucket configured; set BUCKET_BROWSER_BUCKET or S3_BUCKET"
            )

        client_manager = S3ClientManager(
            S3ClientConfig(
                bucket=settings.bucket,
                region_name=settings.region_name,
                endpoint_url=settings.endpoint_url,
            ),
            CredentialResolver.from_settings(settings),
            refresh_margin=settings.credential_refresh_margin,
        )
        return cls(
            client_manager,
            enrich_concurrency=settings.enrich_concurrency,
            enrich_timeout=settings.enrich_timeout,
            signed_url_ttl=settings.signed_url_ttl,
            page_size=settings.page_size,
        )

    async def list_objects(
        self, query: ListQuery, with_metadata: bool = True
    ) -> ListingPage:
        """Fetch one page, then fill in content types."""
        page = await self.lister.list(query)
        if not with_metadata:
            return page
        objects = await self.enricher.enrich(page.objects)
        return page.model_copy(update={"objects": objects})

    async def search(self, query: SearchQuery) -> list[StorageObject]:
        """Objects of one page whose key contains the search term."""
        return await self.search_filter.filter(query)

    async def search_page(self, query: SearchQuery) -> ListingPage:
        """Search one page, keeping the token for the next page of matches."""
        return await self.search_filter.filter_page(query)

    async def signed_url(
        self,
        key: str,
        ttl_seconds: Optional[int] = None,
        download_name: Optional[str] = None,
    ) -> str:
        """Signed download URL for ``key``; defaults to the configured TTL."""
        return await self.issuer.sign(
            key,
            ttl_seconds if ttl_seconds is not None else self.signed_url_ttl,
            download_name=download_name,
        )

    async def credentials_source(self) -> str:
        """Name of the provider whose credentials are in use."""
        return (await self.client_manager.credentials()).source
