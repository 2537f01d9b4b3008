"""Concurrent content-type lookup for the objects of one listing page."""

import asyncio
from typing import Iterable, Optional

from bucket_browser.core import get_logger, get_tracer
from bucket_browser.objectstorage.clients import S3ClientManager
from bucket_browser.schemas import StorageObject

logger = get_logger(__name__)
tracer = get_tracer(__name__)

DEFAULT_MAX_CONCURRENCY = 32
DEFAULT_TIMEOUT = 10.0


class MetadataEnricher:
    """Fills in ``content_type`` with one HeadObject call per object.

    Enrichment is best-effort: a failed or timed-out lookup leaves that
    object's content type unset and never affects its siblings or the
    caller.
    """

    def __init__(
        self,
        client_manager: S3ClientManager,
        max_concurrency: Optional[int] = DEFAULT_MAX_CONCURRENCY,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ):
        """Initialize the enricher.

        Args:
            client_manager: Transport to the bucket
            max_concurrency: Upper bound on in-flight lookups; None for no cap
            timeout: Deadline in seconds for the whole page; lookups still
                running when it expires are cancelled. None waits for all.
        """
        self.client_manager = client_manager
        self.max_concurrency = max_concurrency
        self.timeout = timeout

    async def enrich(self, objects: Iterable[StorageObject]) -> list[StorageObject]:
        """Return copies of ``objects`` with content types filled in.

        The result keeps the input order whatever order the lookups finish in.
        """
        objects = list(objects)
        if not objects:
            return []

        semaphore = (
            asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        )

        async def lookup(obj: StorageObject) -> Optional[str]:
            if semaphore is None:
                return await self._content_type(obj.key)
            async with semaphore:
                return await self._content_type(obj.key)

        with tracer.start_as_current_span("enrichment.enrich") as span:
            span.set_attribute("enrichment.object_count", len(objects))
            tasks = [asyncio.ensure_future(lookup(obj)) for obj in objects]
            try:
                done, pending = await asyncio.wait(tasks, timeout=self.timeout)
            finally:
                # Also runs when the caller cancels us mid-wait
                unfinished = [task for task in tasks if not task.done()]
                for task in unfinished:
                    task.cancel()
                if unfinished:
                    await asyncio.gather(*unfinished, return_exceptions=True)

            if pending:
                logger.warning(
                    "Metadata enrichment deadline reached",
                    bucket=self.client_manager.bucket,
                    unfinished=len(pending),
                    timeout=self.timeout,
                )

        enriched = []
        for obj, task in zip(objects, tasks):
            content_type = task.result() if task in done else None
            enriched.append(obj.model_copy(update={"content_type": content_type}))
        return enriched

    async def _content_type(self, key: str) -> Optional[str]:
        try:
            response = await self.client_manager.head_object(key)
        except Exception as e:
            logger.debug("Content type lookup failed", key=key, error=str(e))
            return None
        return response.get("ContentType")
