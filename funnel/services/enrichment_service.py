"""
Enrichment service: analyze unprocessed content items in bounded batches.

Each run takes the oldest unprocessed items and handles them one at a
time. Every item that enters the loop leaves it processed: with the
analysis on success, or with default values on failure. Items are never
retried.
"""

import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from ..analyzer import ContentAnalyzer, Enrichment
from ..database import CONTENT_ITEM_COLLECTION, Database, DBContentItem
from ..exceptions import PersistenceError, PipelineError
from ..html_optimizer import optimize_html_lightweight

if TYPE_CHECKING:
    from ..fetcher import Fetcher

logger = logging.getLogger(__name__)


@dataclass
class EnrichmentStats:
    """Counters for one enrichment run."""
    total_items: int = 0
    processed: int = 0
    skipped: int = 0
    errors: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


class EnrichmentService:
    """Service for the batch enrichment pipeline."""

    def __init__(
        self,
        db: Database,
        fetcher: "Fetcher",
        analyzer: ContentAnalyzer,
        batch_size: int = 10,
    ):
        self.db = db
        self.fetcher = fetcher
        self.analyzer = analyzer
        self.batch_size = batch_size

    async def run(self) -> EnrichmentStats:
        """
        Enrich up to batch_size unprocessed items, oldest first.

        Returns:
            Counters for the run; per-item failures are counted, not raised

        Raises:
            PipelineError: If the batch cannot be loaded from the store
        """
        stats = EnrichmentStats()

        try:
            items = self.db.find(
                CONTENT_ITEM_COLLECTION,
                where={"is_processed": {"equals": False}},
                sort="created_at",
                limit=self.batch_size,
            ).docs
        except (PersistenceError, ValueError) as e:
            raise PipelineError(
                f"Could not load unprocessed items: {e}", stats.as_dict()
            ) from e

        stats.total_items = len(items)
        if not items:
            logger.info("No unprocessed content items")
            return stats

        logger.info(f"Enriching {len(items)} content items")

        for item in items:
            await self._process_item(item, stats)

        logger.info(
            f"Enrichment finished: {stats.processed} processed, "
            f"{stats.skipped} skipped, {stats.errors} errors"
        )
        return stats

    async def _process_item(self, item: DBContentItem, stats: EnrichmentStats):
        try:
            # Another run may have handled it since the batch was loaded
            current = self.db.get_content_item(item.id)
            if current is None or current.is_processed:
                logger.info(f"Skipping content item {item.id}: no longer pending")
                stats.skipped += 1
                return

            text, fetched = await self._resolve_text(current)
            enrichment = await self.analyzer.analyze(current.title, text)

            fields = {**enrichment.as_fields(), "is_processed": True}
            # Stored content is kept as ingested; fetched text fills the gap
            if fetched:
                fields["content"] = text
            self.db.update(CONTENT_ITEM_COLLECTION, current.id, fields)
            stats.processed += 1
            logger.debug(f"Enriched content item {current.id}")

        except Exception:
            stats.errors += 1
            logger.exception(f"Error processing content item {item.id} ({item.title!r})")
            self._mark_failed(item)

    async def _resolve_text(self, item: DBContentItem) -> tuple[str, bool]:
        """
        Reduced stored content, else the fetched page, else the title.

        Returns:
            The text to analyze and whether it came from a fetch
        """
        if item.content:
            text = optimize_html_lightweight(item.content)
            if text:
                return text, False

        text = await self.fetcher.fetch_content(item.original_url, fallback=item.title)
        return text or item.title, True

    def _mark_failed(self, item: DBContentItem):
        try:
            self.db.update(CONTENT_ITEM_COLLECTION, item.id, {
                **Enrichment.defaults().as_fields(),
                "is_processed": True,
            })
        except PersistenceError:
            logger.exception(f"Could not mark content item {item.id} as processed")
