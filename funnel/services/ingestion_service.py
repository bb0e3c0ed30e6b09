"""
Ingestion service: pull entries from active RSS sources into the store.

Entries already stored (same original URL) are skipped; new ones are
inserted unprocessed for the enrichment pipeline to pick up. A failing
source or entry is logged and counted, and the run moves on.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone

from ..database import CONTENT_ITEM_COLLECTION, SOURCE_COLLECTION, Database, DBSource
from ..exceptions import PersistenceError, PipelineError
from ..feeds import FeedEntry, FeedParser

logger = logging.getLogger(__name__)

SOURCE_PAGE_SIZE = 50


@dataclass
class IngestionStats:
    """Counters for one ingestion run."""
    sources: int = 0
    processed: int = 0
    skipped: int = 0
    errors: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


class IngestionService:
    """Service for the feed ingestion pipeline."""

    def __init__(self, db: Database, feed_parser: FeedParser):
        self.db = db
        self.feed_parser = feed_parser

    async def run(self) -> IngestionStats:
        """
        Fetch every active RSS source and store its new entries.

        Raises:
            PipelineError: If active sources cannot be loaded from the store
        """
        stats = IngestionStats()

        for source in self._active_sources(stats):
            stats.sources += 1
            await self._ingest_source(source, stats)

        logger.info(
            f"Ingestion finished: {stats.sources} sources, {stats.processed} new items, "
            f"{stats.skipped} skipped, {stats.errors} errors"
        )
        return stats

    def _active_sources(self, stats: IngestionStats):
        page = 1
        while True:
            try:
                result = self.db.find(
                    SOURCE_COLLECTION,
                    where={"is_active": {"equals": True}, "type": {"equals": "rss"}},
                    sort="id",
                    limit=SOURCE_PAGE_SIZE,
                    page=page,
                )
            except (PersistenceError, ValueError) as e:
                raise PipelineError(f"Could not load sources: {e}", stats.as_dict()) from e

            yield from result.docs

            if not result.has_next_page:
                return
            page += 1

    async def _ingest_source(self, source: DBSource, stats: IngestionStats):
        try:
            feed = await self.feed_parser.fetch(source.url)
        except Exception as e:
            stats.errors += 1
            logger.error(f"Error processing source {source.id} ({source.name}): {e}")
            self._record_fetch(source, error=str(e))
            return

        logger.info(f"Fetched {len(feed.entries)} entries from {source.name}")

        for entry in feed.entries:
            self._ingest_entry(source, entry, stats)

        self._record_fetch(source)

    def _ingest_entry(self, source: DBSource, entry: FeedEntry, stats: IngestionStats):
        if not entry.url:
            stats.errors += 1
            logger.warning(f"Entry {entry.title!r} from {source.name} has no link")
            return

        try:
            existing = self.db.find(
                CONTENT_ITEM_COLLECTION,
                where={"original_url": {"equals": entry.url}},
                limit=1,
            )
            if existing.total_docs > 0:
                stats.skipped += 1
                return

            self.db.create(CONTENT_ITEM_COLLECTION, {
                "title": entry.title,
                "content": entry.content or None,
                "original_url": entry.url,
                "source_id": source.id,
                "publish_date": entry.published or datetime.now(timezone.utc),
                "is_processed": False,
            })
            stats.processed += 1

        except Exception:
            stats.errors += 1
            logger.exception(f"Error processing item {entry.url} from {source.name}")

    def _record_fetch(self, source: DBSource, error: str | None = None):
        try:
            self.db.update_source_fetched(source.id, error)
        except PersistenceError:
            logger.exception(f"Could not record fetch result for source {source.id}")
