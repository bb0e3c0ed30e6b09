"""
Content item repository - stored articles and their enrichment.
"""

from ..exceptions import PersistenceError
from .converters import row_to_content_item
from .models import (
    CONTENT_ITEM_FIELDS,
    DBContentItem,
    INDEX_FIELDS,
    INDEX_MAX,
    INDEX_MIN,
    PRIORITIES,
)
from .repository import DocumentRepository


class ContentItemRepository(DocumentRepository[DBContentItem]):
    """Repository for content item operations."""

    table = "content_items"
    fields = CONTENT_ITEM_FIELDS
    required = ("title", "original_url")
    row_converter = staticmethod(row_to_content_item)

    def get_by_url(self, url: str) -> DBContentItem | None:
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM content_items WHERE original_url = ?", (url,)
            ).fetchone()
            return row_to_content_item(row) if row else None

    def _validate(self, data: dict, existing: DBContentItem | None):
        priority = data.get("priority")
        if priority is not None and priority not in PRIORITIES:
            raise PersistenceError(f"content_items: invalid priority {priority!r}")

        for name in INDEX_FIELDS:
            value = data.get(name)
            if value is not None and not INDEX_MIN <= value <= INDEX_MAX:
                raise PersistenceError(
                    f"content_items: {name} must be between {INDEX_MIN} and {INDEX_MAX}"
                )

        read_time = data.get("estimated_read_time")
        if read_time is not None and read_time < 0:
            raise PersistenceError("content_items: estimated_read_time must be >= 0")

        # Processing is one-way
        if existing is not None and existing.is_processed and data.get("is_processed") is False:
            raise PersistenceError(
                f"content_items: item {existing.id} is already processed"
            )
