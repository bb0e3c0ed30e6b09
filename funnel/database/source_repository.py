"""
Source repository - CRUD operations for feed sources.
"""

from datetime import datetime, timezone

from ..exceptions import PersistenceError
from .converters import row_to_source
from .models import DBSource, SOURCE_FIELDS, SOURCE_TYPES
from .repository import DocumentRepository


class SourceRepository(DocumentRepository[DBSource]):
    """Repository for source operations."""

    table = "sources"
    fields = SOURCE_FIELDS
    required = ("name", "url")
    row_converter = staticmethod(row_to_source)

    def update_fetched(self, source_id: int, error: str | None = None):
        """Record a fetch attempt; a successful one clears the previous error."""
        with self._db.conn() as conn:
            if error is None:
                conn.execute(
                    "UPDATE sources SET last_fetched_at = ?, fetch_error = NULL WHERE id = ?",
                    (datetime.now(timezone.utc).isoformat(), source_id)
                )
            else:
                conn.execute(
                    "UPDATE sources SET fetch_error = ? WHERE id = ?",
                    (error, source_id)
                )

    def _validate(self, data: dict, existing: DBSource | None):
        source_type = data.get("type")
        if source_type is not None and source_type not in SOURCE_TYPES:
            raise PersistenceError(f"sources: unsupported type {source_type!r}")
