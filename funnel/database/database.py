"""
Database facade - collection-style access over the repositories.

Pipelines and routes address collections by name ("source",
"contentItem") so the orchestrators stay independent of table layout.
"""

import sqlite3
from functools import wraps
from pathlib import Path

from ..exceptions import PersistenceError
from .connection import DatabaseConnection
from .content_repository import ContentItemRepository
from .models import DBContentItem, DBSource, FindResult
from .repository import DocumentRepository
from .source_repository import SourceRepository

SOURCE_COLLECTION = "source"
CONTENT_ITEM_COLLECTION = "contentItem"


def _storage_errors(func):
    """Surface SQLite failures as PersistenceError."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except sqlite3.Error as e:
            raise PersistenceError(str(e)) from e
    return wrapper


class Database:
    """Unified database access facade."""

    def __init__(self, db_path: Path):
        self._connection = DatabaseConnection(db_path)

        self.sources = SourceRepository(self._connection)
        self.content_items = ContentItemRepository(self._connection)

        self._collections: dict[str, DocumentRepository] = {
            SOURCE_COLLECTION: self.sources,
            CONTENT_ITEM_COLLECTION: self.content_items,
        }

    def collection(self, name: str) -> DocumentRepository:
        try:
            return self._collections[name]
        except KeyError:
            raise ValueError(f"Unknown collection: {name}") from None

    # ─────────────────────────────────────────────────────────────
    # Collection operations
    # ─────────────────────────────────────────────────────────────

    @_storage_errors
    def find(
        self,
        collection: str,
        where: dict | None = None,
        sort: str | None = None,
        limit: int = 10,
        page: int = 1,
    ) -> FindResult:
        return self.collection(collection).find(where, sort, limit, page)

    @_storage_errors
    def count(self, collection: str, where: dict | None = None) -> int:
        return self.collection(collection).count(where)

    @_storage_errors
    def get(self, collection: str, doc_id: int):
        return self.collection(collection).get(doc_id)

    @_storage_errors
    def create(self, collection: str, data: dict):
        return self.collection(collection).create(data)

    @_storage_errors
    def update(self, collection: str, doc_id: int, data: dict):
        return self.collection(collection).update(doc_id, data)

    @_storage_errors
    def delete(self, collection: str, doc_id: int) -> bool:
        return self.collection(collection).delete(doc_id)

    # ─────────────────────────────────────────────────────────────
    # Source operations
    # ─────────────────────────────────────────────────────────────

    def get_source(self, source_id: int) -> DBSource | None:
        return self.get(SOURCE_COLLECTION, source_id)

    @_storage_errors
    def update_source_fetched(self, source_id: int, error: str | None = None):
        return self.sources.update_fetched(source_id, error)

    # ─────────────────────────────────────────────────────────────
    # Content item operations
    # ─────────────────────────────────────────────────────────────

    def get_content_item(self, item_id: int) -> DBContentItem | None:
        return self.get(CONTENT_ITEM_COLLECTION, item_id)

    @_storage_errors
    def get_content_item_by_url(self, url: str) -> DBContentItem | None:
        return self.content_items.get_by_url(url)
