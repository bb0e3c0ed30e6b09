"""
Database module - SQLite document store for sources and content items.

Uses repository pattern for better separation of concerns.
"""

from .connection import DatabaseConnection
from .models import DBContentItem, DBSource, FindResult
from .source_repository import SourceRepository
from .content_repository import ContentItemRepository
from .database import CONTENT_ITEM_COLLECTION, SOURCE_COLLECTION, Database

__all__ = [
    "Database",
    "DatabaseConnection",
    "DBContentItem",
    "DBSource",
    "FindResult",
    "SourceRepository",
    "ContentItemRepository",
    "SOURCE_COLLECTION",
    "CONTENT_ITEM_COLLECTION",
]
