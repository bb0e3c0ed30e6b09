"""
Database models - dataclasses for stored documents and query results.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")

SOURCE_TYPES = ("rss",)
PRIORITIES = ("high", "medium", "low")

INDEX_FIELDS = (
    "philosophy_index",
    "personal_index",
    "history_index",
    "science_index",
    "ai_index",
)
INDEX_MIN = 0
INDEX_MAX = 10


class FieldType(Enum):
    """Storage type of a document field."""
    TEXT = "text"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    TEXT_LIST = "text_list"  # Stored as JSON text


SOURCE_FIELDS: dict[str, FieldType] = {
    "id": FieldType.INTEGER,
    "name": FieldType.TEXT,
    "type": FieldType.TEXT,
    "url": FieldType.TEXT,
    "is_active": FieldType.BOOLEAN,
    "categories": FieldType.TEXT_LIST,
    "owner": FieldType.TEXT,
    "last_fetched_at": FieldType.DATETIME,
    "fetch_error": FieldType.TEXT,
    "created_at": FieldType.DATETIME,
}

CONTENT_ITEM_FIELDS: dict[str, FieldType] = {
    "id": FieldType.INTEGER,
    "title": FieldType.TEXT,
    "content": FieldType.TEXT,
    "summary": FieldType.TEXT,
    "keywords": FieldType.TEXT_LIST,
    "bullet_points": FieldType.TEXT_LIST,
    "source_id": FieldType.INTEGER,
    "original_url": FieldType.TEXT,
    "publish_date": FieldType.DATETIME,
    "priority": FieldType.TEXT,
    "is_processed": FieldType.BOOLEAN,
    "estimated_read_time": FieldType.INTEGER,
    "category": FieldType.TEXT,
    "philosophy_index": FieldType.NUMBER,
    "personal_index": FieldType.NUMBER,
    "history_index": FieldType.NUMBER,
    "science_index": FieldType.NUMBER,
    "ai_index": FieldType.NUMBER,
    "hidden": FieldType.BOOLEAN,
    "created_at": FieldType.DATETIME,
}


@dataclass
class DBSource:
    id: int
    name: str
    type: str
    url: str
    is_active: bool
    categories: list[str]
    created_at: datetime
    owner: str | None = None
    last_fetched_at: datetime | None = None
    fetch_error: str | None = None


@dataclass
class DBContentItem:
    id: int
    title: str
    original_url: str
    is_processed: bool
    created_at: datetime
    content: str | None = None
    source_id: int | None = None  # No cascade: survives source deletion
    publish_date: datetime | None = None
    hidden: bool = False

    # Enrichment outputs
    summary: str | None = None
    keywords: list[str] = field(default_factory=list)
    bullet_points: list[str] = field(default_factory=list)
    category: str | None = None
    priority: str = "medium"
    estimated_read_time: int | None = None

    # Interest indices, 0-10
    philosophy_index: float | None = None
    personal_index: float | None = None
    history_index: float | None = None
    science_index: float | None = None
    ai_index: float | None = None


@dataclass
class FindResult(Generic[T]):
    """One page of documents matching a query."""
    docs: list[T]
    total_docs: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
