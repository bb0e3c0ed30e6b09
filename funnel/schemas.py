"""
Pydantic models for API request/response validation.
"""

from pydantic import BaseModel, Field

from .database import DBContentItem, DBSource


# ─────────────────────────────────────────────────────────────
# Source Schemas
# ─────────────────────────────────────────────────────────────

class SourceResponse(BaseModel):
    """Feed source."""
    id: int
    name: str
    type: str
    url: str
    is_active: bool
    categories: list[str]
    owner: str | None = None
    last_fetched_at: str | None = None
    fetch_error: str | None = None
    created_at: str

    @classmethod
    def from_db(cls, source: DBSource) -> "SourceResponse":
        return cls(
            id=source.id,
            name=source.name,
            type=source.type,
            url=source.url,
            is_active=source.is_active,
            categories=source.categories,
            owner=source.owner,
            last_fetched_at=source.last_fetched_at.isoformat() if source.last_fetched_at else None,
            fetch_error=source.fetch_error,
            created_at=source.created_at.isoformat(),
        )


class CreateSourceRequest(BaseModel):
    """Request to add a source."""
    name: str = Field(min_length=1)
    url: str = Field(min_length=1)
    type: str = "rss"
    is_active: bool = True
    categories: list[str] = []
    owner: str | None = None


class UpdateSourceRequest(BaseModel):
    """Request to update a source. Omitted fields are left unchanged."""
    name: str | None = Field(default=None, min_length=1)
    url: str | None = Field(default=None, min_length=1)
    type: str | None = None
    is_active: bool | None = None
    categories: list[str] | None = None
    owner: str | None = None


# ─────────────────────────────────────────────────────────────
# Content Schemas
# ─────────────────────────────────────────────────────────────

class ContentItemResponse(BaseModel):
    """Content item with its enrichment."""
    id: int
    title: str
    original_url: str
    source_id: int | None
    publish_date: str | None
    is_processed: bool
    hidden: bool
    content: str | None = None

    summary: str | None = None
    keywords: list[str] = []
    bullet_points: list[str] = []
    category: str | None = None
    priority: str
    estimated_read_time: int | None = None

    philosophy_index: float | None = None
    personal_index: float | None = None
    history_index: float | None = None
    science_index: float | None = None
    ai_index: float | None = None

    created_at: str

    @classmethod
    def from_db(cls, item: DBContentItem, include_content: bool = False) -> "ContentItemResponse":
        return cls(
            id=item.id,
            title=item.title,
            original_url=item.original_url,
            source_id=item.source_id,
            publish_date=item.publish_date.isoformat() if item.publish_date else None,
            is_processed=item.is_processed,
            hidden=item.hidden,
            content=item.content if include_content else None,
            summary=item.summary,
            keywords=item.keywords,
            bullet_points=item.bullet_points,
            category=item.category,
            priority=item.priority,
            estimated_read_time=item.estimated_read_time,
            philosophy_index=item.philosophy_index,
            personal_index=item.personal_index,
            history_index=item.history_index,
            science_index=item.science_index,
            ai_index=item.ai_index,
            created_at=item.created_at.isoformat(),
        )


class ContentPageResponse(BaseModel):
    """One page of the feed."""
    docs: list[ContentItemResponse]
    total_docs: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    year: int | None = None
    week: int | None = None


class UpdateContentItemRequest(BaseModel):
    """Operator edits to a content item. Processing state is not editable."""
    hidden: bool | None = None
    summary: str | None = None
    keywords: list[str] | None = None
    bullet_points: list[str] | None = None
    category: str | None = None
    priority: str | None = Field(default=None, pattern="^(high|medium|low)$")
    estimated_read_time: int | None = Field(default=None, ge=0)

    philosophy_index: float | None = Field(default=None, ge=0, le=10)
    personal_index: float | None = Field(default=None, ge=0, le=10)
    history_index: float | None = Field(default=None, ge=0, le=10)
    science_index: float | None = Field(default=None, ge=0, le=10)
    ai_index: float | None = Field(default=None, ge=0, le=10)


# ─────────────────────────────────────────────────────────────
# Pipeline Schemas
# ─────────────────────────────────────────────────────────────

class PipelineResponse(BaseModel):
    """Result of a batch pipeline run."""
    success: bool
    message: str
    statistics: dict[str, int]
    error: str | None = None
