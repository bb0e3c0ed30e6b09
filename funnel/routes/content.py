"""
Content routes: the paginated weekly feed and operator edits.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth import verify_api_key
from ..config import config, get_db
from ..database import CONTENT_ITEM_COLLECTION, Database
from ..exceptions import PersistenceError, require_item
from ..schemas import ContentItemResponse, ContentPageResponse, UpdateContentItemRequest

public_router = APIRouter(prefix="/content", tags=["content"])

router = APIRouter(
    prefix="/content",
    tags=["content"],
    dependencies=[Depends(verify_api_key)]
)


def iso_week_range(year: int, week: int) -> tuple[datetime, datetime]:
    """
    UTC bounds [start, end) of an ISO week, Monday to Monday.

    Raises:
        ValueError: If the week does not exist in that ISO year
    """
    monday = date.fromisocalendar(year, week, 1)
    start = datetime.combine(monday, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=7)


# ─────────────────────────────────────────────────────────────
# Feed
# ─────────────────────────────────────────────────────────────

@public_router.get("")
async def list_content(
    db: Annotated[Database, Depends(get_db)],
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1, le=100),
    year: int | None = Query(default=None, ge=1, le=9999),
    week: int | None = Query(default=None, ge=1, le=53)
) -> ContentPageResponse:
    """Processed, visible items, newest first, optionally for one ISO week."""
    where: dict = {
        "is_processed": {"equals": True},
        "hidden": {"not_equals": True},
    }

    if (year is None) != (week is None):
        raise HTTPException(status_code=400, detail="year and week must be given together")

    if year is not None:
        try:
            start, end = iso_week_range(year, week)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"{year} has no ISO week {week}")
        where["publish_date"] = {"greater_than_equal": start, "less_than": end}

    result = db.find(
        CONTENT_ITEM_COLLECTION,
        where=where,
        sort="-publish_date",
        limit=limit or config.FEED_PAGE_SIZE,
        page=page,
    )

    return ContentPageResponse(
        docs=[ContentItemResponse.from_db(item) for item in result.docs],
        total_docs=result.total_docs,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
        has_next_page=result.has_next_page,
        year=year,
        week=week,
    )


@public_router.get("/{item_id}")
async def get_content_item(
    item_id: int,
    db: Annotated[Database, Depends(get_db)]
) -> ContentItemResponse:
    """Get a single content item with its text."""
    item = require_item(db.get_content_item(item_id))
    return ContentItemResponse.from_db(item, include_content=True)


# ─────────────────────────────────────────────────────────────
# Operator Edits
# ─────────────────────────────────────────────────────────────

@router.patch("/{item_id}")
async def update_content_item(
    item_id: int,
    request: UpdateContentItemRequest,
    db: Annotated[Database, Depends(get_db)]
) -> ContentItemResponse:
    """Edit enrichment fields, interest indices or visibility."""
    require_item(db.get_content_item(item_id))

    try:
        item = db.update(CONTENT_ITEM_COLLECTION, item_id, request.model_dump(exclude_unset=True))
    except PersistenceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ContentItemResponse.from_db(item, include_content=True)
