"""
Source routes: manage the RSS sources the ingestion pipeline reads.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth import verify_api_key
from ..config import get_db
from ..database import SOURCE_COLLECTION, Database
from ..exceptions import PersistenceError, require_source
from ..schemas import CreateSourceRequest, SourceResponse, UpdateSourceRequest

router = APIRouter(
    prefix="/sources",
    tags=["sources"],
    dependencies=[Depends(verify_api_key)]
)


@router.get("")
async def list_sources(
    db: Annotated[Database, Depends(get_db)],
    active_only: bool = Query(default=False)
) -> list[SourceResponse]:
    """List all sources."""
    where = {"is_active": {"equals": True}} if active_only else None
    result = db.find(SOURCE_COLLECTION, where=where, sort="name", limit=0)
    return [SourceResponse.from_db(s) for s in result.docs]


@router.post("", status_code=201)
async def add_source(
    request: CreateSourceRequest,
    db: Annotated[Database, Depends(get_db)]
) -> SourceResponse:
    """Add a source."""
    try:
        source = db.create(SOURCE_COLLECTION, request.model_dump())
    except PersistenceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SourceResponse.from_db(source)


@router.get("/{source_id}")
async def get_source(
    source_id: int,
    db: Annotated[Database, Depends(get_db)]
) -> SourceResponse:
    """Get a single source."""
    return SourceResponse.from_db(require_source(db.get_source(source_id)))


@router.put("/{source_id}")
async def update_source(
    source_id: int,
    request: UpdateSourceRequest,
    db: Annotated[Database, Depends(get_db)]
) -> SourceResponse:
    """Update a source's details."""
    require_source(db.get_source(source_id))

    try:
        source = db.update(SOURCE_COLLECTION, source_id, request.model_dump(exclude_unset=True))
    except PersistenceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SourceResponse.from_db(source)


@router.delete("/{source_id}")
async def delete_source(
    source_id: int,
    db: Annotated[Database, Depends(get_db)]
) -> dict:
    """Delete a source. Its content items are kept."""
    require_source(db.get_source(source_id))
    db.delete(SOURCE_COLLECTION, source_id)
    return {"success": True}
