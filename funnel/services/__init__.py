"""
Service layer for the batch pipelines.

Services encapsulate pipeline logic, keeping routes as thin HTTP adapters.
Each service receives its dependencies via constructor injection.

Usage in routes:
    from ..services import EnrichmentServiceDep

    @router.get("/api/v1/processContentItems")
    async def process_content_items(service: EnrichmentServiceDep):
        return await service.run()
"""

from typing import Annotated

from fastapi import Depends, HTTPException

from ..config import config, state, get_db
from ..database import Database

from .enrichment_service import EnrichmentService, EnrichmentStats
from .ingestion_service import IngestionService, IngestionStats

__all__ = [
    # Services
    "EnrichmentService",
    "IngestionService",
    "EnrichmentStats",
    "IngestionStats",
    # Dependency factories
    "get_enrichment_service",
    "get_ingestion_service",
    # Type aliases for dependency injection
    "EnrichmentServiceDep",
    "IngestionServiceDep",
]


def get_enrichment_service(db: Annotated[Database, Depends(get_db)]) -> EnrichmentService:
    """Dependency to get EnrichmentService instance."""
    if not state.analyzer:
        raise HTTPException(status_code=503, detail="No LLM provider configured")
    if not state.fetcher:
        raise HTTPException(status_code=500, detail="Fetcher not initialized")
    return EnrichmentService(
        db=db,
        fetcher=state.fetcher,
        analyzer=state.analyzer,
        batch_size=config.ENRICH_BATCH_SIZE,
    )


def get_ingestion_service(db: Annotated[Database, Depends(get_db)]) -> IngestionService:
    """Dependency to get IngestionService instance."""
    if not state.feed_parser:
        raise HTTPException(status_code=500, detail="Feed parser not initialized")
    return IngestionService(
        db=db,
        feed_parser=state.feed_parser,
    )


EnrichmentServiceDep = Annotated[EnrichmentService, Depends(get_enrichment_service)]
IngestionServiceDep = Annotated[IngestionService, Depends(get_ingestion_service)]
