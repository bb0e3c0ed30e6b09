"""
Pipeline routes: trigger ingestion and enrichment batches.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..auth import verify_api_key
from ..exceptions import PipelineError
from ..schemas import PipelineResponse
from ..services import EnrichmentServiceDep, IngestionServiceDep

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1",
    tags=["pipelines"],
    dependencies=[Depends(verify_api_key)]
)


def _failure(message: str, error: Exception) -> JSONResponse:
    statistics = error.statistics if isinstance(error, PipelineError) else {}
    body = PipelineResponse(
        success=False,
        message=message,
        statistics=statistics,
        error=str(error) or type(error).__name__,
    )
    return JSONResponse(status_code=500, content=body.model_dump())


@router.get("/fetchSources", response_model_exclude_none=True)
async def fetch_sources(service: IngestionServiceDep) -> PipelineResponse:
    """Pull new entries from every active RSS source."""
    try:
        stats = await service.run()
    except Exception as e:
        logger.exception("Source ingestion failed")
        return _failure("Failed to fetch sources", e)

    return PipelineResponse(
        success=True,
        message=f"Fetched {stats.sources} sources: {stats.processed} new items",
        statistics=stats.as_dict(),
    )


@router.get("/processContentItems", response_model_exclude_none=True)
async def process_content_items(service: EnrichmentServiceDep) -> PipelineResponse:
    """Enrich the next batch of unprocessed content items."""
    try:
        stats = await service.run()
    except Exception as e:
        logger.exception("Content enrichment failed")
        return _failure("Failed to process content items", e)

    return PipelineResponse(
        success=True,
        message=f"Processed {stats.processed} of {stats.total_items} content items",
        statistics=stats.as_dict(),
    )
