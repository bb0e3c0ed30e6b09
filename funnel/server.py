"""
Funnel API Server

FastAPI application providing endpoints for:
- RSS ingestion and LLM enrichment batches
- Source management
- The weekly article feed
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from . import __version__
from .analyzer import ContentAnalyzer
from .config import config, state
from .database import Database
from .feeds import FeedParser
from .fetcher import Fetcher
from .providers import get_provider_from_env
from .routes import (
    pipelines_router,
    sources_router,
    content_router,
    content_public_router,
    misc_router,
)

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize application resources."""
    # Startup - skip if already initialized (e.g., by tests)
    if state.db is None:
        state.db = Database(config.DB_PATH)
        state.feed_parser = FeedParser(timeout=config.FEED_TIMEOUT)
        state.fetcher = Fetcher(timeout=config.FETCH_TIMEOUT)

        state.provider = get_provider_from_env(
            openai_key=config.OPENAI_API_KEY or None,
            anthropic_key=config.ANTHROPIC_API_KEY or None,
            preferred_provider=config.LLM_PROVIDER or None,
            default_model=config.LLM_MODEL or None,
        )

        if state.provider:
            state.analyzer = ContentAnalyzer(
                provider=state.provider,
                max_tokens=config.ANALYSIS_MAX_TOKENS,
                temperature=config.ANALYSIS_TEMPERATURE,
                content_limit=config.ANALYSIS_CONTENT_LIMIT,
            )
            logger.info(f"LLM provider initialized: {state.provider.name}")
        else:
            logger.warning(
                "No LLM API key configured. Set OPENAI_API_KEY or ANTHROPIC_API_KEY. "
                "Content enrichment disabled."
            )

    yield


app = FastAPI(
    title="Funnel API",
    version=__version__,
    lifespan=lifespan
)

# Include routers
app.include_router(misc_router)
app.include_router(pipelines_router)
app.include_router(sources_router)
app.include_router(content_public_router)
app.include_router(content_router)


def main():
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)


if __name__ == "__main__":
    main()
