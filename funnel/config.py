"""
Configuration and application state management.
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from fastapi import HTTPException

if TYPE_CHECKING:
    from .database import Database
    from .feeds import FeedParser
    from .fetcher import Fetcher
    from .analyzer import ContentAnalyzer
    from .providers import LLMProvider

# Load environment variables
load_dotenv()


class Config:
    """Application configuration from environment."""
    # LLM Provider configuration
    # Set one of these API keys based on your preferred provider
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    ANTHROPIC_API_KEY: str = os.getenv("ANTHROPIC_API_KEY", "")

    # Preferred provider: "openai" or "anthropic"
    # If not set, uses the first available key in order: OpenAI > Anthropic
    LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "")

    # Optional: override the default model for the selected provider
    LLM_MODEL: str = os.getenv("LLM_MODEL", "")

    DB_PATH: Path = Path(os.getenv("DB_PATH", "./data/funnel.db"))
    PORT: int = int(os.getenv("PORT", "5005"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Required X-API-Key value for pipeline and management routes (empty = open)
    AUTH_API_KEY: str = os.getenv("AUTH_API_KEY", "")

    # Pipeline budgets
    FETCH_TIMEOUT: int = int(os.getenv("FETCH_TIMEOUT", "10"))  # seconds
    FEED_TIMEOUT: int = int(os.getenv("FEED_TIMEOUT", "30"))  # seconds
    ENRICH_BATCH_SIZE: int = int(os.getenv("ENRICH_BATCH_SIZE", "10"))
    ANALYSIS_CONTENT_LIMIT: int = int(os.getenv("ANALYSIS_CONTENT_LIMIT", "4000"))  # chars
    ANALYSIS_MAX_TOKENS: int = int(os.getenv("ANALYSIS_MAX_TOKENS", "1000"))
    ANALYSIS_TEMPERATURE: float = float(os.getenv("ANALYSIS_TEMPERATURE", "0.3"))

    # Items per page in the public feed
    FEED_PAGE_SIZE: int = int(os.getenv("FEED_PAGE_SIZE", "20"))


config = Config()


class AppState:
    """Shared application state."""
    db: "Database | None" = None
    provider: "LLMProvider | None" = None  # LLM provider instance
    analyzer: "ContentAnalyzer | None" = None
    feed_parser: "FeedParser | None" = None
    fetcher: "Fetcher | None" = None


state = AppState()


def get_db() -> "Database":
    """Dependency to get database instance."""
    if not state.db:
        raise HTTPException(status_code=500, detail="Database not initialized")
    return state.db
