"""
Error types for the ingestion and enrichment pipelines, plus HTTP helpers
for common 404 patterns in routes.
"""

from typing import TypeVar

from fastapi import HTTPException

T = TypeVar("T")


class FunnelError(Exception):
    """Base class for all Funnel errors."""


class FetchError(FunnelError):
    """Raised when an article page cannot be retrieved (network, timeout, non-2xx)."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class FeedFetchError(FunnelError):
    """Raised when an RSS feed cannot be retrieved or parsed."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch feed {url}: {reason}")


class ResponseParseError(FunnelError):
    """Raised when the LLM response is missing or is not a JSON object."""


class PersistenceError(FunnelError):
    """Raised when a store read or write fails."""


class PipelineError(FunnelError):
    """
    Raised when a pipeline run fails before or outside per-item work.

    Carries whatever statistics were gathered before the failure so callers
    can still report them.
    """

    def __init__(self, message: str, statistics: dict | None = None):
        self.statistics = statistics or {}
        super().__init__(message)


def require_resource(resource: T | None, detail: str = "Resource not found") -> T:
    """
    Raise 404 if resource is None, otherwise return the resource.

    Usage:
        source = require_resource(db.get_source(id), "Source not found")
    """
    if resource is None:
        raise HTTPException(status_code=404, detail=detail)
    return resource


def require_source(source: T | None) -> T:
    """Raise 404 if source is None."""
    return require_resource(source, "Source not found")


def require_item(item: T | None) -> T:
    """Raise 404 if content item is None."""
    return require_resource(item, "Content item not found")
