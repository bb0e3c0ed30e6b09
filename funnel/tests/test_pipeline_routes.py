"""
Tests for the batch pipeline endpoints.
"""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

from funnel.config import state
from funnel.database import CONTENT_ITEM_COLLECTION
from funnel.exceptions import PipelineError
from funnel.feeds import Feed, FeedEntry, FeedParser
from funnel.services import EnrichmentService, IngestionService


def _feed(*urls):
    return Feed(
        url="https://example.com/feed.xml",
        title="Feed",
        entries=[FeedEntry(url=u, title=f"Post {u}", published=None, content="") for u in urls],
        last_fetched=datetime.now(timezone.utc),
    )


class TestFetchSources:
    """Tests for GET /api/v1/fetchSources."""

    def test_ingests_new_entries(self, client, make_source, make_item, test_db):
        make_source()
        make_item(original_url="https://example.com/old")

        with patch.object(FeedParser, "fetch", AsyncMock(return_value=_feed(
            "https://example.com/new-1", "https://example.com/old", "https://example.com/new-2",
        ))):
            response = client.get("/api/v1/fetchSources")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["statistics"] == {"sources": 1, "processed": 2, "skipped": 1, "errors": 0}
        assert "error" not in data
        assert test_db.count(CONTENT_ITEM_COLLECTION) == 3

    def test_no_sources(self, client):
        response = client.get("/api/v1/fetchSources")

        assert response.status_code == 200
        assert response.json()["statistics"]["sources"] == 0

    def test_unexpected_failure_returns_500(self, client):
        with patch.object(IngestionService, "run", AsyncMock(side_effect=RuntimeError("kaboom"))):
            response = client.get("/api/v1/fetchSources")

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "kaboom"
        assert data["statistics"] == {}
        assert data["message"]


class TestProcessContentItems:
    """Tests for GET /api/v1/processContentItems."""

    def test_enriches_items(self, client, make_item, mock_provider, test_db):
        item = make_item(content="Article text")
        mock_provider.queue_response(json.dumps({
            "summary": "S",
            "keywords": ["k"],
            "category": "news",
            "priority": "high",
            "estimatedReadTime": 3,
            "bulletPoints": ["b"],
        }))

        response = client.get("/api/v1/processContentItems")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["statistics"] == {"total_items": 1, "processed": 1, "skipped": 0, "errors": 0}
        assert test_db.get_content_item(item.id).summary == "S"

    def test_partial_failure_is_still_200(self, client, make_item, mock_provider):
        make_item(content="one")
        make_item(content="two")
        mock_provider.queue_response("not json")
        mock_provider.queue_response("{}")

        response = client.get("/api/v1/processContentItems")

        assert response.status_code == 200
        assert response.json()["statistics"]["errors"] == 1
        assert response.json()["statistics"]["processed"] == 1

    def test_pipeline_error_returns_partial_statistics(self, client):
        error = PipelineError("store unavailable", {"total_items": 0, "processed": 0, "skipped": 0, "errors": 0})
        with patch.object(EnrichmentService, "run", AsyncMock(side_effect=error)):
            response = client.get("/api/v1/processContentItems")

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "store unavailable"
        assert data["statistics"]["total_items"] == 0

    def test_no_provider_returns_503(self, client, make_item):
        make_item()
        state.analyzer = None

        response = client.get("/api/v1/processContentItems")

        assert response.status_code == 503
