"""
Pytest fixtures for funnel tests.
"""

import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from funnel.analyzer import ContentAnalyzer
from funnel.config import config, state
from funnel.database import CONTENT_ITEM_COLLECTION, SOURCE_COLLECTION, Database
from funnel.feeds import FeedParser
from funnel.fetcher import Fetcher
from funnel.providers.base import LLMProvider, LLMResponse
from funnel.server import app


class MockProvider(LLMProvider):
    """Mock LLM provider that returns queued responses."""

    def __init__(self):
        self.calls: list[dict] = []
        self.responses: list[str | Exception] = []
        self._call_index = 0

    @property
    def name(self) -> str:
        return "mock"

    @property
    def default_model(self) -> str:
        return "mock-model"

    def queue_response(self, response: str | Exception):
        """Queue text (or an exception to raise) for the next complete() call."""
        self.responses.append(response)

    def complete(
        self,
        user_prompt: str,
        system_prompt: str | None = None,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
        json_mode: bool = False,
    ) -> LLMResponse:
        self.calls.append({
            "user_prompt": user_prompt,
            "system_prompt": system_prompt,
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "json_mode": json_mode,
        })
        response = self.responses[self._call_index] if self._call_index < len(self.responses) else "{}"
        self._call_index += 1
        if isinstance(response, Exception):
            raise response
        return LLMResponse(text=response, model=model or self.default_model)


@pytest.fixture
def temp_db_path():
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        yield Path(f.name)
    # Cleanup
    if os.path.exists(f.name):
        os.unlink(f.name)


@pytest.fixture
def test_db(temp_db_path):
    """Create a test database instance."""
    db = Database(temp_db_path)
    yield db


@pytest.fixture
def mock_provider():
    return MockProvider()


@pytest.fixture
def make_source(test_db):
    """Factory for stored sources."""
    def _make(**fields):
        data = {"name": "Test Feed", "url": "https://example.com/feed.xml"}
        data.update(fields)
        return test_db.create(SOURCE_COLLECTION, data)
    return _make


@pytest.fixture
def make_item(test_db):
    """Factory for stored content items with unique URLs."""
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        data = {
            "title": f"Test Article {counter['n']}",
            "original_url": f"https://example.com/article{counter['n']}",
        }
        data.update(fields)
        return test_db.create(CONTENT_ITEM_COLLECTION, data)
    return _make


@pytest.fixture
def client(test_db, mock_provider, monkeypatch):
    """Create a test client with an isolated database and a mock provider."""
    # Store original state
    original_db = state.db
    original_feed_parser = state.feed_parser
    original_fetcher = state.fetcher
    original_provider = state.provider
    original_analyzer = state.analyzer

    monkeypatch.setattr(config, "AUTH_API_KEY", "")

    # Set up test state with fresh instances
    state.db = test_db
    state.feed_parser = FeedParser()
    state.fetcher = Fetcher()
    state.provider = mock_provider
    state.analyzer = ContentAnalyzer(provider=mock_provider)

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    # Restore original state
    state.db = original_db
    state.feed_parser = original_feed_parser
    state.fetcher = original_fetcher
    state.provider = original_provider
    state.analyzer = original_analyzer
