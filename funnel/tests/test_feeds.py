"""
Tests for RSS/Atom feed parsing.
"""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from funnel.exceptions import FeedFetchError
from funnel.feeds import FeedParser, parse_feed

RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Example Blog</title>
    <link>https://example.com</link>
    <item>
      <title>First post</title>
      <link>https://example.com/first</link>
      <description>&lt;p&gt;Hello world&lt;/p&gt;</description>
      <pubDate>Mon, 06 Jan 2025 10:30:00 GMT</pubDate>
    </item>
    <item>
      <title>Second post</title>
      <link>https://example.com/second</link>
    </item>
  </channel>
</rss>
"""

ATOM_FEED = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Example</title>
  <entry>
    <title>Atom entry</title>
    <link rel="alternate" href="https://example.org/entry"/>
    <updated>2025-02-03T08:00:00+02:00</updated>
    <content type="html">&lt;p&gt;Full content&lt;/p&gt;</content>
    <summary>Short summary</summary>
  </entry>
</feed>
"""


class TestParseFeed:
    """Tests for parsing already-fetched feed text."""

    def test_rss_entries(self):
        feed = parse_feed(RSS_FEED, "https://example.com/feed.xml")

        assert feed.title == "Example Blog"
        assert feed.url == "https://example.com/feed.xml"
        assert len(feed.entries) == 2

        first = feed.entries[0]
        assert first.url == "https://example.com/first"
        assert first.title == "First post"
        assert "Hello world" in first.content
        assert first.published == datetime(2025, 1, 6, 10, 30, tzinfo=timezone.utc)

    def test_missing_date_is_none(self):
        feed = parse_feed(RSS_FEED)
        assert feed.entries[1].published is None
        assert feed.entries[1].content == ""

    def test_atom_prefers_content_and_normalizes_to_utc(self):
        feed = parse_feed(ATOM_FEED)
        entry = feed.entries[0]

        assert entry.url == "https://example.org/entry"
        assert "Full content" in entry.content
        assert entry.published == datetime(2025, 2, 3, 6, 0, tzinfo=timezone.utc)

    def test_untitled_entry(self):
        feed = parse_feed(
            '<rss version="2.0"><channel><title>x</title>'
            "<item><link>https://example.com/a</link></item></channel></rss>"
        )
        assert feed.entries[0].title == "Untitled"

    def test_not_a_feed(self):
        with pytest.raises(FeedFetchError):
            parse_feed("this is not < a feed", "https://example.com/broken")


class TestFeedParserFetch:
    """Tests for network error mapping."""

    @pytest.mark.asyncio
    async def test_fetch_parses_downloaded_feed(self):
        parser = FeedParser()
        with patch.object(FeedParser, "_download", AsyncMock(return_value=RSS_FEED)):
            feed = await parser.fetch("https://example.com/feed.xml")
        assert len(feed.entries) == 2

    @pytest.mark.asyncio
    async def test_timeout(self):
        parser = FeedParser(timeout=30)
        with patch.object(FeedParser, "_download", AsyncMock(side_effect=asyncio.TimeoutError())):
            with pytest.raises(FeedFetchError, match="timed out"):
                await parser.fetch("https://example.com/feed.xml")

    @pytest.mark.asyncio
    async def test_network_error(self):
        parser = FeedParser()
        with patch.object(FeedParser, "_download", AsyncMock(side_effect=aiohttp.ClientConnectionError("boom"))):
            with pytest.raises(FeedFetchError, match="boom"):
                await parser.fetch("https://example.com/feed.xml")
