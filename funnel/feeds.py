"""
Feed Parser - Fetch and parse RSS/Atom feeds.

Handles:
- RSS 2.0 and Atom 1.0 formats via feedparser
- Publish dates normalized to UTC
- Per-domain politeness interval between requests
- FeedFetchError for every retrieval or parse failure
"""

import asyncio
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from urllib.parse import urlparse

import aiohttp
import feedparser

from .exceptions import FeedFetchError


@dataclass
class FeedEntry:
    """A single item from a feed."""
    url: str
    title: str
    published: datetime | None
    content: str


@dataclass
class Feed:
    """A parsed feed."""
    url: str
    title: str
    entries: list[FeedEntry]
    last_fetched: datetime


class FeedParser:
    """Parses RSS/Atom feeds with per-domain rate limiting."""

    def __init__(self, timeout: int = 30, user_agent: str | None = None):
        self.timeout = timeout
        self.user_agent = user_agent or "Funnel/1.0 (+https://github.com/funnel-digest)"
        self._domain_last_fetch: dict[str, float] = {}
        self._min_interval = 1.0  # Minimum seconds between requests to same domain

    async def fetch(self, url: str) -> Feed:
        """
        Fetch and parse a feed URL.

        Raises:
            FeedFetchError: On network errors, timeouts, non-2xx responses,
                or content that is not a feed
        """
        domain = urlparse(url).netloc
        await self._rate_limit(domain)

        try:
            content = await self._download(url)
        except asyncio.TimeoutError:
            raise FeedFetchError(url, f"timed out after {self.timeout}s")
        except aiohttp.ClientResponseError as e:
            raise FeedFetchError(url, f"HTTP {e.status}: {e.message}")
        except (aiohttp.ClientError, ValueError, LookupError) as e:
            raise FeedFetchError(url, str(e) or type(e).__name__)

        return parse_feed(content, url)

    async def _download(self, url: str) -> str:
        headers = {"User-Agent": self.user_agent}

        async with aiohttp.ClientSession() as session:
            async with session.get(
                url,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as resp:
                resp.raise_for_status()
                return await resp.text(errors="replace")

    async def _rate_limit(self, domain: str):
        """Ensure minimum interval between requests to same domain."""
        now = time.monotonic()
        if domain in self._domain_last_fetch:
            elapsed = now - self._domain_last_fetch[domain]
            if elapsed < self._min_interval:
                await asyncio.sleep(self._min_interval - elapsed)
        self._domain_last_fetch[domain] = time.monotonic()


def parse_feed(content: str, url: str = "") -> Feed:
    """
    Parse already-fetched feed text.

    Raises:
        FeedFetchError: If the text is not a feed and yields no entries
    """
    parsed = feedparser.parse(content)

    if parsed.bozo and not parsed.entries:
        raise FeedFetchError(url, f"failed to parse feed: {parsed.bozo_exception}")

    entries = [_to_entry(entry) for entry in parsed.entries]

    return Feed(
        url=url,
        title=parsed.feed.get("title", "Unknown Feed"),
        entries=entries,
        last_fetched=datetime.now(timezone.utc),
    )


def _to_entry(entry) -> FeedEntry:
    # Prefer full content over summary
    content_text = ""
    if entry.get("content"):
        content_text = entry.content[0].get("value", "")
    elif entry.get("summary"):
        content_text = entry.summary
    elif entry.get("description"):
        content_text = entry.description

    # feedparser's *_parsed tuples are UTC
    published = None
    for key in ("published_parsed", "updated_parsed"):
        parsed_time = entry.get(key)
        if parsed_time:
            try:
                published = datetime(*parsed_time[:6], tzinfo=timezone.utc)
                break
            except (TypeError, ValueError):
                continue

    item_url = entry.get("link", "")
    if not item_url:
        for link in entry.get("links", []):
            if link.get("rel") == "alternate" or link.get("type") == "text/html":
                item_url = link.get("href", "")
                break

    return FeedEntry(
        url=item_url.strip(),
        title=(entry.get("title") or "").strip() or "Untitled",
        published=published,
        content=content_text,
    )
