"""
Content Fetcher - Retrieve article pages and reduce them to analyzable text.

Handles:
- HTTP fetching with browser-like headers and a bounded total timeout
- Blocking of non-HTTP schemes and internal network targets
- HTML reduction via the lightweight optimizer
- Title fallback so a failed fetch never aborts a batch
"""

import asyncio
import ipaddress
import logging
from urllib.parse import urljoin, urlparse

import aiohttp

from .exceptions import FetchError
from .html_optimizer import LIGHTWEIGHT_MAX_LENGTH, optimize_html_lightweight

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = {"http", "https"}

BLOCKED_HOSTNAMES = {
    "localhost",
    "localhost.localdomain",
    "metadata",
    "metadata.google.internal",
}

BLOCKED_HOST_SUFFIXES = (".local", ".internal", ".localhost")

REDIRECT_STATUSES = {301, 302, 303, 307, 308}
MAX_REDIRECTS = 10


class Fetcher:
    """Fetches article pages and returns reduced text."""

    def __init__(
        self,
        timeout: int = 10,
        user_agent: str | None = None,
        max_length: int = LIGHTWEIGHT_MAX_LENGTH,
    ):
        self.timeout = timeout
        self.max_length = max_length
        self.user_agent = user_agent or "Mozilla/5.0 (compatible; FunnelContentProcessor/1.0)"
        self.headers = {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        }

    async def fetch_html(self, url: str) -> str:
        """
        Fetch raw HTML from a URL.

        Raises:
            FetchError: If the URL or a redirect target is not allowed, the request times out,
                the server answers with a non-2xx status, or the network fails
        """
        check_url(url)

        try:
            return await asyncio.wait_for(self._download(url), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise FetchError(url, f"timed out after {self.timeout}s")
        except aiohttp.ClientResponseError as e:
            raise FetchError(url, f"HTTP {e.status}: {e.message}")
        except aiohttp.ClientError as e:
            raise FetchError(url, str(e) or type(e).__name__)
        except (LookupError, UnicodeDecodeError) as e:
            # Unknown or lying charset declaration
            raise FetchError(url, f"undecodable response: {e}")

    async def _download(self, url: str) -> str:
        """Follow redirects by hand so every hop passes check_url."""
        async with aiohttp.ClientSession(headers=self.headers) as session:
            for _ in range(MAX_REDIRECTS + 1):
                async with session.get(
                    url,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                    allow_redirects=False,
                ) as resp:
                    location = resp.headers.get("Location")
                    if resp.status in REDIRECT_STATUSES and location:
                        url = check_url(urljoin(str(resp.url), location))
                        continue
                    resp.raise_for_status()
                    return await resp.text(errors="replace")

        raise FetchError(url, f"more than {MAX_REDIRECTS} redirects")

    async def fetch_text(self, url: str) -> str:
        """Fetch a page and reduce it to at most max_length characters of text."""
        html = await self.fetch_html(url)
        return optimize_html_lightweight(html, max_length=self.max_length)

    async def fetch_content(self, url: str, fallback: str = "") -> str:
        """
        Fetch and reduce a page, degrading to fallback instead of raising.

        Args:
            url: Page to fetch
            fallback: Text returned on fetch failure or empty page (usually the title)

        Returns:
            Reduced page text, or fallback
        """
        try:
            text = await self.fetch_text(url)
        except FetchError as e:
            logger.warning(f"{e}; falling back to title")
            return fallback

        if not text:
            logger.warning(f"No text extracted from {url}; falling back to title")
            return fallback

        return text


def check_url(url: str) -> str:
    """
    Reject URLs that should never be fetched server-side.

    Only the literal host is checked; no DNS lookups happen here.

    Raises:
        FetchError: If the URL is malformed, not http(s), or points at an internal host
    """
    try:
        parsed = urlparse(url or "")
        hostname = parsed.hostname
    except ValueError:
        # Unbalanced IPv6 brackets and similar
        raise FetchError(url, "malformed URL")

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise FetchError(url, f"scheme '{parsed.scheme}' is not allowed")

    if not hostname:
        raise FetchError(url, "URL must include a hostname")

    hostname = hostname.lower()
    if hostname in BLOCKED_HOSTNAMES or hostname.endswith(BLOCKED_HOST_SUFFIXES):
        raise FetchError(url, f"access to '{hostname}' is not allowed")

    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        return url

    if ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_reserved or ip.is_unspecified:
        raise FetchError(url, f"access to IP address '{ip}' is not allowed")

    return url
