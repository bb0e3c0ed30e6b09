"""
Tests for the content fetcher and URL checks.
"""

import asyncio
from unittest.mock import AsyncMock, Mock, patch

import aiohttp
import pytest

from funnel.exceptions import FetchError
from funnel.fetcher import Fetcher, check_url


class TestCheckUrl:
    """Tests for server-side fetch restrictions."""

    def test_allows_public_http_urls(self):
        assert check_url("https://example.com/post") == "https://example.com/post"
        assert check_url("http://93.184.216.34/page") == "http://93.184.216.34/page"

    @pytest.mark.parametrize("url", [
        "file:///etc/passwd",
        "ftp://example.com/file",
        "javascript:alert(1)",
        "",
    ])
    def test_rejects_other_schemes(self, url):
        with pytest.raises(FetchError):
            check_url(url)

    @pytest.mark.parametrize("url", [
        "http://localhost/admin",
        "http://127.0.0.1:8080/",
        "http://10.0.0.5/",
        "http://192.168.1.1/",
        "http://169.254.169.254/latest/meta-data/",
        "http://[::1]/",
        "http://printer.local/",
        "http://metadata.google.internal/",
        "http://0.0.0.0/",
    ])
    def test_rejects_internal_hosts(self, url):
        with pytest.raises(FetchError):
            check_url(url)

    def test_rejects_missing_hostname(self):
        with pytest.raises(FetchError, match="hostname"):
            check_url("http:///path")

    @pytest.mark.parametrize("url", [
        "http://[::1",
        "https://[example.com/post",
    ])
    def test_rejects_malformed_hosts(self, url):
        with pytest.raises(FetchError, match="malformed URL"):
            check_url(url)


class TestFetchHtml:
    """Tests for error mapping on page fetches."""

    @pytest.mark.asyncio
    async def test_returns_downloaded_html(self):
        fetcher = Fetcher()
        with patch.object(Fetcher, "_download", AsyncMock(return_value="<p>Hi</p>")):
            assert await fetcher.fetch_html("https://example.com/a") == "<p>Hi</p>"

    @pytest.mark.asyncio
    async def test_timeout_raises_fetch_error(self):
        fetcher = Fetcher(timeout=10)
        with patch.object(Fetcher, "_download", AsyncMock(side_effect=asyncio.TimeoutError())):
            with pytest.raises(FetchError, match="timed out after 10s"):
                await fetcher.fetch_html("https://example.com/slow")

    @pytest.mark.asyncio
    async def test_http_error_raises_fetch_error(self):
        error = aiohttp.ClientResponseError(
            request_info=Mock(real_url="https://example.com/missing"),
            history=(),
            status=404,
            message="Not Found",
        )
        fetcher = Fetcher()
        with patch.object(Fetcher, "_download", AsyncMock(side_effect=error)):
            with pytest.raises(FetchError, match="HTTP 404"):
                await fetcher.fetch_html("https://example.com/missing")

    @pytest.mark.asyncio
    async def test_network_error_raises_fetch_error(self):
        fetcher = Fetcher()
        with patch.object(Fetcher, "_download", AsyncMock(side_effect=aiohttp.ClientConnectionError("refused"))):
            with pytest.raises(FetchError, match="refused"):
                await fetcher.fetch_html("https://example.com/down")

    @pytest.mark.asyncio
    async def test_blocked_url_never_downloads(self):
        fetcher = Fetcher()
        download = AsyncMock(return_value="<p>secret</p>")
        with patch.object(Fetcher, "_download", download):
            with pytest.raises(FetchError):
                await fetcher.fetch_html("http://127.0.0.1/admin")
        download.assert_not_called()


class TestFetchContent:
    """Tests for reduced text with title fallback."""

    @pytest.mark.asyncio
    async def test_reduces_page_to_text(self):
        html = "<html><head><title>T</title></head><body><p>Article body</p></body></html>"
        fetcher = Fetcher()
        with patch.object(Fetcher, "_download", AsyncMock(return_value=html)):
            assert await fetcher.fetch_content("https://example.com/a", fallback="Title") == "Article body"

    @pytest.mark.asyncio
    async def test_respects_max_length(self):
        html = "<body>" + "x" * 20000 + "</body>"
        fetcher = Fetcher(max_length=100)
        with patch.object(Fetcher, "_download", AsyncMock(return_value=html)):
            text = await fetcher.fetch_content("https://example.com/a")
        assert len(text) == 100

    @pytest.mark.asyncio
    async def test_timeout_falls_back_to_title(self):
        fetcher = Fetcher()
        with patch.object(Fetcher, "_download", AsyncMock(side_effect=asyncio.TimeoutError())):
            text = await fetcher.fetch_content("https://example.com/slow", fallback="The Title")
        assert text == "The Title"

    @pytest.mark.asyncio
    async def test_empty_page_falls_back_to_title(self):
        fetcher = Fetcher()
        with patch.object(Fetcher, "_download", AsyncMock(return_value="<html><body><script>x()</script></body></html>")):
            text = await fetcher.fetch_content("https://example.com/js-only", fallback="The Title")
        assert text == "The Title"

    @pytest.mark.asyncio
    async def test_malformed_url_falls_back_to_title(self):
        fetcher = Fetcher(timeout=2)
        download = AsyncMock(return_value="<p>never</p>")
        with patch.object(Fetcher, "_download", download):
            text = await fetcher.fetch_content("http://[::1", fallback="The Title")
        assert text == "The Title"
        download.assert_not_called()


class _FakeResponse:
    def __init__(self, url, status=200, location=None, body=""):
        self.url = url
        self.status = status
        self.headers = {"Location": location} if location else {}
        self.body = body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status >= 400:
            raise aiohttp.ClientResponseError(
                request_info=Mock(real_url=self.url),
                history=(),
                status=self.status,
                message="Error",
            )

    async def text(self, errors="strict"):
        return self.body


class _FakeSession:
    """Serves one canned response per requested URL."""

    def __init__(self, responses):
        self.responses = responses
        self.requested = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def get(self, url, **kwargs):
        self.requested.append((url, kwargs.get("allow_redirects")))
        return self.responses[url]


class TestRedirects:
    """Tests for redirect handling in page downloads."""

    @pytest.mark.asyncio
    async def test_follows_relative_redirect(self):
        session = _FakeSession({
            "https://example.com/a": _FakeResponse("https://example.com/a", status=301, location="/final"),
            "https://example.com/final": _FakeResponse("https://example.com/final", body="<p>Moved here</p>"),
        })
        with patch("funnel.fetcher.aiohttp.ClientSession", return_value=session):
            html = await Fetcher().fetch_html("https://example.com/a")

        assert html == "<p>Moved here</p>"
        assert session.requested == [
            ("https://example.com/a", False),
            ("https://example.com/final", False),
        ]

    @pytest.mark.asyncio
    async def test_redirect_to_internal_host_is_blocked(self):
        session = _FakeSession({
            "https://example.com/a": _FakeResponse(
                "https://example.com/a", status=302, location="http://169.254.169.254/latest/meta-data/"
            ),
        })
        with patch("funnel.fetcher.aiohttp.ClientSession", return_value=session):
            with pytest.raises(FetchError, match="169.254.169.254"):
                await Fetcher().fetch_html("https://example.com/a")

        assert [url for url, _ in session.requested] == ["https://example.com/a"]

    @pytest.mark.asyncio
    async def test_blocked_redirect_falls_back_to_title(self):
        session = _FakeSession({
            "https://example.com/a": _FakeResponse("https://example.com/a", status=307, location="http://localhost/admin"),
        })
        with patch("funnel.fetcher.aiohttp.ClientSession", return_value=session):
            text = await Fetcher().fetch_content("https://example.com/a", fallback="The Title")

        assert text == "The Title"

    @pytest.mark.asyncio
    async def test_redirect_loop_is_bounded(self):
        session = _FakeSession({
            "https://example.com/loop": _FakeResponse("https://example.com/loop", status=302, location="/loop"),
        })
        with patch("funnel.fetcher.aiohttp.ClientSession", return_value=session):
            with pytest.raises(FetchError, match="redirects"):
                await Fetcher().fetch_html("https://example.com/loop")

        assert len(session.requested) == 11
