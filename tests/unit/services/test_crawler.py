"""Unit tests for the audit crawler"""
import httpx
import pytest

from rbm.services.scanning.crawler import SiteCrawler, discover_internal_links

HOMEPAGE = """
<html><body>
  <a href="/services">Services</a>
  <a href="/services#pricing">Pricing</a>
  <a href="https://example.com/about">About</a>
  <a href="https://example.com/">Home</a>
  <a href="https://other.org/">Elsewhere</a>
  <a href="mailto:hi@example.com">Mail</a>
  <a href="/contact">Contact</a>
  <a href="/broken">Broken</a>
</body></html>
"""


def site(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/broken":
        return httpx.Response(500)
    if request.url.path in ("", "/"):
        return httpx.Response(200, text=HOMEPAGE)
    return httpx.Response(200, text=f"<html><title>{request.url.path}</title></html>")


class TestDiscoverInternalLinks:
    """Tests for link discovery"""

    def test_same_host_links_in_order(self):
        links = discover_internal_links(HOMEPAGE, "https://example.com/")

        assert links == [
            "https://example.com/services",
            "https://example.com/about",
            "https://example.com/contact",
            "https://example.com/broken",
        ]

    def test_limit(self):
        assert len(discover_internal_links(HOMEPAGE, "https://example.com/", limit=2)) == 2

    def test_empty_html(self):
        assert discover_internal_links("", "https://example.com/") == []

    def test_malformed_href_is_skipped(self):
        html = '<a href="http://[oops/x">bad</a><a href="/about">About</a>'

        assert discover_internal_links(html, "https://example.com/") == ["https://example.com/about"]


class TestSiteCrawler:
    """Tests for SiteCrawler"""

    @pytest.mark.asyncio
    async def test_full_crawl_skips_failed_pages(self):
        async with SiteCrawler(transport=httpx.MockTransport(site)) as crawler:
            pages = await crawler.crawl("https://example.com/")

        assert [url for url, _ in pages] == [
            "https://example.com/",
            "https://example.com/services",
            "https://example.com/about",
            "https://example.com/contact",
        ]
        assert pages[0][1] == HOMEPAGE

    @pytest.mark.asyncio
    async def test_quick_crawl_fetches_homepage_only(self):
        async with SiteCrawler(transport=httpx.MockTransport(site)) as crawler:
            pages = await crawler.crawl("https://example.com/", full=False)

        assert len(pages) == 1

    @pytest.mark.asyncio
    async def test_max_pages(self):
        async with SiteCrawler(max_pages=1, transport=httpx.MockTransport(site)) as crawler:
            pages = await crawler.crawl("https://example.com/")

        assert len(pages) == 2

    @pytest.mark.asyncio
    async def test_unreachable_homepage(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        async with SiteCrawler(transport=httpx.MockTransport(handler)) as crawler:
            assert await crawler.crawl("https://example.com/") == []

    @pytest.mark.asyncio
    async def test_error_status_homepage(self):
        async with SiteCrawler(transport=httpx.MockTransport(lambda r: httpx.Response(404))) as crawler:
            assert await crawler.fetch_html("https://example.com/") is None

    @pytest.mark.asyncio
    async def test_full_crawl_with_malformed_link(self):
        def handler(request):
            if request.url.path in ("", "/"):
                return httpx.Response(200, text='<a href="http://[oops/x">bad</a><a href="/about">About</a>')
            return httpx.Response(200, text="<h1>About</h1>")

        async with SiteCrawler(transport=httpx.MockTransport(handler)) as crawler:
            pages = await crawler.crawl("https://example.com/")

        assert [url for url, _ in pages] == ["https://example.com/", "https://example.com/about"]
