"""Website fetching for GEO audits"""
import logging
from typing import List, Optional, Tuple
from urllib.parse import urldefrag, urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from rbm.core.config import settings

logger = logging.getLogger(__name__)

SKIPPED_SCHEMES = ("mailto:", "tel:", "javascript:", "data:")


def discover_internal_links(html: str, base_url: str, limit: int = 5) -> List[str]:
    """
    Collect same-host links from a page, in document order.

    Args:
        html: Page HTML
        base_url: URL the HTML was fetched from
        limit: Maximum number of URLs to return

    Returns:
        Absolute, de-duplicated URLs (fragments dropped, base URL excluded)
    """
    base_host = (urlparse(base_url).hostname or "").lower()
    base_clean = urldefrag(base_url)[0].rstrip("/")
    soup = BeautifulSoup(html or "", "html.parser")
    found: List[str] = []

    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not href or href.startswith("#") or href.lower().startswith(SKIPPED_SCHEMES):
            continue
        try:
            absolute = urldefrag(urljoin(base_url, href))[0]
            parsed = urlparse(absolute)
            host = (parsed.hostname or "").lower()
        except ValueError:
            # e.g. "http://[oops/x" (unbalanced IPv6 bracket)
            continue
        if parsed.scheme not in ("http", "https") or host != base_host:
            continue
        if absolute.rstrip("/") == base_clean or absolute in found:
            continue
        found.append(absolute)
        if len(found) >= limit:
            break

    return found


class SiteCrawler:
    """Fetches a homepage and, for full audits, a few of its internal pages"""

    def __init__(self, timeout: Optional[float] = None, max_pages: Optional[int] = None, transport=None):
        self.timeout = timeout or settings.fetch_timeout_seconds
        self.max_pages = settings.max_crawl_pages if max_pages is None else max_pages
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self.client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
            headers={
                "User-Agent": settings.user_agent,
                "Accept": "text/html,application/xhtml+xml",
            },
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            await self.client.aclose()

    async def fetch_html(self, url: str) -> Optional[str]:
        """Fetch a page; None on any transport error or non-2xx status"""
        try:
            response = await self.client.get(url)
        except httpx.HTTPError as e:
            logger.info("Fetch failed for %s: %s", url, e.__class__.__name__)
            return None
        if not response.is_success:
            logger.info("Fetch of %s returned %s", url, response.status_code)
            return None
        return response.text

    async def crawl(self, url: str, full: bool = True) -> List[Tuple[str, str]]:
        """
        Fetch the homepage and up to ``max_pages`` linked pages.

        Returns:
            List of (url, html); empty when the homepage itself failed
        """
        homepage = await self.fetch_html(url)
        if homepage is None:
            return []

        pages = [(url, homepage)]
        if not full or self.max_pages <= 0:
            return pages

        for page_url in discover_internal_links(homepage, url, limit=self.max_pages):
            html = await self.fetch_html(page_url)
            if html is not None:
                pages.append((page_url, html))

        logger.info("Crawled %d page(s) from %s", len(pages), url)
        return pages
