"""Website availability and SEO health checks"""
import asyncio
import logging
import re
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional

import httpx

from rbm.core.config import settings
from rbm.exceptions import UpstreamError

logger = logging.getLogger(__name__)

SITEMAP_PATHS = ("/sitemap.xml", "/sitemap_index.xml", "/sitemap/sitemap.xml")
DISALLOW_ALL_RE = re.compile(r"^\s*disallow\s*:\s*/\s*(?:#.*)?$", re.I | re.M)

HEALTH_WEIGHTS = {
    "robots_txt_exists": 15,
    "robots_txt_valid": 10,
    "robots_txt_allows_crawl": 10,
    "sitemap_exists": 20,
    "sitemap_valid": 15,
    "ssl_valid": 30,
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class AvailabilityResult:
    is_live: bool
    status_code: Optional[int]
    response_time_ms: int
    error_message: Optional[str]
    checked_at: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SeoHealthResult:
    robots_txt_exists: bool = False
    robots_txt_valid: bool = False
    robots_txt_allows_crawl: bool = False
    robots_txt_content: Optional[str] = None
    sitemap_exists: bool = False
    sitemap_valid: bool = False
    sitemap_url_count: int = 0
    sitemap_url: Optional[str] = None
    ssl_valid: bool = False
    # Certificate details need TLS inspection, which plain HTTPS fetches
    # do not expose; these stay None.
    ssl_issuer: Optional[str] = None
    ssl_expires_at: Optional[str] = None
    ssl_days_remaining: Optional[int] = None
    health_score: int = 0
    checked_at: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


def calculate_health_score(result: SeoHealthResult) -> int:
    """Weighted sum of the passed checks, capped at 100"""
    score = sum(weight for name, weight in HEALTH_WEIGHTS.items() if getattr(result, name))
    return min(100, score)


def robots_allows_crawl(content: str) -> bool:
    """False when any group disallows the whole site"""
    return not DISALLOW_ALL_RE.search(content or "")


class WebsiteHealthChecker:
    """Runs availability and robots/sitemap/SSL checks against a site"""

    def __init__(self, timeout: Optional[float] = None, transport=None):
        self.timeout = timeout or settings.fetch_timeout_seconds
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self.client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
            headers={"User-Agent": settings.user_agent},
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            await self.client.aclose()

    async def _head_or_get(self, url: str) -> httpx.Response:
        try:
            return await self.client.head(url)
        except httpx.HTTPError:
            return await self.client.get(url)

    async def check_availability(self, url: str) -> AvailabilityResult:
        """
        Check a URL with HEAD, falling back to GET.

        The whole check is bounded by the configured timeout. Any response
        below 500 counts as live.
        """
        checked_at = _now_iso()
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(self._head_or_get(url), timeout=self.timeout)
        except asyncio.TimeoutError:
            return AvailabilityResult(
                is_live=False,
                status_code=None,
                response_time_ms=int((time.monotonic() - start) * 1000),
                error_message=f"Timed out after {self.timeout:g}s",
                checked_at=checked_at,
            )
        except httpx.HTTPError as e:
            return AvailabilityResult(
                is_live=False,
                status_code=None,
                response_time_ms=int((time.monotonic() - start) * 1000),
                error_message=str(e) or e.__class__.__name__,
                checked_at=checked_at,
            )

        return AvailabilityResult(
            is_live=response.status_code < 500,
            status_code=response.status_code,
            response_time_ms=int((time.monotonic() - start) * 1000),
            error_message=None,
            checked_at=checked_at,
        )

    async def check_robots_txt(self, base_url: str) -> dict:
        try:
            response = await self.client.get(f"{base_url}/robots.txt")
        except httpx.HTTPError:
            return {"exists": False, "valid": False, "allows_crawl": False, "content": None}
        if not response.is_success:
            return {"exists": False, "valid": False, "allows_crawl": False, "content": None}

        content = response.text
        return {
            "exists": True,
            "valid": "user-agent" in content.lower(),
            "allows_crawl": robots_allows_crawl(content),
            "content": content,
        }

    async def check_sitemap(self, base_url: str) -> dict:
        for path in SITEMAP_PATHS:
            url = f"{base_url}{path}"
            try:
                response = await self.client.get(url)
            except httpx.HTTPError:
                continue
            if response.is_success:
                content = response.text
                return {
                    "exists": True,
                    "valid": "<urlset" in content or "<sitemapindex" in content,
                    "url_count": content.count("<loc>"),
                    "url": url,
                }
        return {"exists": False, "valid": False, "url_count": 0, "url": None}

    async def check_ssl(self, base_url: str) -> bool:
        """True when the site answers over HTTPS with a non-5xx status"""
        https_url = re.sub(r"^http://", "https://", base_url, flags=re.I)
        try:
            response = await self.client.head(https_url)
        except httpx.HTTPError:
            return False
        return response.status_code < 500

    async def check_seo_health(self, base_url: str) -> SeoHealthResult:
        """Run robots.txt, sitemap and SSL checks concurrently"""
        base_url = base_url.rstrip("/")
        checked_at = _now_iso()
        try:
            robots, sitemap, ssl_valid = await asyncio.wait_for(
                asyncio.gather(
                    self.check_robots_txt(base_url),
                    self.check_sitemap(base_url),
                    self.check_ssl(base_url),
                ),
                timeout=self.timeout * 2,
            )
        except asyncio.TimeoutError:
            raise UpstreamError("SEO health check timed out", provider="website", provider_status=504)

        result = SeoHealthResult(
            robots_txt_exists=robots["exists"],
            robots_txt_valid=robots["valid"],
            robots_txt_allows_crawl=robots["allows_crawl"],
            robots_txt_content=robots["content"],
            sitemap_exists=sitemap["exists"],
            sitemap_valid=sitemap["valid"],
            sitemap_url_count=sitemap["url_count"],
            sitemap_url=sitemap["url"],
            ssl_valid=ssl_valid,
            checked_at=checked_at,
        )
        result.health_score = calculate_health_score(result)
        logger.info("SEO health for %s: %d", base_url, result.health_score)
        return result
