"""Heuristic on-page signal extraction from raw HTML.

Regex based on purpose: the input is whatever a site returned, often
truncated or malformed, and every field falls back to its empty value
instead of failing the whole record.
"""
import logging
import re
from dataclasses import asdict, dataclass, field
from typing import Callable, List, Optional, TypeVar
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

T = TypeVar("T")

GEO_KEYWORDS = [
    "near me", "local", "in my area", "nearby", "service area",
    "london", "manchester", "birmingham", "leeds", "liverpool",
    "bristol", "sheffield", "newcastle", "nottingham", "glasgow",
    "edinburgh", "cardiff", "belfast", "dublin",
]

SERVICE_KEYWORDS = [
    "plumber", "plumbing", "electrician", "electrical", "hvac",
    "boiler", "heating", "emergency", "repair", "installation",
    "maintenance", "service", "contractor", "professional",
    "free quote", "free estimate", "24/7", "same day",
]

# UK street suffixes
ADDRESS_SUFFIXES = [
    "street", "road", "avenue", "lane", "drive", "way", "court", "place",
    "close", "gardens", "terrace", "crescent", "grove", "park", "square",
    "hill", "green", "view", "rise", "walk", "mews", "row",
]

TITLE_RE = re.compile(r"<title[^>]*>([^<]*)</title>", re.I)
META_DESCRIPTION_RES = [
    re.compile(r"<meta[^>]*name=[\"']description[\"'][^>]*content=[\"']([^\"']*)[\"']", re.I),
    re.compile(r"<meta[^>]*content=[\"']([^\"']*)[\"'][^>]*name=[\"']description[\"']", re.I),
]
H1_RE = re.compile(r"<h1[^>]*>(.*?)</h1>", re.I | re.S)
H2_RE = re.compile(r"<h2[\s>]", re.I)
H3_RE = re.compile(r"<h3[\s>]", re.I)
SCRIPT_RE = re.compile(r"<script[^>]*>.*?</script>", re.I | re.S)
STYLE_RE = re.compile(r"<style[^>]*>.*?</style>", re.I | re.S)
TAG_RE = re.compile(r"<[^>]+>")

SCHEMA_TYPE_RE = re.compile(r"\"@type\"\s*:\s*\"([^\"]+)\"", re.I)
LOCAL_BUSINESS_RE = re.compile(r"LocalBusiness|Plumber|Electrician|HVACBusiness", re.I)
ORGANIZATION_RE = re.compile(r"\"@type\"\s*:\s*\"Organization\"", re.I)
SERVICE_SCHEMA_RE = re.compile(r"\"@type\"\s*:\s*\"Service\"", re.I)
FAQ_SCHEMA_RE = re.compile(r"\"@type\"\s*:\s*\"FAQPage\"", re.I)
BREADCRUMB_RE = re.compile(r"\"@type\"\s*:\s*\"BreadcrumbList\"", re.I)
REVIEW_RE = re.compile(r"\"@type\"\s*:\s*\"(?:Review|AggregateRating)\"", re.I)

PHONE_RE = re.compile(r"\+44|0\d{2,4}[\s-]?\d{3,4}[\s-]?\d{3,4}|tel:|phone:", re.I)
EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
ADDRESS_RE = re.compile(r"\b(?:" + "|".join(ADDRESS_SUFFIXES) + r")\b", re.I)

FAQ_MARKUP_RE = re.compile(r"<(?:dt|details|summary)[\s>]|<[a-z0-9]+[^>]*class=[\"'][^\"']*faq[^\"']*[\"'][^>]*>", re.I)
FAQ_TEXT_RE = re.compile(r"frequently asked|\bfaqs?\b", re.I)

CANONICAL_RE = re.compile(r"<link[^>]*rel=[\"']canonical[\"']", re.I)
NOINDEX_RE = re.compile(r"<meta[^>]*name=[\"']robots[\"'][^>]*content=[\"'][^\"']*noindex", re.I)

HREF_RE = re.compile(r"<a\b[^>]*?href=[\"']([^\"']*)[\"']", re.I)
IMG_RE = re.compile(r"<img\b[^>]*>", re.I)
ALT_RE = re.compile(r"\balt=[\"'][^\"']+[\"']", re.I)

HOMEPAGE_PATH_RE = re.compile(r"^/?(?:(?:index|home)(?:\.[a-z]+)?)?/?$", re.I)

# Evaluated in order, first match wins
PAGE_TYPE_PATTERNS = [
    ("service", re.compile(r"service|what-we-do|our-work", re.I)),
    ("location", re.compile(r"location|area|near|coverage", re.I)),
    ("about", re.compile(r"about|who-we-are|our-team", re.I)),
    ("contact", re.compile(r"contact|get-in-touch", re.I)),
    ("blog", re.compile(r"blog|news|article", re.I)),
]

NON_NAVIGABLE_PREFIXES = ("mailto:", "tel:", "javascript:", "data:")


@dataclass
class PageSignal:
    """Structured heuristic summary of one fetched page."""

    url: str
    page_type: str = "other"
    title: Optional[str] = None
    meta_description: Optional[str] = None
    h1: Optional[str] = None
    h2_count: int = 0
    h3_count: int = 0
    word_count: int = 0
    text_signature: str = ""
    has_local_business_schema: bool = False
    has_organization_schema: bool = False
    has_service_schema: bool = False
    has_faq_schema: bool = False
    has_breadcrumb_schema: bool = False
    has_review_schema: bool = False
    schema_types: List[str] = field(default_factory=list)
    has_geo_keywords: bool = False
    geo_keywords_found: List[str] = field(default_factory=list)
    has_service_keywords: bool = False
    service_keywords_found: List[str] = field(default_factory=list)
    has_phone: bool = False
    has_email: bool = False
    has_address: bool = False
    has_faq_content: bool = False
    faq_count: int = 0
    has_canonical: bool = False
    is_indexable: bool = True
    internal_links_count: int = 0
    external_links_count: int = 0
    images_count: int = 0
    images_with_alt: int = 0

    @property
    def alt_text_coverage(self) -> float:
        """Share of images carrying non-empty alt text; 1.0 with no images."""
        if not self.images_count:
            return 1.0
        return self.images_with_alt / self.images_count

    def to_dict(self) -> dict:
        data = asdict(self)
        data["alt_text_coverage"] = round(self.alt_text_coverage, 4)
        return data


def _safe(extract: Callable[[], T], default: T, name: str) -> T:
    try:
        return extract()
    except Exception:
        logger.debug("Signal extraction failed for %s", name, exc_info=True)
        return default


def _first_group(pattern: re.Pattern, html: str) -> Optional[str]:
    match = pattern.search(html)
    if not match:
        return None
    value = " ".join(TAG_RE.sub(" ", match.group(1)).split())
    return value or None


def _hostname(url: str) -> str:
    return (urlparse(url).hostname or "").lower()


def visible_text(html: str) -> str:
    """Strip scripts, styles and tags; collapse whitespace."""
    text = SCRIPT_RE.sub(" ", html)
    text = STYLE_RE.sub(" ", text)
    text = TAG_RE.sub(" ", text)
    return " ".join(text.split())


def classify_page_type(url: str) -> str:
    """Classify a page from its URL path keywords."""
    parsed = urlparse(url)
    path = parsed.path or "/"
    if HOMEPAGE_PATH_RE.match(path):
        return "homepage"
    lowered = path.lower()
    for page_type, pattern in PAGE_TYPE_PATTERNS:
        if pattern.search(lowered):
            return page_type
    return "other"


def count_links(html: str, page_url: str) -> tuple:
    """
    Count internal and external anchors.

    Relative links are internal; absolute links are internal only when
    their hostname matches the page's. mailto/tel/javascript links and bare
    fragments are not counted.

    Returns:
        Tuple of (internal_count, external_count)
    """
    host = _hostname(page_url)
    internal = external = 0
    for href in HREF_RE.findall(html):
        href = href.strip()
        if not href or href.startswith("#") or href.lower().startswith(NON_NAVIGABLE_PREFIXES):
            continue
        if href.startswith("//") or re.match(r"^[a-z][a-z0-9+.-]*://", href, re.I):
            try:
                link_host = _hostname(href if "://" in href else f"http:{href}")
            except ValueError:
                continue
            if link_host == host or link_host.endswith("." + host):
                internal += 1
            else:
                external += 1
        else:
            internal += 1
    return internal, external


def _schema_types(html: str) -> List[str]:
    seen = []
    for value in SCHEMA_TYPE_RE.findall(html):
        if value not in seen:
            seen.append(value)
    return seen


def _keywords_found(lower_html: str, keywords: List[str]) -> List[str]:
    return [kw for kw in keywords if kw in lower_html]


def extract_signals(html: Optional[str], page_url: str) -> PageSignal:
    """
    Build a PageSignal from raw HTML.

    Never raises: a field whose extraction fails keeps its default.
    """
    html = html if isinstance(html, str) else ""
    lower_html = html.lower()
    signal = PageSignal(url=page_url)

    signal.page_type = _safe(lambda: classify_page_type(page_url), "other", "page_type")
    signal.title = _safe(lambda: _first_group(TITLE_RE, html), None, "title")
    signal.meta_description = _safe(
        lambda: next(filter(None, (_first_group(p, html) for p in META_DESCRIPTION_RES)), None),
        None,
        "meta_description",
    )
    signal.h1 = _safe(lambda: _first_group(H1_RE, html), None, "h1")
    signal.h2_count = _safe(lambda: len(H2_RE.findall(html)), 0, "h2_count")
    signal.h3_count = _safe(lambda: len(H3_RE.findall(html)), 0, "h3_count")

    text = _safe(lambda: visible_text(html), "", "visible_text")
    signal.word_count = len(text.split()) if text else 0
    signal.text_signature = " ".join(filter(None, [signal.h1, text[:500]])).lower()

    signal.has_local_business_schema = _safe(lambda: bool(LOCAL_BUSINESS_RE.search(html)), False, "local_business")
    signal.has_organization_schema = _safe(lambda: bool(ORGANIZATION_RE.search(html)), False, "organization")
    signal.has_service_schema = _safe(lambda: bool(SERVICE_SCHEMA_RE.search(html)), False, "service_schema")
    signal.has_faq_schema = _safe(lambda: bool(FAQ_SCHEMA_RE.search(html)), False, "faq_schema")
    signal.has_breadcrumb_schema = _safe(lambda: bool(BREADCRUMB_RE.search(html)), False, "breadcrumb")
    signal.has_review_schema = _safe(lambda: bool(REVIEW_RE.search(html)), False, "review")
    signal.schema_types = _safe(lambda: _schema_types(html), [], "schema_types")

    signal.geo_keywords_found = _safe(lambda: _keywords_found(lower_html, GEO_KEYWORDS), [], "geo_keywords")
    signal.has_geo_keywords = bool(signal.geo_keywords_found)
    signal.service_keywords_found = _safe(
        lambda: _keywords_found(lower_html, SERVICE_KEYWORDS), [], "service_keywords"
    )
    signal.has_service_keywords = bool(signal.service_keywords_found)

    signal.has_phone = _safe(lambda: bool(PHONE_RE.search(html)), False, "phone")
    signal.has_email = _safe(lambda: bool(EMAIL_RE.search(html)), False, "email")
    signal.has_address = _safe(lambda: bool(ADDRESS_RE.search(text)), False, "address")

    signal.faq_count = _safe(lambda: len(FAQ_MARKUP_RE.findall(html)), 0, "faq_count")
    signal.has_faq_content = signal.faq_count > 0 or _safe(lambda: bool(FAQ_TEXT_RE.search(html)), False, "faq_text")

    signal.has_canonical = _safe(lambda: bool(CANONICAL_RE.search(html)), False, "canonical")
    signal.is_indexable = _safe(lambda: not NOINDEX_RE.search(html), True, "indexable")

    signal.internal_links_count, signal.external_links_count = _safe(
        lambda: count_links(html, page_url), (0, 0), "links"
    )

    images = _safe(lambda: IMG_RE.findall(html), [], "images")
    signal.images_count = len(images)
    signal.images_with_alt = sum(1 for img in images if ALT_RE.search(img))

    return signal
