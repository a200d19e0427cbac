"""Checklist SEO scoring for generated articles.

Deliberately crude counting: the score must be reproducible from the text
alone so editors can see exactly why an article scored what it did.
"""
import re
from dataclasses import dataclass, field
from typing import Dict

BASE_SCORE = 50
MAX_SCORE = 100
KEYWORD_IN_TITLE_POINTS = 15
KEYWORD_DENSITY_POINTS = 15
WORD_COUNT_POINTS = 10
HEADERS_POINTS = 10

MIN_DENSITY = 1.0
MAX_DENSITY = 3.0
MIN_WORD_COUNT = 1000
MIN_HEADERS = 3

HEADER_RE = re.compile(r"^#{2,3}\s+.+$", re.M)


@dataclass
class SeoCheck:
    passed: bool
    message: str

    def to_dict(self) -> dict:
        return {"pass": self.passed, "message": self.message}


@dataclass
class ContentSeoResult:
    """Score plus one explanation per check"""

    title: str
    content: str
    word_count: int
    seo_score: int
    seo_analysis: Dict[str, SeoCheck] = field(default_factory=dict)

    def analysis_dict(self) -> Dict[str, dict]:
        return {name: check.to_dict() for name, check in self.seo_analysis.items()}


def count_words(text: str) -> int:
    return len(text.split()) if text else 0


def count_headers(text: str) -> int:
    """Markdown H2/H3 lines (``##`` / ``###``)."""
    return len(HEADER_RE.findall(text or ""))


def count_keyword(text: str, keyword: str) -> int:
    """Non-overlapping, case-insensitive literal occurrences."""
    keyword = (keyword or "").strip()
    if not keyword or not text:
        return 0
    return len(re.findall(re.escape(keyword.lower()), text.lower()))


def keyword_density(text: str, keyword: str) -> float:
    """Keyword occurrences per 100 words of text."""
    words = count_words(text)
    if not words:
        return 0.0
    return count_keyword(text, keyword) * 100 / words


def score_content(title: str, content: str, keyword: str) -> ContentSeoResult:
    """
    Score an article against the SEO checklist.

    Args:
        title: Article title
        content: Markdown body (title heading excluded)
        keyword: Target keyword

    Returns:
        ContentSeoResult with a score in [50, 100]
    """
    title = title or ""
    content = content or ""
    keyword = (keyword or "").strip()
    score = BASE_SCORE
    analysis: Dict[str, SeoCheck] = {}

    if keyword and keyword.lower() in title.lower():
        score += KEYWORD_IN_TITLE_POINTS
        analysis["keywordInTitle"] = SeoCheck(True, "Keyword found in title")
    else:
        analysis["keywordInTitle"] = SeoCheck(False, "Keyword not found in title")

    density = keyword_density(content, keyword)
    if MIN_DENSITY <= density <= MAX_DENSITY:
        score += KEYWORD_DENSITY_POINTS
        analysis["keywordDensity"] = SeoCheck(True, f"Good keyword density: {density:.1f}%")
    else:
        analysis["keywordDensity"] = SeoCheck(False, f"Keyword density: {density:.1f}% (aim for 1-3%)")

    word_count = count_words(content)
    if word_count >= MIN_WORD_COUNT:
        score += WORD_COUNT_POINTS
        analysis["wordCount"] = SeoCheck(True, f"Good word count: {word_count}")
    else:
        analysis["wordCount"] = SeoCheck(False, f"Low word count: {word_count} (aim for 1000+)")

    headers = count_headers(content)
    if headers >= MIN_HEADERS:
        score += HEADERS_POINTS
        analysis["headers"] = SeoCheck(True, f"Good structure with {headers} headers")
    else:
        analysis["headers"] = SeoCheck(False, "Add more headers to improve structure")

    return ContentSeoResult(
        title=title,
        content=content,
        word_count=word_count,
        seo_score=min(MAX_SCORE, score),
        seo_analysis=analysis,
    )
