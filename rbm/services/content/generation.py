"""Article generation through the user's own AI provider key"""
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import httpx
from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from rbm.core.config import settings
from rbm.exceptions import UpstreamError
from rbm.governance.seo.content_score import ContentSeoResult, score_content

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert content writer and SEO specialist. Generate high-quality, "
    "engaging content that is optimized for search engines."
)
ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"

TITLE_HEADING_RE = re.compile(r"^#\s+(.+)$", re.M)
FIRST_LINE_RE = re.compile(r"^(.+)$", re.M)
OUTLINE_RE = re.compile(r"^(#{2,3})\s+(.+)$", re.M)
MARKDOWN_MARKS_RE = re.compile(r"[#*_]")
SLUG_RE = re.compile(r"[^a-z0-9]+")

WORDS_PER_MINUTE = 200
META_DESCRIPTION_MAX = 155
EXCERPT_MAX = 300


def build_prompt(
    keyword: Optional[str],
    tone: Optional[str] = None,
    audience: Optional[str] = None,
    word_count: Optional[int] = None,
) -> str:
    """Default article prompt when no custom prompt is supplied"""
    return f"""Write a comprehensive, SEO-optimized article about "{keyword}".

Tone: {tone or "professional"}
Target audience: {audience or "general readers"}
Word count: approximately {word_count or 1500} words

Include:
- An engaging title (as H1)
- An introduction that hooks the reader
- Well-structured sections with H2 and H3 headers
- Actionable insights and examples
- A conclusion with a call to action

Optimize for readability and search engines."""


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 3] + "..."


def slugify(title: str, max_length: int = 100) -> str:
    return SLUG_RE.sub("-", title.lower()).strip("-")[:max_length] or "article"


@dataclass
class ArticleDraft:
    """Parsed article ready to be stored"""

    title: str
    content: str
    content_markdown: str
    slug: str
    meta_description: str
    excerpt: str
    outline: Dict[str, List[Dict[str, Any]]]
    word_count: int
    reading_time_minutes: int
    seo: ContentSeoResult = field(repr=False)

    @property
    def seo_score(self) -> int:
        return self.seo.seo_score


def parse_generated_content(raw: str, keyword: str) -> ArticleDraft:
    """
    Split raw model markdown into title/body/metadata and score it.

    Title is the first ``# `` heading, else the first line, else a
    placeholder built from the keyword.
    """
    raw = raw or ""
    title_match = TITLE_HEADING_RE.search(raw) or FIRST_LINE_RE.search(raw)
    title = title_match.group(1).strip() if title_match else f"Article about {keyword}"

    content = TITLE_HEADING_RE.sub("", raw, count=1).strip() if TITLE_HEADING_RE.search(raw) else raw.strip()

    first_para = MARKDOWN_MARKS_RE.sub("", content.split("\n\n")[0]).strip() if content else ""
    outline = {
        "sections": [
            {"level": len(hashes), "title": text.strip()}
            for hashes, text in OUTLINE_RE.findall(content)
        ]
    }

    seo = score_content(title, content, keyword)
    return ArticleDraft(
        title=title,
        content=content,
        content_markdown=raw,
        slug=slugify(title),
        meta_description=_truncate(first_para, META_DESCRIPTION_MAX),
        excerpt=_truncate(first_para, EXCERPT_MAX),
        outline=outline,
        word_count=seo.word_count,
        reading_time_minutes=math.ceil(seo.word_count / WORDS_PER_MINUTE),
        seo=seo,
    )


class ContentGenerator:
    """Calls a completion provider with the caller's API key"""

    def __init__(
        self,
        openai_client_factory: Optional[Callable[..., AsyncOpenAI]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self.openai_client_factory = openai_client_factory or AsyncOpenAI
        self.transport = transport
        self.timeout = timeout or settings.upstream_timeout_seconds

    def default_model(self, provider: str) -> str:
        if provider == "anthropic":
            return settings.anthropic_default_model
        return settings.openai_default_model

    async def generate(self, provider: str, api_key: str, prompt: str, model: Optional[str] = None) -> str:
        """
        Return the raw markdown produced by the provider.

        Raises:
            UpstreamError: provider rejected the call or was unreachable
        """
        model = model or self.default_model(provider)
        logger.info("Generating content with %s/%s", provider, model)
        if provider == "anthropic":
            return await self._generate_anthropic(api_key, prompt, model)
        return await self._generate_openai(api_key, prompt, model)

    async def _generate_openai(self, api_key: str, prompt: str, model: str) -> str:
        async with self.openai_client_factory(api_key=api_key, timeout=self.timeout, max_retries=1) as client:
            try:
                completion = await client.chat.completions.create(
                    model=model,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=0.7,
                    max_tokens=settings.generation_max_tokens,
                )
            except APIStatusError as e:
                raise UpstreamError(
                    provider="OpenAI",
                    provider_status=e.status_code,
                    body=e.response.text if e.response is not None else str(e),
                    redact=api_key,
                ) from e
            except APITimeoutError as e:
                raise UpstreamError(provider="OpenAI", provider_status=504, body="request timed out") from e
            except APIConnectionError as e:
                raise UpstreamError(provider="OpenAI", body="connection failed") from e

        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""

    async def _generate_anthropic(self, api_key: str, prompt: str, model: str) -> str:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(
                    ANTHROPIC_URL,
                    headers={
                        "x-api-key": api_key,
                        "anthropic-version": ANTHROPIC_VERSION,
                        "content-type": "application/json",
                    },
                    json={
                        "model": model,
                        "max_tokens": settings.generation_max_tokens,
                        "system": SYSTEM_PROMPT,
                        "messages": [{"role": "user", "content": prompt}],
                    },
                )
            except httpx.TimeoutException as e:
                raise UpstreamError(provider="Anthropic", provider_status=504, body="request timed out") from e
            except httpx.HTTPError as e:
                raise UpstreamError(provider="Anthropic", body="connection failed") from e

        if not response.is_success:
            raise UpstreamError(
                provider="Anthropic",
                provider_status=response.status_code,
                body=response.text,
                redact=api_key,
            )

        blocks = response.json().get("content") or []
        return "".join(block.get("text", "") for block in blocks if block.get("type") == "text")
