"""Content generation and SEO scoring routes"""
import logging
import time

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rbm.api.dependencies import get_content_generator, get_secret_store
from rbm.core.auth import get_current_user
from rbm.core.database import get_db
from rbm.db.models import GeneratedArticle
from rbm.exceptions import ValidationError
from rbm.governance.seo.content_score import score_content
from rbm.schemas.content import (
    ArticleResponse,
    GenerationInfo,
    GenerationRequest,
    GenerationResponse,
    ScoreRequest,
    ScoreResponse,
)
from rbm.services.content.generation import ContentGenerator, build_prompt, parse_generated_content
from rbm.services.secrets import PROVIDER_SECRET_KEYS, SecretStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/content", tags=["content"])


@router.post("/generate", status_code=status.HTTP_201_CREATED, response_model=GenerationResponse)
async def generate_content(
    body: GenerationRequest,
    db: AsyncSession = Depends(get_db),
    store: SecretStore = Depends(get_secret_store),
    generator: ContentGenerator = Depends(get_content_generator),
    current_user: dict = Depends(get_current_user),
):
    """
    Generate an article with the caller's own provider key.

    The key is read from the secret vault; the generated markdown is
    scored, stored as a draft and returned.

    Raises:
        ValidationError: no API key stored for the requested provider
        UpstreamError: the provider rejected or failed the request
    """
    user_id = current_user["user_id"]
    api_key = await store.get(user_id, PROVIDER_SECRET_KEYS[body.provider])
    if not api_key:
        raise ValidationError(f"No API key configured for {body.provider}. Please add it in Settings.")

    keyword = (body.keyword or "").strip()
    if body.custom_prompt and body.custom_prompt.strip():
        prompt = body.custom_prompt.strip()
    else:
        prompt = build_prompt(keyword, tone=body.tone, audience=body.audience, word_count=body.word_count)
    model = body.model or generator.default_model(body.provider)

    started = time.monotonic()
    raw = await generator.generate(body.provider, api_key, prompt, model=model)
    duration_ms = int((time.monotonic() - started) * 1000)

    draft = parse_generated_content(raw, keyword)
    article = GeneratedArticle(
        user_id=user_id,
        project_id=body.project_id,
        title=draft.title,
        slug=draft.slug,
        meta_description=draft.meta_description,
        excerpt=draft.excerpt,
        content=draft.content,
        content_markdown=draft.content_markdown,
        outline=draft.outline,
        keyword=keyword or None,
        word_count=draft.word_count,
        reading_time_minutes=draft.reading_time_minutes,
        seo_score=draft.seo_score,
        seo_analysis=draft.seo.analysis_dict(),
        ai_provider=body.provider,
        ai_model=model,
        generation_params={
            "tone": body.tone,
            "audience": body.audience,
            "word_count": body.word_count,
            "custom_prompt": bool(body.custom_prompt),
        },
        status="draft",
    )
    db.add(article)
    await db.commit()

    logger.info(
        "Generated article %s with %s/%s in %dms (score %d)",
        article.id, body.provider, model, duration_ms, draft.seo_score,
    )
    return GenerationResponse(
        article=ArticleResponse.model_validate(article),
        generation=GenerationInfo(provider=body.provider, model=model, duration_ms=duration_ms),
    )


@router.post("/score", response_model=ScoreResponse)
async def score_existing_content(
    body: ScoreRequest,
    current_user: dict = Depends(get_current_user),
):
    """Score article text against a target keyword"""
    result = score_content(body.title, body.content, body.keyword)
    return ScoreResponse(
        title=result.title,
        word_count=result.word_count,
        seo_score=result.seo_score,
        seo_analysis=result.analysis_dict(),
    )
