"""Website registration, availability and SEO health routes"""
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rbm.api.dependencies import get_health_checker
from rbm.core.auth import get_current_user
from rbm.core.database import get_db
from rbm.db.models import SeoHealthCheck, StatusCheck, Website
from rbm.schemas.websites import (
    AvailabilityResponse,
    SeoHealthResponse,
    WebsiteCheckRequest,
    WebsiteCreate,
    WebsiteListResponse,
    WebsiteResponse,
)
from rbm.services.health import WebsiteHealthChecker
from rbm.utils.database import get_owned_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/websites", tags=["websites"])

WEBSITE_LIST_LIMIT = 100


@router.post("", status_code=status.HTTP_201_CREATED, response_model=WebsiteResponse)
async def create_website(
    body: WebsiteCreate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """Register a site so audits and checks can be recorded against it"""
    website = Website(
        user_id=current_user["user_id"],
        url=body.url,
        status=None,
        response_time_ms=None,
        last_checked_at=None,
    )
    db.add(website)
    await db.commit()
    logger.info("Website %s registered: %s", website.id, website.url)
    return WebsiteResponse.model_validate(website)


@router.get("", response_model=WebsiteListResponse)
async def list_websites(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    result = await db.execute(
        select(Website)
        .where(Website.user_id == current_user["user_id"])
        .order_by(Website.created_at.desc())
        .limit(WEBSITE_LIST_LIMIT)
    )
    return WebsiteListResponse(
        websites=[WebsiteResponse.model_validate(website) for website in result.scalars().all()]
    )


@router.post("/check", response_model=AvailabilityResponse)
async def check_website(
    body: WebsiteCheckRequest,
    db: AsyncSession = Depends(get_db),
    checker: WebsiteHealthChecker = Depends(get_health_checker),
    current_user: dict = Depends(get_current_user),
):
    """
    Check a site for availability.

    When ``website_id`` is given the check is recorded against that website
    and its last known status is updated.
    """
    website = None
    if body.website_id:
        website = await get_owned_or_404(db, Website, body.website_id, current_user["user_id"], "Website")

    async with checker:
        result = await checker.check_availability(body.url)

    if website is not None:
        checked_at = datetime.fromisoformat(result.checked_at)
        db.add(StatusCheck(
            website_id=website.id,
            is_live=result.is_live,
            status_code=result.status_code,
            response_time_ms=result.response_time_ms,
            error_message=result.error_message,
            checked_at=checked_at,
        ))
        website.status = result.status_code
        website.response_time_ms = result.response_time_ms
        website.last_checked_at = checked_at
        await db.commit()

    return AvailabilityResponse(ok=result.is_live, **result.to_dict())


@router.post("/seo-health", response_model=SeoHealthResponse)
async def check_seo_health(
    body: WebsiteCheckRequest,
    db: AsyncSession = Depends(get_db),
    checker: WebsiteHealthChecker = Depends(get_health_checker),
    current_user: dict = Depends(get_current_user),
):
    """robots.txt, sitemap and SSL checks with a weighted health score"""
    website = None
    if body.website_id:
        website = await get_owned_or_404(db, Website, body.website_id, current_user["user_id"], "Website")

    async with checker:
        result = await checker.check_seo_health(body.url)

    if website is not None:
        db.add(SeoHealthCheck(
            website_id=website.id,
            robots_txt_exists=result.robots_txt_exists,
            robots_txt_valid=result.robots_txt_valid,
            robots_txt_allows_crawl=result.robots_txt_allows_crawl,
            robots_txt_content=result.robots_txt_content,
            sitemap_exists=result.sitemap_exists,
            sitemap_valid=result.sitemap_valid,
            sitemap_url_count=result.sitemap_url_count,
            sitemap_url=result.sitemap_url,
            ssl_valid=result.ssl_valid,
            health_score=result.health_score,
            checked_at=datetime.fromisoformat(result.checked_at),
        ))
        await db.commit()

    return SeoHealthResponse(**result.to_dict())
