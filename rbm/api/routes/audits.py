"""GEO audit routes: crawl a site, extract signals, run the rule engine"""
import logging
from datetime import datetime, timezone
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import noload

from rbm.api.dependencies import get_site_crawler
from rbm.core.auth import get_current_user
from rbm.core.database import get_db
from rbm.db.models import AuditStatus, GeoAudit, GeoAuditIssue, GeoPageSignal, Website
from rbm.exceptions import UpstreamError
from rbm.governance.audit_rules import AuditIssue, aggregate_health_score, run_audit_rules
from rbm.schemas.audits import AuditListResponse, AuditRequest, AuditResponse, AuditSummary
from rbm.services.scanning.crawler import SiteCrawler
from rbm.services.scanning.signals import PageSignal, extract_signals
from rbm.utils.database import get_owned_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/geo-audits", tags=["geo-audits"])

AUDIT_LIST_LIMIT = 50


def issue_row(position: int, issue: AuditIssue) -> GeoAuditIssue:
    return GeoAuditIssue(
        position=position,
        title=issue.title,
        description=issue.description,
        priority=issue.priority.value,
        category=issue.category,
        evidence=issue.evidence,
        page_url=issue.page_url,
        impact=issue.impact,
        recommendation=issue.recommendation,
        score_impact=issue.score_impact,
    )


def signal_row(position: int, signal: PageSignal) -> GeoPageSignal:
    return GeoPageSignal(
        position=position,
        page_url=signal.url,
        page_type=signal.page_type,
        title=signal.title,
        meta_description=signal.meta_description,
        h1_text=signal.h1,
        h2_count=signal.h2_count,
        h3_count=signal.h3_count,
        word_count=signal.word_count,
        has_local_business_schema=signal.has_local_business_schema,
        has_organization_schema=signal.has_organization_schema,
        has_service_schema=signal.has_service_schema,
        has_faq_schema=signal.has_faq_schema,
        has_breadcrumb_schema=signal.has_breadcrumb_schema,
        has_review_schema=signal.has_review_schema,
        schema_types=list(signal.schema_types),
        has_geo_keywords=signal.has_geo_keywords,
        geo_keywords_found=list(signal.geo_keywords_found),
        has_service_keywords=signal.has_service_keywords,
        service_keywords_found=list(signal.service_keywords_found),
        has_phone_number=signal.has_phone,
        has_email=signal.has_email,
        has_address=signal.has_address,
        has_faq_content=signal.has_faq_content,
        faq_count=signal.faq_count,
        has_canonical=signal.has_canonical,
        is_indexable=signal.is_indexable,
        internal_links_count=signal.internal_links_count,
        external_links_count=signal.external_links_count,
        images_count=signal.images_count,
        images_with_alt=signal.images_with_alt,
    )


async def mark_failed(db: AsyncSession, audit: GeoAudit, message: str) -> None:
    audit.status = AuditStatus.FAILED
    audit.error_message = message
    audit.completed_at = datetime.now(timezone.utc)
    await db.commit()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=AuditResponse)
async def create_audit(
    body: AuditRequest,
    db: AsyncSession = Depends(get_db),
    crawler: SiteCrawler = Depends(get_site_crawler),
    current_user: dict = Depends(get_current_user),
):
    """
    Run a GEO audit over a site.

    A ``full`` audit crawls the homepage plus a handful of internal pages;
    ``quick`` audits only the homepage. Findings and per-page signals are
    stored with the audit and returned in rule order.

    Raises:
        NotFoundOrForbidden: website_id given but not owned by the caller
        UpstreamError: the homepage could not be fetched
    """
    user_id = current_user["user_id"]
    if body.website_id:
        await get_owned_or_404(db, Website, body.website_id, user_id, "Website")

    audit = GeoAudit(
        user_id=user_id,
        website_id=body.website_id,
        project_id=body.project_id,
        site_url=body.site_url,
        audit_type=body.audit_type,
        status=AuditStatus.RUNNING,
    )
    db.add(audit)
    await db.commit()

    try:
        async with crawler:
            pages = await crawler.crawl(body.site_url, full=body.audit_type == "full")
    except Exception as e:
        await mark_failed(db, audit, "Audit crawl failed")
        logger.error("Audit %s crawl of %s raised %s", audit.id, body.site_url, e.__class__.__name__)
        raise

    if not pages:
        await mark_failed(db, audit, "Could not fetch URL")
        logger.warning("Audit %s failed: could not fetch %s", audit.id, body.site_url)
        raise UpstreamError("Could not fetch URL", provider="website", provider_status=502)

    signals: List[PageSignal] = [extract_signals(html, url) for url, html in pages]
    issues = run_audit_rules(signals[0], signals)

    rows = [issue_row(position, issue) for position, issue in enumerate(issues)]
    rows += [signal_row(position, signal) for position, signal in enumerate(signals)]
    for row in rows:
        row.audit_id = audit.id
    db.add_all(rows)
    audit.pages_crawled = len(pages)
    audit.pages_analyzed = len(signals)
    audit.health_score = aggregate_health_score(issues)
    audit.status = AuditStatus.COMPLETED
    audit.completed_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(audit, attribute_names=["issues", "page_signals"])

    logger.info(
        "Audit %s completed for %s: %d pages, %d issues, score %d",
        audit.id, body.site_url, len(signals), len(issues), audit.health_score,
    )
    return AuditResponse.model_validate(audit)


@router.get("", response_model=AuditListResponse)
async def list_audits(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """Most recent audits for the current user"""
    result = await db.execute(
        select(GeoAudit)
        .options(noload(GeoAudit.issues), noload(GeoAudit.page_signals))
        .where(GeoAudit.user_id == current_user["user_id"])
        .order_by(GeoAudit.created_at.desc())
        .limit(AUDIT_LIST_LIMIT)
    )
    audits = result.scalars().all()
    return AuditListResponse(audits=[AuditSummary.model_validate(audit) for audit in audits])


@router.get("/{audit_id}", response_model=AuditResponse)
async def get_audit(
    audit_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    audit = await get_owned_or_404(db, GeoAudit, audit_id, current_user["user_id"], "Audit")
    return AuditResponse.model_validate(audit)


@router.delete("/{audit_id}")
async def delete_audit(
    audit_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    audit = await get_owned_or_404(db, GeoAudit, audit_id, current_user["user_id"], "Audit")
    await db.delete(audit)
    await db.commit()
    return {"ok": True}
