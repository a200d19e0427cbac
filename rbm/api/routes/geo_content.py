"""GEO content routes: build, review and manage local-business content packages"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rbm.core.auth import get_current_user
from rbm.core.database import get_db
from rbm.db.models import GeoAudit, GeoGeneratedContent, utcnow
from rbm.governance.seo.geo_content import BusinessInput, build_geo_content
from rbm.schemas.geo_content import (
    GeoContentListResponse,
    GeoContentRequest,
    GeoContentResponse,
    GeoContentSummary,
    GeoContentUpdate,
)
from rbm.utils.database import get_owned_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/geo-content", tags=["geo-content"])

CONTENT_LIST_LIMIT = 50


@router.post("", status_code=status.HTTP_201_CREATED, response_model=GeoContentResponse)
async def create_geo_content(
    body: GeoContentRequest,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Generate and store a GEO content package as a draft.

    Raises:
        NotFoundOrForbidden: audit_id given but not owned by the caller
    """
    user_id = current_user["user_id"]
    if body.audit_id:
        await get_owned_or_404(db, GeoAudit, body.audit_id, user_id, "Audit")

    business = BusinessInput(
        business_name=body.business_name,
        primary_city=body.primary_city,
        primary_services=body.primary_services,
        country=body.country,
        service_areas=body.service_areas,
        phone=body.phone,
        email=body.email,
        address=body.address,
        description=body.description,
        credentials=body.credentials,
        year_established=body.year_established,
    )
    package = build_geo_content(business)
    generated = package.generated_json()

    content = GeoGeneratedContent(
        user_id=user_id,
        project_id=body.project_id,
        audit_id=body.audit_id,
        business_name=business.business_name,
        primary_city=business.primary_city,
        country=business.country,
        service_areas=business.service_areas,
        primary_services=business.primary_services,
        business_input_json=business.to_dict(),
        content_type=body.content_type,
        generated_json=generated,
        generated_markdown=package.markdown,
        generated_html=package.html,
        meta_title=package.meta_title,
        meta_description=package.meta_description,
        answer_capsule=package.answer_capsule,
        service_descriptions=generated["service_descriptions"],
        faqs=generated["faqs"],
        schema_json_ld=package.schema_json_ld,
        status="draft",
        review_notes=None,
        reviewed_by=None,
        reviewed_at=None,
    )
    db.add(content)
    await db.commit()

    logger.info("GEO content %s generated for %s", content.id, business.business_name)
    return GeoContentResponse.model_validate(content)


@router.get("", response_model=GeoContentListResponse)
async def list_geo_content(
    project_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """Most recent packages for the current user, optionally for one project"""
    query = select(GeoGeneratedContent).where(GeoGeneratedContent.user_id == current_user["user_id"])
    if project_id:
        query = query.where(GeoGeneratedContent.project_id == project_id)
    result = await db.execute(query.order_by(GeoGeneratedContent.created_at.desc()).limit(CONTENT_LIST_LIMIT))
    return GeoContentListResponse(
        contents=[GeoContentSummary.model_validate(content) for content in result.scalars().all()]
    )


@router.get("/{content_id}", response_model=GeoContentResponse)
async def get_geo_content(
    content_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    content = await get_owned_or_404(db, GeoGeneratedContent, content_id, current_user["user_id"], "Content")
    return GeoContentResponse.model_validate(content)


@router.put("/{content_id}", response_model=GeoContentResponse)
async def update_geo_content(
    content_id: UUID,
    body: GeoContentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """Change review status or notes; approving records the reviewer"""
    user_id = current_user["user_id"]
    content = await get_owned_or_404(db, GeoGeneratedContent, content_id, user_id, "Content")

    now = utcnow()
    if body.status:
        content.status = body.status
        if body.status == "approved":
            content.reviewed_by = user_id
            content.reviewed_at = now
    if "review_notes" in body.model_fields_set:
        content.review_notes = body.review_notes
    content.updated_at = now
    await db.commit()

    return GeoContentResponse.model_validate(content)


@router.delete("/{content_id}")
async def delete_geo_content(
    content_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    content = await get_owned_or_404(db, GeoGeneratedContent, content_id, current_user["user_id"], "Content")
    await db.delete(content)
    await db.commit()
    return {"ok": True, "deleted_id": str(content_id)}
