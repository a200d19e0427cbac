"""Pydantic schemas for GEO audits"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuditRequest(BaseModel):
    """Request to audit a site"""
    site_url: str = Field(..., min_length=1, description="Site URL or bare domain")
    audit_type: str = Field(default="full", description="'full' crawls linked pages, 'quick' only the homepage")
    website_id: Optional[UUID] = None
    project_id: Optional[UUID] = None

    @field_validator("site_url")
    @classmethod
    def normalize_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("site_url is required")
        if " " in v:
            raise ValueError("site_url cannot contain spaces")
        if not v.lower().startswith(("http://", "https://")):
            v = f"https://{v}"
        return v

    @field_validator("audit_type")
    @classmethod
    def validate_audit_type(cls, v: str) -> str:
        if v not in ("full", "quick"):
            raise ValueError("audit_type must be 'full' or 'quick'")
        return v


class AuditIssueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    description: str
    priority: str
    category: str
    evidence: Optional[str]
    page_url: Optional[str]
    impact: str
    recommendation: str
    score_impact: int


class PageSignalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    page_url: str
    page_type: str
    title: Optional[str]
    meta_description: Optional[str]
    h1_text: Optional[str]
    h2_count: int
    h3_count: int
    word_count: int
    has_local_business_schema: bool
    has_organization_schema: bool
    has_service_schema: bool
    has_faq_schema: bool
    has_breadcrumb_schema: bool
    has_review_schema: bool
    schema_types: List[str]
    has_geo_keywords: bool
    geo_keywords_found: List[str]
    has_service_keywords: bool
    service_keywords_found: List[str]
    has_phone_number: bool
    has_email: bool
    has_address: bool
    has_faq_content: bool
    faq_count: int
    has_canonical: bool
    is_indexable: bool
    internal_links_count: int
    external_links_count: int
    images_count: int
    images_with_alt: int


class AuditSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    site_url: str
    audit_type: str
    status: str
    health_score: Optional[int]
    pages_crawled: int
    error_message: Optional[str]
    created_at: Optional[datetime]
    completed_at: Optional[datetime]

    @field_validator("status", mode="before")
    @classmethod
    def status_value(cls, v):
        return getattr(v, "value", v)


class AuditResponse(AuditSummary):
    issues: List[AuditIssueResponse] = Field(default_factory=list)
    page_signals: List[PageSignalResponse] = Field(default_factory=list)


class AuditListResponse(BaseModel):
    audits: List[AuditSummary]
