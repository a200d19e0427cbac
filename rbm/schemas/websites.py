"""Pydantic schemas for websites and their availability / SEO health checks"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


def normalize_site_url(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("URL is required")
    if not v.lower().startswith(("http://", "https://")):
        v = f"https://{v}"
    return v.rstrip("/")


class WebsiteCreate(BaseModel):
    """Register a site for the current user"""
    url: str = Field(..., min_length=1)

    @field_validator("url")
    @classmethod
    def normalize_url(cls, v: str) -> str:
        return normalize_site_url(v)


class WebsiteCheckRequest(WebsiteCreate):
    website_id: Optional[UUID] = None


class WebsiteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    url: str
    status: Optional[int]
    response_time_ms: Optional[int]
    last_checked_at: Optional[datetime]
    created_at: Optional[datetime]


class WebsiteListResponse(BaseModel):
    websites: List[WebsiteResponse]


class AvailabilityResponse(BaseModel):
    ok: bool
    is_live: bool
    status_code: Optional[int]
    response_time_ms: int
    error_message: Optional[str]
    checked_at: str


class SeoHealthResponse(BaseModel):
    robots_txt_exists: bool
    robots_txt_valid: bool
    robots_txt_allows_crawl: bool
    robots_txt_content: Optional[str]
    sitemap_exists: bool
    sitemap_valid: bool
    sitemap_url_count: int
    sitemap_url: Optional[str]
    ssl_valid: bool
    ssl_issuer: Optional[str] = None
    ssl_expires_at: Optional[str] = None
    ssl_days_remaining: Optional[int] = None
    health_score: int
    checked_at: str
