"""Pydantic schemas for GEO content packages"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

CONTENT_STATUSES = ("draft", "approved", "rejected", "published")


class GeoContentRequest(BaseModel):
    """Business details to build a GEO content package from"""
    business_name: str = Field("", max_length=200)
    primary_city: str = Field("", max_length=200)
    country: str = "UK"
    service_areas: List[str] = Field(default_factory=list)
    primary_services: List[str] = Field(default_factory=list)
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    credentials: List[str] = Field(default_factory=list)
    year_established: Optional[int] = Field(None, ge=1000, le=9999)
    project_id: Optional[UUID] = None
    audit_id: Optional[UUID] = None
    content_type: str = "full_package"

    @field_validator("business_name", "primary_city", "country")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("service_areas", "primary_services", "credentials")
    @classmethod
    def drop_blank_items(cls, v: List[str]) -> List[str]:
        return [item.strip() for item in v if item and item.strip()]

    @model_validator(mode="after")
    def require_business_basics(self) -> "GeoContentRequest":
        if not self.business_name or not self.primary_city or not self.primary_services:
            raise ValueError("business_name, primary_city, and at least one primary_service are required")
        return self


class GeoContentUpdate(BaseModel):
    """Review update for a generated package"""
    status: Optional[str] = None
    review_notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in CONTENT_STATUSES:
            raise ValueError(f"status must be one of {', '.join(CONTENT_STATUSES)}")
        return v


class GeoContentSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: Optional[UUID]
    audit_id: Optional[UUID]
    business_name: str
    primary_city: str
    content_type: str
    status: str
    meta_title: Optional[str]
    created_at: Optional[datetime]


class GeoContentResponse(GeoContentSummary):
    country: str
    service_areas: List[str]
    primary_services: List[str]
    meta_description: Optional[str]
    answer_capsule: Optional[str]
    service_descriptions: List[Dict[str, Any]]
    faqs: List[Dict[str, Any]]
    schema_json_ld: List[Dict[str, Any]]
    generated_json: Dict[str, Any]
    generated_markdown: str
    generated_html: str
    review_notes: Optional[str]
    reviewed_by: Optional[str]
    reviewed_at: Optional[datetime]
    updated_at: Optional[datetime]


class GeoContentListResponse(BaseModel):
    contents: List[GeoContentSummary]
