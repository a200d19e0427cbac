"""Database models mirroring the managed Postgres tables"""
import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON, Boolean, Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text,
    UniqueConstraint, Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from rbm.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditStatus(str, enum.Enum):
    """Lifecycle of a GEO audit run"""
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class UserSecret(Base):
    """Encrypted per-user credential, one row per (user_id, key)"""
    __tablename__ = "user_secrets"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)
    key = Column(String, nullable=False)
    value_encrypted = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "key", name="uq_user_secrets_user_key"),
    )


class UserSettings(Base):
    """Stored settings overrides for a user"""
    __tablename__ = "user_settings"

    user_id = Column(String, primary_key=True)
    settings = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class GeoAudit(Base):
    """A GEO/SEO audit run over a site"""
    __tablename__ = "geo_audits"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)
    website_id = Column(Uuid, nullable=True)
    project_id = Column(Uuid, nullable=True)
    site_url = Column(Text, nullable=False)
    audit_type = Column(String, nullable=False, default="full")
    status = Column(
        Enum(AuditStatus, name="audit_status", values_callable=lambda x: [e.value for e in x]),
        default=AuditStatus.RUNNING,
        nullable=False,
    )
    health_score = Column(Integer, nullable=True)
    pages_crawled = Column(Integer, default=0)
    pages_analyzed = Column(Integer, default=0)
    error_message = Column(Text, nullable=True)
    started_at = Column(DateTime(timezone=True), default=utcnow)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    issues = relationship(
        "GeoAuditIssue", back_populates="audit", cascade="all, delete-orphan",
        order_by="GeoAuditIssue.position", lazy="selectin",
    )
    page_signals = relationship(
        "GeoPageSignal", back_populates="audit", cascade="all, delete-orphan",
        order_by="GeoPageSignal.position", lazy="selectin",
    )


class GeoAuditIssue(Base):
    """Issue produced by the audit rule engine"""
    __tablename__ = "geo_audit_issues"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    audit_id = Column(Uuid, ForeignKey("geo_audits.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    priority = Column(String, nullable=False)
    category = Column(String, nullable=False)
    evidence = Column(Text, nullable=True)
    page_url = Column(Text, nullable=True)
    impact = Column(Text, nullable=False)
    recommendation = Column(Text, nullable=False)
    score_impact = Column(Integer, nullable=False)

    audit = relationship("GeoAudit", back_populates="issues")


class GeoPageSignal(Base):
    """Heuristic on-page signals for one crawled page"""
    __tablename__ = "geo_page_signals"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    audit_id = Column(Uuid, ForeignKey("geo_audits.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    page_url = Column(Text, nullable=False)
    page_type = Column(String, nullable=False)
    title = Column(Text)
    meta_description = Column(Text)
    h1_text = Column(Text)
    h2_count = Column(Integer, default=0)
    h3_count = Column(Integer, default=0)
    word_count = Column(Integer, default=0)
    has_local_business_schema = Column(Boolean, default=False)
    has_organization_schema = Column(Boolean, default=False)
    has_service_schema = Column(Boolean, default=False)
    has_faq_schema = Column(Boolean, default=False)
    has_breadcrumb_schema = Column(Boolean, default=False)
    has_review_schema = Column(Boolean, default=False)
    schema_types = Column(JSON, default=list)
    has_geo_keywords = Column(Boolean, default=False)
    geo_keywords_found = Column(JSON, default=list)
    has_service_keywords = Column(Boolean, default=False)
    service_keywords_found = Column(JSON, default=list)
    has_phone_number = Column(Boolean, default=False)
    has_email = Column(Boolean, default=False)
    has_address = Column(Boolean, default=False)
    has_faq_content = Column(Boolean, default=False)
    faq_count = Column(Integer, default=0)
    has_canonical = Column(Boolean, default=False)
    is_indexable = Column(Boolean, default=True)
    internal_links_count = Column(Integer, default=0)
    external_links_count = Column(Integer, default=0)
    images_count = Column(Integer, default=0)
    images_with_alt = Column(Integer, default=0)

    audit = relationship("GeoAudit", back_populates="page_signals")


class GeneratedArticle(Base):
    """AI-generated article with its SEO score"""
    __tablename__ = "generated_articles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)
    project_id = Column(Uuid, nullable=True)
    title = Column(Text, nullable=False)
    slug = Column(String(100), nullable=False)
    meta_description = Column(Text)
    excerpt = Column(Text)
    content = Column(Text, nullable=False)
    content_markdown = Column(Text, nullable=False)
    outline = Column(JSON, default=dict)
    keyword = Column(Text)
    word_count = Column(Integer, default=0)
    reading_time_minutes = Column(Integer, default=0)
    seo_score = Column(Integer, default=0)
    seo_analysis = Column(JSON, default=dict)
    ai_provider = Column(String)
    ai_model = Column(String)
    generation_params = Column(JSON, default=dict)
    status = Column(String, nullable=False, default="draft")
    generated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())


class Website(Base):
    """Tracked website owned by a user"""
    __tablename__ = "websites"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)
    url = Column(Text, nullable=False)
    status = Column(Integer, nullable=True)
    response_time_ms = Column(Integer, nullable=True)
    last_checked_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())


class StatusCheck(Base):
    """One availability check of a website"""
    __tablename__ = "status_checks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    website_id = Column(Uuid, ForeignKey("websites.id", ondelete="CASCADE"), nullable=False)
    is_live = Column(Boolean, nullable=False)
    status_code = Column(Integer, nullable=True)
    response_time_ms = Column(Integer, nullable=False)
    error_message = Column(Text, nullable=True)
    checked_at = Column(DateTime(timezone=True), nullable=False)


class SeoHealthCheck(Base):
    """robots.txt / sitemap / SSL check of a website"""
    __tablename__ = "seo_health_checks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    website_id = Column(Uuid, ForeignKey("websites.id", ondelete="CASCADE"), nullable=False)
    robots_txt_exists = Column(Boolean, default=False)
    robots_txt_valid = Column(Boolean, default=False)
    robots_txt_allows_crawl = Column(Boolean, default=False)
    robots_txt_content = Column(Text, nullable=True)
    sitemap_exists = Column(Boolean, default=False)
    sitemap_valid = Column(Boolean, default=False)
    sitemap_url_count = Column(Integer, default=0)
    sitemap_url = Column(Text, nullable=True)
    ssl_valid = Column(Boolean, default=False)
    ssl_issuer = Column(Text, nullable=True)
    ssl_expires_at = Column(DateTime(timezone=True), nullable=True)
    ssl_days_remaining = Column(Integer, nullable=True)
    health_score = Column(Float, default=0)
    checked_at = Column(DateTime(timezone=True), nullable=False)


class GeoGeneratedContent(Base):
    """Template-generated GEO content package awaiting review"""
    __tablename__ = "geo_generated_content"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)
    project_id = Column(Uuid, nullable=True)
    audit_id = Column(Uuid, ForeignKey("geo_audits.id", ondelete="SET NULL"), nullable=True)
    business_name = Column(Text, nullable=False)
    primary_city = Column(Text, nullable=False)
    country = Column(String, nullable=False)
    service_areas = Column(JSON, default=list)
    primary_services = Column(JSON, default=list)
    business_input_json = Column(JSON, default=dict)
    content_type = Column(String, nullable=False, default="full_package")
    generated_json = Column(JSON, default=dict)
    generated_markdown = Column(Text, nullable=False)
    generated_html = Column(Text, nullable=False)
    meta_title = Column(Text)
    meta_description = Column(Text)
    answer_capsule = Column(Text)
    service_descriptions = Column(JSON, default=list)
    faqs = Column(JSON, default=list)
    schema_json_ld = Column(JSON, default=list)
    status = Column(String, nullable=False, default="draft")
    review_notes = Column(Text, nullable=True)
    reviewed_by = Column(String, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
