"""Pydantic schemas for content generation and scoring"""
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SUPPORTED_PROVIDERS = ("openai", "anthropic")


class GenerationRequest(BaseModel):
    """Request to generate an article"""
    keyword: Optional[str] = Field(None, max_length=200)
    custom_prompt: Optional[str] = None
    tone: Optional[str] = None
    word_count: Optional[int] = Field(None, ge=100, le=10000)
    audience: Optional[str] = None
    project_id: Optional[UUID] = None
    provider: str = "openai"
    model: Optional[str] = None

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in SUPPORTED_PROVIDERS:
            raise ValueError(f"provider must be one of {', '.join(SUPPORTED_PROVIDERS)}")
        return v

    @model_validator(mode="after")
    def require_keyword_or_prompt(self) -> "GenerationRequest":
        if not (self.keyword and self.keyword.strip()) and not (self.custom_prompt and self.custom_prompt.strip()):
            raise ValueError("keyword or custom_prompt is required")
        return self


class ScoreRequest(BaseModel):
    """Request to score existing article text"""
    title: str
    content: str
    keyword: str = Field(..., min_length=1, max_length=200)


class ScoreResponse(BaseModel):
    title: str
    word_count: int
    seo_score: int
    seo_analysis: Dict[str, Dict[str, Any]]


class ArticleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    slug: str
    meta_description: Optional[str]
    excerpt: Optional[str]
    content: str
    outline: Dict[str, Any]
    keyword: Optional[str]
    word_count: int
    reading_time_minutes: int
    seo_score: int
    seo_analysis: Dict[str, Any]
    ai_provider: Optional[str]
    ai_model: Optional[str]
    status: str
    generated_at: Optional[datetime]


class GenerationInfo(BaseModel):
    provider: str
    model: str
    duration_ms: int


class GenerationResponse(BaseModel):
    article: ArticleResponse
    generation: GenerationInfo
