"""Pydantic schemas for build variance (near-duplicate) checks"""
from typing import List, Optional

from pydantic import BaseModel, Field


class VarianceSection(BaseModel):
    title: Optional[str] = None
    intent: Optional[str] = None


class VarianceContent(BaseModel):
    h1: Optional[str] = None
    intro: Optional[str] = None
    sections: List[VarianceSection] = Field(default_factory=list)


class VariancePage(BaseModel):
    """A generated page as produced by the build flow"""
    slug: Optional[str] = None
    display_name: Optional[str] = None
    content: VarianceContent = Field(default_factory=VarianceContent)


class VarianceRequest(BaseModel):
    pages: List[VariancePage] = Field(..., min_length=1)


class VarianceResult(BaseModel):
    slug: str
    display_name: str
    matched_slug: Optional[str]
    matched_display_name: Optional[str]
    score: float
    status: str


class VarianceResponse(BaseModel):
    results: List[VarianceResult]
