"""Application configuration"""
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Database
    database_url: str

    # Security
    master_secret: str
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: List[str] = [
        "https://research-build-manage.pages.dev",
        "http://localhost:5173",
    ]

    # Outbound calls
    fetch_timeout_seconds: float = 25.0
    upstream_timeout_seconds: float = 60.0
    user_agent: str = "Mozilla/5.0 (compatible; GEOAuditBot/1.0; +https://webfoundry.ai)"
    max_crawl_pages: int = 5

    # Content generation
    openai_default_model: str = "gpt-4o-mini"
    anthropic_default_model: str = "claude-3-haiku-20240307"
    generation_max_tokens: int = 4000

    @field_validator("master_secret", "jwt_secret")
    @classmethod
    def secret_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must be set to a non-empty value")
        return v


settings = Settings()
