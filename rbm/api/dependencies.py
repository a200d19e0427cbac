"""FastAPI dependency injection for RBM services"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rbm.core.database import get_db
from rbm.services.content.generation import ContentGenerator
from rbm.services.health import WebsiteHealthChecker
from rbm.services.scanning.crawler import SiteCrawler
from rbm.services.secrets import SecretStore


def get_secret_store(db: AsyncSession = Depends(get_db)) -> SecretStore:
    """Get secret store bound to the request's session"""
    return SecretStore(db)


def get_site_crawler() -> SiteCrawler:
    """Get site crawler instance"""
    return SiteCrawler()


def get_health_checker() -> WebsiteHealthChecker:
    """Get website health checker instance"""
    return WebsiteHealthChecker()


def get_content_generator() -> ContentGenerator:
    """Get content generator instance"""
    return ContentGenerator()
