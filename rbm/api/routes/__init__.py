"""API route modules"""
from rbm.api.routes.audits import router as audits_router
from rbm.api.routes.content import router as content_router
from rbm.api.routes.geo_content import router as geo_content_router
from rbm.api.routes.secrets import router as secrets_router
from rbm.api.routes.settings import router as settings_router
from rbm.api.routes.variance import router as variance_router
from rbm.api.routes.websites import router as websites_router

__all__ = [
    "audits_router",
    "content_router",
    "geo_content_router",
    "secrets_router",
    "settings_router",
    "variance_router",
    "websites_router",
]
