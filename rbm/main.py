"""Main FastAPI application"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from rbm import __version__
from rbm.api.exception_handlers import (
    http_exception_handler,
    rbm_error_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from rbm.api.routes import (
    audits_router,
    content_router,
    geo_content_router,
    secrets_router,
    settings_router,
    variance_router,
    websites_router,
)
from rbm.core.config import settings
from rbm.core.database import engine
from rbm.core.security.encryption import get_secret_vault
from rbm.exceptions import RBMError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup: refuse to serve without a usable vault key
    get_secret_vault()
    logger.info("RBM backend %s starting (%s)", __version__, settings.environment)

    yield

    # Shutdown
    await engine.dispose()


app = FastAPI(
    title="RBM - SEO Operations Backend",
    description="Secrets, GEO audits, content scoring and site health for SEO teams",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
app.add_exception_handler(RBMError, rbm_error_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# Include routers
app.include_router(secrets_router, prefix="/api/v1")
app.include_router(audits_router, prefix="/api/v1")
app.include_router(variance_router, prefix="/api/v1")
app.include_router(content_router, prefix="/api/v1")
app.include_router(geo_content_router, prefix="/api/v1")
app.include_router(websites_router, prefix="/api/v1")
app.include_router(settings_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "name": "RBM",
        "version": __version__,
        "status": "operational",
    }


@app.get("/health")
async def health_check():
    """Liveness endpoint"""
    return {"status": "healthy", "version": __version__}
