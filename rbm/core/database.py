"""Database connection and session management"""
import logging
import ssl
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from rbm.core.config import settings

logger = logging.getLogger(__name__)


def mask_url(url: str) -> str:
    """Mask sensitive parts of database URL for logging"""
    try:
        parsed = urlparse(url)
        if parsed.password:
            netloc = parsed.netloc.replace(f":{parsed.password}@", ":***@")
            return urlunparse(parsed._replace(netloc=netloc))
        return url
    except ValueError:
        return "***"


def prepare_database_url(url: str) -> tuple:
    """
    Normalise a Postgres URL for asyncpg.

    asyncpg rejects ``sslmode`` in the query string, so it is translated
    into an ``ssl`` connect argument. Managed Postgres (Supabase) hands out
    plain ``postgresql://`` URLs with ``sslmode=require``.

    Returns:
        Tuple of (url, connect_args)
    """
    connect_args = {}
    if not url.startswith(("postgresql://", "postgresql+asyncpg://")):
        return url, connect_args

    parsed = urlparse(url)
    query_params = parse_qs(parsed.query)
    sslmode = query_params.pop("sslmode", [None])[0]

    if sslmode == "disable":
        connect_args["ssl"] = False
    elif sslmode in ("verify-ca", "verify-full"):
        connect_args["ssl"] = ssl.create_default_context()
    elif sslmode is not None:
        # require/prefer: encrypted, certificate not verified
        ssl_context = ssl.create_default_context()
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE
        connect_args["ssl"] = ssl_context

    if connect_args.get("ssl"):
        connect_args["timeout"] = 10

    url = urlunparse(parsed._replace(query=urlencode(query_params, doseq=True)))
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url, connect_args


database_url, connect_args = prepare_database_url(settings.database_url)
logger.info("Database URL: %s (ssl=%s)", mask_url(database_url), "enabled" if connect_args.get("ssl") else "disabled")

engine_kwargs = {"echo": False, "future": True, "connect_args": connect_args}
if database_url.startswith("postgresql"):
    engine_kwargs.update(
        pool_pre_ping=True,
        pool_recycle=3600,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
    )

engine = create_async_engine(database_url, **engine_kwargs)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

# Base class for models
Base = declarative_base()


async def get_db() -> AsyncSession:
    """Dependency for getting database session"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
