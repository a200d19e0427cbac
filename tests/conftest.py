"""Pytest configuration and shared fixtures"""
import os

# Settings are read at import time; these must be set before rbm is imported.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("MASTER_SECRET", "test-master-secret-for-testing-only")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-for-testing-only")

from typing import AsyncGenerator
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine():
    """In-memory database with every table created"""
    from rbm.core.database import Base
    import rbm.db.models  # noqa: F401

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_sessionmaker(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db_session(test_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    async with test_sessionmaker() as session:
        yield session


@pytest.fixture
def vault():
    from rbm.core.security.encryption import SecretVault
    return SecretVault("test-master-secret-for-testing-only")


@pytest.fixture
def mock_user_id():
    """Mock user id as issued in the token's sub claim"""
    return str(uuid4())


@pytest.fixture
def auth_headers(mock_user_id):
    from rbm.core.auth import create_access_token
    token = create_access_token({"sub": mock_user_id, "email": "owner@example.com"})
    return {"Authorization": f"Bearer {token}"}
