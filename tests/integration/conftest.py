"""Fixtures for tests that run against a real PostgreSQL database."""

from typing import AsyncGenerator

import pytest
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import attendance.models  # noqa: F401  registers tables on Base.metadata
from attendance.config import get_settings
from attendance.utils.db import Base


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Session on a freshly created schema.

    Tables are created before and dropped after every test. Skips if the
    database is not available.
    """
    engine = create_async_engine(get_settings().db_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    except (DBAPIError, SQLAlchemyError, OSError):
        await engine.dispose()
        pytest.skip("PostgreSQL not available for integration tests")

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()
