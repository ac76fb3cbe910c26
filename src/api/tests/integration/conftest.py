"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance. Point them at one with
the usual ``STOREFRONT_DB_*`` variables; the tables are created from the ORM
metadata and dropped again after each test.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from infrastructure.database.engines import build_async_url
from infrastructure.database.models import Base
from infrastructure.settings import DatabaseSettings
from storefront.infrastructure import models as storefront_models  # noqa: F401
from tenancy.infrastructure import models as tenancy_models  # noqa: F401


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests."""
    return DatabaseSettings(
        host=os.getenv("STOREFRONT_DB_HOST", "localhost"),
        port=int(os.getenv("STOREFRONT_DB_PORT", "5432")),
        database=os.getenv("STOREFRONT_DB_DATABASE", "storefront_test"),
        username=os.getenv("STOREFRONT_DB_USERNAME", "storefront"),
        password=SecretStr(os.getenv("STOREFRONT_DB_PASSWORD", "storefront_dev_password")),
    )


@pytest_asyncio.fixture
async def pg_engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Engine on a freshly created schema."""
    engine = create_async_engine(build_async_url(integration_db_settings), pool_size=20)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def pg_sessionmaker(pg_engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(pg_engine, expire_on_commit=False)
