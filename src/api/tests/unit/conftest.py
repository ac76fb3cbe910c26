"""Unit test fixtures.

Repository tests run against an in-memory SQLite database (aiosqlite)
created from the ORM metadata; everything else uses mocks.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from infrastructure.database.models import Base
from shared_kernel.middleware.tenant_context import HostKind, TenantContext
from storefront.infrastructure import models as storefront_models  # noqa: F401
from tenancy.infrastructure.models import TenantModel

TENANT_A = "01ARZ3NDEKTSV4RRFFQ69G5FAV"
TENANT_B = "01BX5ZZKBKACTAV9WEVGEMMVRZ"


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    sessionmaker = async_sessionmaker(engine, expire_on_commit=False)
    async with sessionmaker() as session:
        yield session


@pytest_asyncio.fixture
async def two_stores(session: AsyncSession) -> tuple[str, str]:
    """Insert two tenants and return their ids."""
    async with session.begin():
        session.add_all(
            [
                TenantModel(
                    id=TENANT_A,
                    owner_user_id="owner-a",
                    display_name="Store A",
                    subdomain_label="storea",
                ),
                TenantModel(
                    id=TENANT_B,
                    owner_user_id="owner-b",
                    display_name="Store B",
                    subdomain_label="storeb",
                ),
            ]
        )
    return TENANT_A, TENANT_B


def store_context(tenant_id: str, owner: bool = False) -> TenantContext:
    """A context resolved from a store subdomain."""
    return TenantContext(
        tenant_id=tenant_id,
        host_kind=HostKind.TENANT_SUBDOMAIN,
        is_owner_viewer=owner,
    )


@pytest.fixture
def make_store_context():
    """Factory for contexts resolved from a store subdomain."""
    return store_context


@pytest.fixture
def context_a() -> TenantContext:
    return store_context(TENANT_A, owner=True)


@pytest.fixture
def context_b() -> TenantContext:
    return store_context(TENANT_B, owner=True)


@pytest.fixture
def base_domain_context() -> TenantContext:
    return TenantContext.without_tenant(HostKind.BASE_DOMAIN)


@pytest.fixture
def mock_session() -> Mock:
    """Mock AsyncSession whose ``begin()`` works as an async context manager."""
    session = Mock(spec=AsyncSession)
    ctx_manager = Mock()
    ctx_manager.__aenter__ = AsyncMock(return_value=None)
    ctx_manager.__aexit__ = AsyncMock(return_value=None)
    session.begin = Mock(return_value=ctx_manager)
    return session
