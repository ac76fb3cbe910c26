"""FastAPI dependencies for store-scoped repositories.

Read endpoints get repositories on the read session. Mutating endpoints get
them on the write session and open the transaction themselves; FastAPI
hands the route and the repository the same per-request session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_read_session, get_write_session
from storefront.infrastructure.catalog_repository import CatalogRepository
from storefront.infrastructure.dashboard_repository import DashboardRepository
from storefront.infrastructure.observability import (
    DefaultStorefrontRepositoryProbe,
    StorefrontRepositoryProbe,
)
from storefront.infrastructure.order_repository import OrderRepository


def get_storefront_probe() -> StorefrontRepositoryProbe:
    return DefaultStorefrontRepositoryProbe()


def get_catalog_reader(
    session: Annotated[AsyncSession, Depends(get_read_session)],
    probe: Annotated[StorefrontRepositoryProbe, Depends(get_storefront_probe)],
) -> CatalogRepository:
    return CatalogRepository(session=session, probe=probe)


def get_catalog_writer(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    probe: Annotated[StorefrontRepositoryProbe, Depends(get_storefront_probe)],
) -> CatalogRepository:
    return CatalogRepository(session=session, probe=probe)


def get_order_reader(
    session: Annotated[AsyncSession, Depends(get_read_session)],
    probe: Annotated[StorefrontRepositoryProbe, Depends(get_storefront_probe)],
) -> OrderRepository:
    return OrderRepository(session=session, probe=probe)


def get_order_writer(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    probe: Annotated[StorefrontRepositoryProbe, Depends(get_storefront_probe)],
) -> OrderRepository:
    return OrderRepository(session=session, probe=probe)


def get_dashboard_repository(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> DashboardRepository:
    return DashboardRepository(session=session)
