"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import (
    close_database_connections,
    get_read_session,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import (
    get_auth_settings,
    get_settings,
    get_tenancy_settings,
)
from infrastructure.version import __version__
from storefront import presentation as storefront_presentation
from tenancy import presentation as tenancy_presentation


@asynccontextmanager
async def storefront_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Auth settings check (startup fails without a signing secret)
    - Database engine lifecycle (created lazily, disposed on shutdown)
    """
    configure_logging(debug=get_settings().debug)
    get_auth_settings()
    probe = DefaultStartupProbe()
    tenancy_settings = get_tenancy_settings()
    probe.application_started(
        version=__version__,
        root_domain=tenancy_settings.root_domain,
        dev_root_domains=list(tenancy_settings.dev_root_domains),
    )

    yield

    await close_database_connections()
    probe.application_stopped()


app = FastAPI(
    title="Storefront API",
    description="Multi-tenant storefronts resolved by hostname",
    version=__version__,
    lifespan=storefront_lifespan,
)

# Tenancy bounded context: hostname lookup and store provisioning
app.include_router(tenancy_presentation.router)

# Store-owned catalog, orders, customers and dashboard
app.include_router(storefront_presentation.router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> dict:
    """Check database connection health."""
    try:
        await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        return {"status": "error", "connected": False, "error": str(e)}
    return {"status": "ok", "connected": True}
