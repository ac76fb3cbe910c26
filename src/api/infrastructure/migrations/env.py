"""Alembic environment for the storefront database.

The connection URL comes from ``DatabaseSettings`` rather than alembic.ini,
so migrations use the same ``STOREFRONT_DB_*`` variables as the API.
"""

import asyncio

from alembic import context
from sqlalchemy.ext.asyncio import create_async_engine

from infrastructure.database.engines import build_async_url
from infrastructure.database.models import Base
from infrastructure.settings import get_database_settings

# Register every table on Base.metadata
import storefront.infrastructure.models  # noqa: F401
import tenancy.infrastructure.models  # noqa: F401

config = context.config
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting."""
    context.configure(
        url=build_async_url(get_database_settings()),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(build_async_url(get_database_settings()))
    async with engine.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
