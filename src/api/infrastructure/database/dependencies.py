"""Database dependency injection for FastAPI.

Two engine roles share one process: ``write`` for mutations and ``read`` for
lookups (tenant resolution runs on every request, so it may point at a
replica through ``STOREFRONT_DB_READ_HOST``). Each role's engine and
sessionmaker are created lazily on first use.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator, Callable, Literal

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_read_engine, create_write_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import DatabaseSettings, get_database_settings

Role = Literal["write", "read"]

_FACTORIES: dict[Role, Callable[[DatabaseSettings], AsyncEngine]] = {
    "write": create_write_engine,
    "read": create_read_engine,
}

_probe = DefaultConnectionProbe()
_engines: dict[Role, AsyncEngine] = {}
_sessionmakers: dict[Role, async_sessionmaker[AsyncSession]] = {}
_engine_lock = threading.Lock()


def _engine_for(role: Role) -> AsyncEngine:
    if role not in _engines:
        with _engine_lock:
            if role not in _engines:
                settings = get_database_settings()
                engine = _FACTORIES[role](settings)
                _sessionmakers[role] = async_sessionmaker(
                    engine, expire_on_commit=False, class_=AsyncSession
                )
                _engines[role] = engine
                _probe.engine_created(
                    role=role,
                    host=engine.url.host or "",
                    database=settings.database,
                )
    return _engines[role]


def get_write_engine() -> AsyncEngine:
    """The process-wide engine for mutations."""
    return _engine_for("write")


def get_read_engine() -> AsyncEngine:
    """The process-wide engine for lookups."""
    return _engine_for("read")


async def get_write_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a write session for mutations (FastAPI dependency).

    The session does not auto-commit. Callers manage transactions with
    ``async with session.begin()``.

    Usage:
        @router.post("/products")
        async def create_product(
            session: Annotated[AsyncSession, Depends(get_write_session)],
        ):
            async with session.begin():
                session.add(product)
    """
    _engine_for("write")
    async with _sessionmakers["write"]() as session:
        yield session


async def get_read_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a read-only session for queries (FastAPI dependency).

    Read-only is a convention, not enforced by the database role.
    """
    _engine_for("read")
    async with _sessionmakers["read"]() as session:
        yield session


async def close_database_connections() -> None:
    """Dispose every engine created so far. Called on application shutdown."""
    for role in list(_engines):
        engine = _engines.pop(role)
        _sessionmakers.pop(role, None)
        await engine.dispose()
        _probe.pool_closed(role=role)
