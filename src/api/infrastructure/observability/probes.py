"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionProbe(Protocol):
    """Domain probe for database engine lifecycle."""

    def engine_created(self, role: str, host: str, database: str) -> None:
        """Record that a pooled async engine was created."""
        ...

    def pool_closed(self, role: str) -> None:
        """Record that an engine's connection pool was disposed."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionProbe:
    """Default implementation of ConnectionProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultConnectionProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionProbe(logger=self._logger, context=context)

    def engine_created(self, role: str, host: str, database: str) -> None:
        """Record that a pooled async engine was created."""
        self._logger.info(
            "database_engine_created",
            role=role,
            host=host,
            database=database,
            **self._get_context_kwargs(),
        )

    def pool_closed(self, role: str) -> None:
        """Record that an engine's connection pool was disposed."""
        self._logger.info(
            "connection_pool_closed",
            role=role,
            **self._get_context_kwargs(),
        )
