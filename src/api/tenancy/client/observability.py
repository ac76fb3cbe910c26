"""Domain probe for client-side tenant resolution.

Following Domain-Oriented Observability patterns, this probe captures the
events of a storefront session resolving the hostname it runs on: lookups
that failed over to a tenant-less context, and navigations whose answer
arrived after a newer navigation had already started.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantScopeProbe(Protocol):
    """Domain probe for client-side tenant resolution."""

    def lookup_failed(
        self, host: str, reason: str, status_code: int | None = None
    ) -> None:
        """Record that a lookup fell back to a tenant-less context."""
        ...

    def navigation_started(self, host: str, generation: int) -> None:
        """Record that a navigation cleared the scope to pending."""
        ...

    def navigation_resolved(
        self, host: str, generation: int, tenant_id: str | None, host_kind: str
    ) -> None:
        """Record that a navigation's context was applied."""
        ...

    def stale_navigation_discarded(
        self, host: str, generation: int, current_generation: int
    ) -> None:
        """Record that a superseded navigation's answer was dropped."""
        ...

    def with_context(self, context: ObservationContext) -> TenantScopeProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantScopeProbe:
    """Default implementation of TenantScopeProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTenantScopeProbe:
        return DefaultTenantScopeProbe(logger=self._logger, context=context)

    def lookup_failed(
        self, host: str, reason: str, status_code: int | None = None
    ) -> None:
        self._logger.warning(
            "tenant_lookup_failed",
            host=host,
            reason=reason,
            status_code=status_code,
            **self._get_context_kwargs(),
        )

    def navigation_started(self, host: str, generation: int) -> None:
        self._logger.debug(
            "tenant_navigation_started",
            host=host,
            generation=generation,
            **self._get_context_kwargs(),
        )

    def navigation_resolved(
        self, host: str, generation: int, tenant_id: str | None, host_kind: str
    ) -> None:
        self._logger.debug(
            "tenant_navigation_resolved",
            host=host,
            generation=generation,
            tenant_id=tenant_id,
            host_kind=host_kind,
            **self._get_context_kwargs(),
        )

    def stale_navigation_discarded(
        self, host: str, generation: int, current_generation: int
    ) -> None:
        self._logger.info(
            "tenant_stale_navigation_discarded",
            host=host,
            generation=generation,
            current_generation=current_generation,
            **self._get_context_kwargs(),
        )
