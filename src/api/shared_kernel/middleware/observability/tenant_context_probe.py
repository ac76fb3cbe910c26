"""Domain probe for attaching tenant context to requests.

Following Domain-Oriented Observability patterns, this probe captures the
events of the request-scope propagator: which context a request ran under,
and every time an explicit tenant parameter was honored, ignored or
overridden by the host.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantContextProbe(Protocol):
    """Domain probe for request tenant context propagation."""

    def context_attached(
        self,
        host_kind: str,
        tenant_id: str | None,
        source: str,
        is_owner_viewer: bool,
    ) -> None:
        """Record the tenant context a request will run under."""
        ...

    def explicit_tenant_overridden_by_host(
        self,
        host_tenant_id: str,
        requested_tenant_id: str,
    ) -> None:
        """Record that an explicit tenant_id disagreed with the host's tenant."""
        ...

    def explicit_tenant_honored(
        self,
        tenant_id: str,
        user_id: str,
    ) -> None:
        """Record that an owner's explicit tenant_id was honored on a non-store host."""
        ...

    def explicit_tenant_ignored(
        self,
        requested_tenant_id: str,
        user_id: str | None,
        reason: str,
    ) -> None:
        """Record that an explicit tenant_id was ignored."""
        ...

    def tenant_required(self, host_kind: str) -> None:
        """Record that a store-scoped handler was reached on a non-store host."""
        ...

    def owner_required(self, tenant_id: str, user_id: str | None) -> None:
        """Record that an owner-only handler was reached by a non-owner."""
        ...

    def with_context(self, context: ObservationContext) -> TenantContextProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantContextProbe:
    """Default implementation of TenantContextProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantContextProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantContextProbe(logger=self._logger, context=context)

    def context_attached(
        self,
        host_kind: str,
        tenant_id: str | None,
        source: str,
        is_owner_viewer: bool,
    ) -> None:
        """Record the tenant context a request will run under."""
        kwargs = self._get_context_kwargs()
        kwargs["tenant_id"] = tenant_id
        self._logger.debug(
            "tenant_context_attached",
            host_kind=host_kind,
            source=source,
            is_owner_viewer=is_owner_viewer,
            **kwargs,
        )

    def explicit_tenant_overridden_by_host(
        self,
        host_tenant_id: str,
        requested_tenant_id: str,
    ) -> None:
        """Record that an explicit tenant_id disagreed with the host's tenant."""
        self._logger.warning(
            "tenant_context_explicit_tenant_overridden",
            host_tenant_id=host_tenant_id,
            requested_tenant_id=requested_tenant_id,
            **self._get_context_kwargs(),
        )

    def explicit_tenant_honored(
        self,
        tenant_id: str,
        user_id: str,
    ) -> None:
        """Record that an owner's explicit tenant_id was honored on a non-store host."""
        kwargs = self._get_context_kwargs()
        kwargs["tenant_id"] = tenant_id
        kwargs["user_id"] = user_id
        self._logger.info("tenant_context_explicit_tenant_honored", **kwargs)

    def explicit_tenant_ignored(
        self,
        requested_tenant_id: str,
        user_id: str | None,
        reason: str,
    ) -> None:
        """Record that an explicit tenant_id was ignored."""
        kwargs = self._get_context_kwargs()
        kwargs["user_id"] = user_id
        self._logger.warning(
            "tenant_context_explicit_tenant_ignored",
            requested_tenant_id=requested_tenant_id,
            reason=reason,
            **kwargs,
        )

    def tenant_required(self, host_kind: str) -> None:
        """Record that a store-scoped handler was reached on a non-store host."""
        self._logger.info(
            "tenant_context_not_a_store_host",
            host_kind=host_kind,
            **self._get_context_kwargs(),
        )

    def owner_required(self, tenant_id: str, user_id: str | None) -> None:
        """Record that an owner-only handler was reached by a non-owner."""
        kwargs = self._get_context_kwargs()
        kwargs["tenant_id"] = tenant_id
        kwargs["user_id"] = user_id
        self._logger.warning("tenant_context_owner_required", **kwargs)
