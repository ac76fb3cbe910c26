"""Domain probe for hostname-to-tenant resolution.

Every step of the resolution chain reports here, so a tenant that
"disappears" for a host can be traced back to the step that dropped it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantResolutionProbe(Protocol):
    """Domain probe for tenant resolution."""

    def base_domain_host(self, host: str) -> None:
        """Record that a host addressed the platform itself."""
        ...

    def tenant_resolved(self, tenant_id: str, host: str, host_kind: str) -> None:
        """Record that a host resolved to a tenant."""
        ...

    def bare_label_fallback(self, host: str, label: str) -> None:
        """Record that an unclaimed platform label was served as the base domain."""
        ...

    def legacy_label_fallback(self, host: str, label: str, tenant_id: str) -> None:
        """Record that a host matched by its leftmost label after a custom-domain miss."""
        ...

    def host_unmatched(self, host: str) -> None:
        """Record that a host looked like a store but no tenant owns it."""
        ...

    def orphaned_tenant(self, tenant_id: str, host: str) -> None:
        """Record that a matched tenant has no reachable hostname binding."""
        ...

    def directory_unavailable(self, host: str, error: Exception) -> None:
        """Record that resolution fell back to no tenant after a directory failure."""
        ...

    def with_context(self, context: ObservationContext) -> TenantResolutionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantResolutionProbe:
    """Default implementation of TenantResolutionProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantResolutionProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantResolutionProbe(logger=self._logger, context=context)

    def _kwargs(self, **fields: Any) -> dict[str, Any]:
        return {**self._get_context_kwargs(), **fields}

    def base_domain_host(self, host: str) -> None:
        self._logger.debug("tenant_resolution_base_domain", **self._kwargs(host=host))

    def tenant_resolved(self, tenant_id: str, host: str, host_kind: str) -> None:
        self._logger.debug(
            "tenant_resolution_resolved",
            **self._kwargs(tenant_id=tenant_id, host=host, host_kind=host_kind),
        )

    def bare_label_fallback(self, host: str, label: str) -> None:
        self._logger.debug(
            "tenant_resolution_bare_label_fallback",
            **self._kwargs(host=host, label=label),
        )

    def legacy_label_fallback(self, host: str, label: str, tenant_id: str) -> None:
        self._logger.info(
            "tenant_resolution_legacy_label_fallback",
            **self._kwargs(host=host, label=label, tenant_id=tenant_id),
        )

    def host_unmatched(self, host: str) -> None:
        self._logger.info("tenant_resolution_unmatched", **self._kwargs(host=host))

    def orphaned_tenant(self, tenant_id: str, host: str) -> None:
        self._logger.warning(
            "tenant_resolution_orphaned_tenant",
            **self._kwargs(tenant_id=tenant_id, host=host),
        )

    def directory_unavailable(self, host: str, error: Exception) -> None:
        self._logger.error(
            "tenant_resolution_directory_unavailable",
            **self._kwargs(
                host=host, error=str(error), error_type=type(error).__name__
            ),
        )
