"""Domain probe for tenant directory operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events of the hostname-to-tenant directory.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantDirectoryProbe(Protocol):
    """Domain probe for tenant directory operations."""

    def tenant_created(self, tenant_id: str, subdomain_label: str | None) -> None:
        """Record that a tenant row was inserted."""
        ...

    def tenant_saved(self, tenant_id: str) -> None:
        """Record that edits to a tenant were persisted."""
        ...

    def tenant_found(self, tenant_id: str, lookup: str) -> None:
        """Record a directory hit and which key it was found by."""
        ...

    def tenant_not_found(self, lookup: str, key: str) -> None:
        """Record a directory miss."""
        ...

    def binding_conflict(self, field: str, value: str | None) -> None:
        """Record that a write collided with a uniqueness constraint."""
        ...

    def directory_unavailable(self, operation: str, error: Exception) -> None:
        """Record that the storage engine failed during a directory operation."""
        ...

    def subdomain_generated(self, seed: str, label: str) -> None:
        """Record that a free subdomain label was found for a seed."""
        ...

    def subdomain_space_exhausted(self, seed: str, attempts: int) -> None:
        """Record that every candidate label for a seed was taken."""
        ...

    def with_context(self, context: ObservationContext) -> TenantDirectoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantDirectoryProbe:
    """Default implementation of TenantDirectoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantDirectoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantDirectoryProbe(logger=self._logger, context=context)

    def tenant_created(self, tenant_id: str, subdomain_label: str | None) -> None:
        kwargs = self._get_context_kwargs()
        kwargs["tenant_id"] = tenant_id
        self._logger.info(
            "tenant_directory_tenant_created",
            subdomain_label=subdomain_label,
            **kwargs,
        )

    def tenant_saved(self, tenant_id: str) -> None:
        kwargs = self._get_context_kwargs()
        kwargs["tenant_id"] = tenant_id
        self._logger.info("tenant_directory_tenant_saved", **kwargs)

    def tenant_found(self, tenant_id: str, lookup: str) -> None:
        kwargs = self._get_context_kwargs()
        kwargs["tenant_id"] = tenant_id
        self._logger.debug("tenant_directory_hit", lookup=lookup, **kwargs)

    def tenant_not_found(self, lookup: str, key: str) -> None:
        self._logger.debug(
            "tenant_directory_miss",
            lookup=lookup,
            key=key,
            **self._get_context_kwargs(),
        )

    def binding_conflict(self, field: str, value: str | None) -> None:
        self._logger.warning(
            "tenant_directory_binding_conflict",
            field=field,
            value=value,
            **self._get_context_kwargs(),
        )

    def directory_unavailable(self, operation: str, error: Exception) -> None:
        self._logger.error(
            "tenant_directory_unavailable",
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def subdomain_generated(self, seed: str, label: str) -> None:
        self._logger.info(
            "tenant_directory_subdomain_generated",
            seed=seed,
            label=label,
            **self._get_context_kwargs(),
        )

    def subdomain_space_exhausted(self, seed: str, attempts: int) -> None:
        self._logger.error(
            "tenant_directory_subdomain_space_exhausted",
            seed=seed,
            attempts=attempts,
            **self._get_context_kwargs(),
        )
