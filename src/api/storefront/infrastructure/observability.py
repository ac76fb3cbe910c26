"""Domain probe for store-scoped data access.

Following Domain-Oriented Observability patterns, this probe captures the
events that matter for tenant isolation: owned rows being written, writes
refused for lack of a tenant, and references that tried to cross into
another store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class StorefrontRepositoryProbe(Protocol):
    """Domain probe for store-scoped repository operations."""

    def owned_entity_created(self, entity: str, entity_id: str, tenant_id: str) -> None:
        ...

    def owned_entity_deleted(self, entity: str, entity_id: str, tenant_id: str) -> None:
        ...

    def unscoped_write_refused(self, entity: str, host_kind: str) -> None:
        ...

    def reference_not_in_scope(
        self, entity: str, entity_id: str, tenant_id: str | None
    ) -> None:
        """Record a reference to a row that is missing or owned by another store."""
        ...

    def with_context(self, context: ObservationContext) -> StorefrontRepositoryProbe:
        ...


class DefaultStorefrontRepositoryProbe:
    """Default implementation of StorefrontRepositoryProbe using structlog."""

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

    def _kwargs(self, **fields: Any) -> dict[str, Any]:
        return {**self._get_context_kwargs(), **fields}

    def with_context(
        self, context: ObservationContext
    ) -> DefaultStorefrontRepositoryProbe:
        return DefaultStorefrontRepositoryProbe(logger=self._logger, context=context)

    def owned_entity_created(self, entity: str, entity_id: str, tenant_id: str) -> None:
        self._logger.info(
            "owned_entity_created",
            **self._kwargs(entity=entity, entity_id=entity_id, tenant_id=tenant_id),
        )

    def owned_entity_deleted(self, entity: str, entity_id: str, tenant_id: str) -> None:
        self._logger.info(
            "owned_entity_deleted",
            **self._kwargs(entity=entity, entity_id=entity_id, tenant_id=tenant_id),
        )

    def unscoped_write_refused(self, entity: str, host_kind: str) -> None:
        self._logger.error(
            "unscoped_write_refused",
            **self._kwargs(entity=entity, host_kind=host_kind),
        )

    def reference_not_in_scope(
        self, entity: str, entity_id: str, tenant_id: str | None
    ) -> None:
        self._logger.warning(
            "reference_not_in_scope",
            **self._kwargs(entity=entity, entity_id=entity_id, tenant_id=tenant_id),
        )
