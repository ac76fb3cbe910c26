"""Domain probe for tenant provisioning and store settings edits."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantProvisioningProbe(Protocol):
    """Domain probe for tenant provisioning operations."""

    def tenant_provisioned(
        self, tenant_id: str, owner_user_id: str, subdomain_label: str
    ) -> None:
        """Record that a new store was created."""
        ...

    def owner_already_provisioned(self, owner_user_id: str) -> None:
        """Record that a user who already owns a store asked for another."""
        ...

    def reserved_label_requested(self, label: str) -> None:
        """Record that a reserved or platform label was requested explicitly."""
        ...

    def subdomain_race_lost(self, label: str, attempt: int) -> None:
        """Record that a generated label was taken by a concurrent insert."""
        ...

    def provisioning_exhausted(self, seed: str, attempts: int) -> None:
        """Record that provisioning gave up after repeated label races."""
        ...

    def tenant_updated(self, tenant_id: str, fields: list[str]) -> None:
        """Record that a store's name or label changed."""
        ...

    def custom_domain_bound(self, tenant_id: str, domain: str) -> None:
        """Record that a custom domain was bound, pending verification."""
        ...

    def custom_domain_activated(self, tenant_id: str, domain: str) -> None:
        """Record that a custom domain started resolving."""
        ...

    def custom_domain_deactivated(self, tenant_id: str, domain: str) -> None:
        """Record that a custom domain stopped resolving but stays reserved."""
        ...

    def custom_domain_unbound(self, tenant_id: str, domain: str) -> None:
        """Record that a custom domain was released."""
        ...

    def unauthorized_edit(self, tenant_id: str, user_id: str) -> None:
        """Record that a non-owner tried to edit a store."""
        ...

    def with_context(self, context: ObservationContext) -> TenantProvisioningProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantProvisioningProbe:
    """Default implementation of TenantProvisioningProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultTenantProvisioningProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantProvisioningProbe(logger=self._logger, context=context)

    def _kwargs(self, **fields: Any) -> dict[str, Any]:
        return {**self._get_context_kwargs(), **fields}

    def tenant_provisioned(
        self, tenant_id: str, owner_user_id: str, subdomain_label: str
    ) -> None:
        self._logger.info(
            "tenant_provisioned",
            **self._kwargs(
                tenant_id=tenant_id,
                owner_user_id=owner_user_id,
                subdomain_label=subdomain_label,
            ),
        )

    def owner_already_provisioned(self, owner_user_id: str) -> None:
        self._logger.warning(
            "tenant_owner_already_provisioned",
            **self._kwargs(owner_user_id=owner_user_id),
        )

    def reserved_label_requested(self, label: str) -> None:
        self._logger.warning(
            "tenant_reserved_label_requested", **self._kwargs(label=label)
        )

    def subdomain_race_lost(self, label: str, attempt: int) -> None:
        self._logger.info(
            "tenant_subdomain_race_lost", **self._kwargs(label=label, attempt=attempt)
        )

    def provisioning_exhausted(self, seed: str, attempts: int) -> None:
        self._logger.error(
            "tenant_provisioning_exhausted",
            **self._kwargs(seed=seed, attempts=attempts),
        )

    def tenant_updated(self, tenant_id: str, fields: list[str]) -> None:
        self._logger.info(
            "tenant_updated", **self._kwargs(tenant_id=tenant_id, fields=fields)
        )

    def custom_domain_bound(self, tenant_id: str, domain: str) -> None:
        self._logger.info(
            "tenant_custom_domain_bound",
            **self._kwargs(tenant_id=tenant_id, domain=domain),
        )

    def custom_domain_activated(self, tenant_id: str, domain: str) -> None:
        self._logger.info(
            "tenant_custom_domain_activated",
            **self._kwargs(tenant_id=tenant_id, domain=domain),
        )

    def custom_domain_deactivated(self, tenant_id: str, domain: str) -> None:
        self._logger.info(
            "tenant_custom_domain_deactivated",
            **self._kwargs(tenant_id=tenant_id, domain=domain),
        )

    def custom_domain_unbound(self, tenant_id: str, domain: str) -> None:
        self._logger.info(
            "tenant_custom_domain_unbound",
            **self._kwargs(tenant_id=tenant_id, domain=domain),
        )

    def unauthorized_edit(self, tenant_id: str, user_id: str) -> None:
        self._logger.warning(
            "tenant_unauthorized_edit",
            **self._kwargs(tenant_id=tenant_id, user_id=user_id),
        )
