"""Tenant context value object for resolved tenant identification.

This module contains the pure value object that represents the outcome of
resolving a request hostname to a store. It is framework-agnostic and
carries no lookup logic, making it safe for the shared kernel.

The resolution itself (hostname classification, directory lookups, the
viewer check) lives in the tenancy bounded context.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from shared_kernel.exceptions import UnresolvedTenantError


class HostKind(StrEnum):
    """How a request hostname was classified during resolution."""

    BASE_DOMAIN = "base_domain"
    TENANT_SUBDOMAIN = "tenant_subdomain"
    TENANT_CUSTOM_DOMAIN = "tenant_custom_domain"
    UNMATCHED_HOST = "unmatched_host"


class ContextSource(StrEnum):
    """Where the tenant identity of a context came from."""

    HOST = "host"
    EXPLICIT_PARAMETER = "explicit_parameter"


@dataclass(frozen=True)
class TenantContext:
    """Resolved tenant context for the current request or navigation.

    Built once per request (or per client navigation) and never mutated.
    A different hostname or viewer means a new resolution, never an update.

    Attributes:
        tenant_id: The matched tenant, or None when the host maps to no store.
        host_kind: Classification of the hostname.
        is_owner_viewer: True only when the authenticated viewer is the
            matched tenant's owner of record.
        display_name: The matched store's name.
        subdomain_label: The matched tenant's subdomain label, if it has one.
        custom_domain: The matched tenant's active custom domain, if any.
        source: 'host' when derived from the hostname, 'explicit_parameter'
            when an owner's explicit tenant_id was honored on a non-store host.
    """

    tenant_id: str | None
    host_kind: HostKind
    is_owner_viewer: bool = False
    display_name: str | None = None
    subdomain_label: str | None = None
    custom_domain: str | None = None
    source: ContextSource = ContextSource.HOST

    def __post_init__(self) -> None:
        if self.tenant_id is None and self.is_owner_viewer:
            raise ValueError("is_owner_viewer requires a resolved tenant")
        has_tenant_kind = self.host_kind in (
            HostKind.TENANT_SUBDOMAIN,
            HostKind.TENANT_CUSTOM_DOMAIN,
        )
        if has_tenant_kind and self.tenant_id is None:
            raise ValueError(f"host kind {self.host_kind} requires a tenant_id")

    @classmethod
    def without_tenant(cls, host_kind: HostKind) -> TenantContext:
        """Create a context for a host that resolved to no store."""
        if host_kind not in (HostKind.BASE_DOMAIN, HostKind.UNMATCHED_HOST):
            raise ValueError(f"host kind {host_kind} always carries a tenant")
        return cls(tenant_id=None, host_kind=host_kind)

    @property
    def has_tenant(self) -> bool:
        """Whether this context is scoped to a store."""
        return self.tenant_id is not None

    def require_tenant_id(self) -> str:
        """Return the tenant id, or raise when the host maps to no store.

        Raises:
            UnresolvedTenantError: If no tenant was resolved.
        """
        if self.tenant_id is None:
            raise UnresolvedTenantError(host_kind=self.host_kind.value)
        return self.tenant_id
