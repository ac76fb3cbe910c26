"""Repository protocols (ports) for the tenancy context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tenancy.domain.aggregates import Tenant
from tenancy.domain.value_objects import TenantId, UserId


@runtime_checkable
class ITenantDirectory(Protocol):
    """Persistent mapping from hostnames and owners to tenants.

    Uniqueness of subdomain label, custom domain and owner is enforced by
    storage constraints; ``create`` and ``save`` surface a violation as
    ``ConflictError`` rather than relying on a prior lookup.

    Lookups raise ``DirectoryUnavailableError`` when storage fails.
    """

    async def find_by_subdomain(self, label: str) -> Tenant | None:
        """Find the tenant owning a subdomain label."""
        ...

    async def find_by_custom_domain(self, domain: str) -> Tenant | None:
        """Find the tenant whose *active* custom domain is ``domain``."""
        ...

    async def find_by_owner(self, user_id: UserId) -> Tenant | None:
        """Find the tenant administered by ``user_id``."""
        ...

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        """Retrieve a tenant by id."""
        ...

    async def create(self, tenant: Tenant) -> None:
        """Insert a new tenant.

        Raises:
            ConflictError: If the label, domain or owner is already bound.
        """
        ...

    async def save(self, tenant: Tenant) -> None:
        """Persist edits to an existing tenant.

        Raises:
            ConflictError: If the new label or domain is already bound.
            TenantNotFoundError: If the tenant does not exist.
        """
        ...

    async def generate_unique_subdomain(self, seed: str) -> str:
        """Derive a label from ``seed`` that no tenant currently holds.

        The result can still lose a race with a concurrent insert; callers
        handle the resulting ``ConflictError`` from ``create``.

        Raises:
            ProvisioningError: If every candidate is taken.
        """
        ...
