"""Tenant provisioning application service.

Creates stores and edits their hostname bindings. Every write runs in its
own transaction; uniqueness is left to the directory's storage constraints.
"""

from __future__ import annotations

from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.application.observability import (
    DefaultTenantProvisioningProbe,
    TenantProvisioningProbe,
)
from tenancy.domain.aggregates import Tenant
from tenancy.domain.hostname import HostnameRules, check_custom_domain
from tenancy.domain.subdomain_labels import check_explicit_label
from tenancy.domain.value_objects import CustomDomainBinding, TenantId, UserId
from tenancy.ports.exceptions import (
    ConflictError,
    ConflictField,
    ProvisioningError,
    TenantNotFoundError,
    UnauthorizedError,
)
from tenancy.ports.repositories import ITenantDirectory


class TenantProvisioningService:
    """Application service for creating stores and editing their bindings."""

    def __init__(
        self,
        directory: ITenantDirectory,
        session: AsyncSession,
        rules: HostnameRules,
        forbidden_labels: Iterable[str] = (),
        max_retries: int = 3,
        probe: TenantProvisioningProbe | None = None,
    ):
        """Initialize the service.

        Args:
            directory: Tenant directory (shares ``session``)
            session: Database session for transaction management
            rules: Root domains, used to refuse custom domains under them
            forbidden_labels: Reserved and bare labels no store may hold
            max_retries: Label regenerations after losing a concurrent insert
            probe: Optional domain probe for observability
        """
        self._directory = directory
        self._session = session
        self._rules = rules
        self._forbidden_labels = frozenset(forbidden_labels)
        self._max_retries = max_retries
        self._probe = probe or DefaultTenantProvisioningProbe()

    async def provision_tenant(
        self,
        seed_name: str,
        owner_user_id: UserId,
        display_name: str | None = None,
        subdomain_label: str | None = None,
    ) -> Tenant:
        """Create a store for ``owner_user_id``.

        Without an explicit label one is generated from ``seed_name``. A
        generated label lost to a concurrent insert is regenerated up to
        ``max_retries`` times.

        Args:
            seed_name: Seed for the generated label (and the default name)
            owner_user_id: The store's owner of record
            display_name: Store name; defaults to ``seed_name``
            subdomain_label: Explicit label to claim instead of generating one

        Returns:
            The created Tenant aggregate

        Raises:
            ValueError: If the explicit label or the name is invalid
            ConflictError: If the owner already has a store, or the explicit
                label is reserved or taken
            ProvisioningError: If no free label could be secured
        """
        name = (display_name or seed_name or "").strip()
        if not name:
            raise ValueError("A store needs a name")

        if subdomain_label is not None:
            label = check_explicit_label(subdomain_label)
            if label in self._forbidden_labels:
                self._probe.reserved_label_requested(label)
                raise ConflictError(ConflictField.SUBDOMAIN_LABEL, label)
            return await self._create(owner_user_id, name, label=label, seed=None)

        for attempt in range(1, self._max_retries + 2):
            try:
                return await self._create(
                    owner_user_id, name, label=None, seed=seed_name
                )
            except ConflictError as e:
                if e.field != ConflictField.SUBDOMAIN_LABEL:
                    raise
                self._probe.subdomain_race_lost(label=e.value or "", attempt=attempt)

        self._probe.provisioning_exhausted(
            seed=seed_name, attempts=self._max_retries + 1
        )
        raise ProvisioningError(
            f"Could not secure a subdomain label for '{seed_name}'"
        )

    async def _create(
        self,
        owner_user_id: UserId,
        name: str,
        label: str | None,
        seed: str | None,
    ) -> Tenant:
        async with self._session.begin():
            if await self._directory.find_by_owner(owner_user_id) is not None:
                self._probe.owner_already_provisioned(owner_user_id.value)
                raise ConflictError(ConflictField.OWNER, owner_user_id.value)

            if label is None:
                label = await self._directory.generate_unique_subdomain(seed or name)

            tenant = Tenant.create(
                owner_user_id=owner_user_id,
                display_name=name,
                subdomain_label=label,
            )
            await self._directory.create(tenant)

        self._probe.tenant_provisioned(
            tenant_id=tenant.id.value,
            owner_user_id=owner_user_id.value,
            subdomain_label=label,
        )
        return tenant

    async def get_owned_tenant(self, user_id: UserId) -> Tenant | None:
        """The store administered by ``user_id``, if any."""
        return await self._directory.find_by_owner(user_id)

    async def update_store(
        self,
        tenant_id: TenantId,
        user_id: UserId,
        display_name: str | None = None,
        subdomain_label: str | None = None,
    ) -> Tenant:
        """Rename a store and/or move it to another subdomain label.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            UnauthorizedError: If ``user_id`` is not the owner of record
            ValueError: If the new name or label is invalid
            ConflictError: If the new label is reserved or taken
        """
        async with self._session.begin():
            tenant = await self._load_owned(tenant_id, user_id)
            changed: list[str] = []

            if display_name is not None:
                name = display_name.strip()
                if not name:
                    raise ValueError("A store needs a name")
                tenant.rename(name)
                changed.append("display_name")

            if subdomain_label is not None:
                label = check_explicit_label(subdomain_label)
                if label in self._forbidden_labels:
                    self._probe.reserved_label_requested(label)
                    raise ConflictError(ConflictField.SUBDOMAIN_LABEL, label)
                tenant.change_subdomain(label)
                changed.append("subdomain_label")

            if changed:
                await self._directory.save(tenant)

        self._probe.tenant_updated(tenant_id=tenant.id.value, fields=changed)
        return tenant

    async def bind_custom_domain(
        self,
        tenant_id: TenantId,
        user_id: UserId,
        domain: str,
    ) -> CustomDomainBinding:
        """Bind a custom domain to a store, pending DNS verification.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            UnauthorizedError: If ``user_id`` is not the owner of record
            ValueError: If the domain is malformed or under the platform root
            ConflictError: If another store holds the domain
        """
        normalized = check_custom_domain(domain, self._rules)
        async with self._session.begin():
            tenant = await self._load_owned(tenant_id, user_id)
            binding = tenant.bind_custom_domain(normalized)
            await self._directory.save(tenant)

        self._probe.custom_domain_bound(tenant_id=tenant.id.value, domain=normalized)
        return binding

    async def activate_custom_domain(
        self,
        tenant_id: TenantId,
        user_id: UserId,
    ) -> CustomDomainBinding:
        """Start resolving the store's bound custom domain.

        Called once the DNS records have been verified.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            UnauthorizedError: If ``user_id`` is not the owner of record
            CustomDomainStateError: If no custom domain is bound
        """
        async with self._session.begin():
            tenant = await self._load_owned(tenant_id, user_id)
            binding = tenant.activate_custom_domain()
            await self._directory.save(tenant)

        self._probe.custom_domain_activated(
            tenant_id=tenant.id.value, domain=binding.domain
        )
        return binding

    async def deactivate_custom_domain(
        self,
        tenant_id: TenantId,
        user_id: UserId,
    ) -> CustomDomainBinding:
        """Stop resolving the custom domain while keeping it reserved.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            UnauthorizedError: If ``user_id`` is not the owner of record
            CustomDomainStateError: If no custom domain is bound
        """
        async with self._session.begin():
            tenant = await self._load_owned(tenant_id, user_id)
            binding = tenant.deactivate_custom_domain()
            await self._directory.save(tenant)

        self._probe.custom_domain_deactivated(
            tenant_id=tenant.id.value, domain=binding.domain
        )
        return binding

    async def unbind_custom_domain(self, tenant_id: TenantId, user_id: UserId) -> None:
        """Release the store's custom domain.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            UnauthorizedError: If ``user_id`` is not the owner of record
            CustomDomainStateError: If no custom domain is bound
        """
        async with self._session.begin():
            tenant = await self._load_owned(tenant_id, user_id)
            domain = tenant.custom_domain.domain if tenant.custom_domain else ""
            tenant.unbind_custom_domain()
            await self._directory.save(tenant)

        self._probe.custom_domain_unbound(tenant_id=tenant.id.value, domain=domain)

    async def _load_owned(self, tenant_id: TenantId, user_id: UserId) -> Tenant:
        tenant = await self._directory.get_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFoundError(f"Tenant {tenant_id.value} not found")
        if not tenant.is_owned_by(user_id):
            self._probe.unauthorized_edit(
                tenant_id=tenant_id.value, user_id=user_id.value
            )
            raise UnauthorizedError(
                f"User {user_id.value} does not own tenant {tenant_id.value}"
            )
        return tenant
