"""Tenant aggregate for the tenancy context."""

from __future__ import annotations

from dataclasses import dataclass

from tenancy.domain.exceptions import CustomDomainStateError, SubdomainRemovalError
from tenancy.domain.value_objects import (
    CustomDomainBinding,
    CustomDomainStatus,
    TenantId,
    UserId,
)


@dataclass
class Tenant:
    """Tenant aggregate representing one merchant store.

    A store is reachable at ``{subdomain_label}.{root}`` and, once its
    binding is active, at its custom domain. It is administered by exactly
    one user, its owner of record.

    Business rules:
    - Subdomain labels and custom domains are globally unique (enforced by
      storage, see ITenantDirectory)
    - A user owns at most one tenant
    - A subdomain label can be changed but never removed
    - Only an active custom domain resolves; pending and inactive bindings
      still reserve the domain
    - A tenant with neither a label nor an active domain is orphaned and
      never resolves
    """

    id: TenantId
    owner_user_id: UserId
    display_name: str
    subdomain_label: str | None = None
    custom_domain: CustomDomainBinding | None = None

    @classmethod
    def create(
        cls,
        owner_user_id: UserId,
        display_name: str,
        subdomain_label: str,
    ) -> Tenant:
        """Factory method for creating a new tenant.

        Args:
            owner_user_id: The user who will administer the store
            display_name: Human-readable store name
            subdomain_label: Label already checked for syntax and reservation

        Returns:
            A new Tenant aggregate with a generated id
        """
        return cls(
            id=TenantId.generate(),
            owner_user_id=owner_user_id,
            display_name=display_name,
            subdomain_label=subdomain_label,
        )

    def is_owned_by(self, user_id: UserId | str | None) -> bool:
        """Whether ``user_id`` is this store's owner of record."""
        if user_id is None:
            return False
        value = user_id.value if isinstance(user_id, UserId) else user_id
        return value == self.owner_user_id.value

    @property
    def active_custom_domain(self) -> str | None:
        """The custom domain this store resolves on, if any."""
        if self.custom_domain is not None and self.custom_domain.is_active:
            return self.custom_domain.domain
        return None

    @property
    def is_orphaned(self) -> bool:
        """True when no hostname can reach this store."""
        return self.subdomain_label is None and self.active_custom_domain is None

    def rename(self, display_name: str) -> None:
        self.display_name = display_name

    def change_subdomain(self, label: str | None) -> None:
        """Move the store to another subdomain label.

        Raises:
            SubdomainRemovalError: If ``label`` is empty.
        """
        if not label:
            raise SubdomainRemovalError(
                "A store's subdomain label can be changed but not removed"
            )
        self.subdomain_label = label

    def bind_custom_domain(self, domain: str) -> CustomDomainBinding:
        """Bind a custom domain, pending DNS verification.

        Rebinding the same domain keeps the existing binding; binding a new
        domain replaces the old one and issues a fresh verification token.
        """
        if self.custom_domain is not None and self.custom_domain.domain == domain:
            return self.custom_domain
        self.custom_domain = CustomDomainBinding.pending(domain)
        return self.custom_domain

    def activate_custom_domain(self) -> CustomDomainBinding:
        """Start resolving the bound custom domain.

        Raises:
            CustomDomainStateError: If no custom domain is bound.
        """
        if self.custom_domain is None:
            raise CustomDomainStateError("No custom domain is bound to this store")
        self.custom_domain = self.custom_domain.with_status(CustomDomainStatus.ACTIVE)
        return self.custom_domain

    def deactivate_custom_domain(self) -> CustomDomainBinding:
        """Stop resolving the custom domain while keeping it reserved.

        Raises:
            CustomDomainStateError: If no custom domain is bound.
        """
        if self.custom_domain is None:
            raise CustomDomainStateError("No custom domain is bound to this store")
        self.custom_domain = self.custom_domain.with_status(
            CustomDomainStatus.INACTIVE
        )
        return self.custom_domain

    def unbind_custom_domain(self) -> None:
        """Release the custom domain.

        Raises:
            CustomDomainStateError: If no custom domain is bound.
        """
        if self.custom_domain is None:
            raise CustomDomainStateError("No custom domain is bound to this store")
        self.custom_domain = None
