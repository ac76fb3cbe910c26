"""Hostname-to-tenant resolution.

The resolver runs an explicit, ordered chain over the classified host;
the first step that produces a context wins:

1. Base domain: the platform itself, no tenant.
2. Subdomain: look the label up. On a miss, an unclaimed bare platform
   label (``admin`` by default) is served as the base domain; any other
   label is an unmatched host.
3. Custom domain: look up active custom domains. On a miss, retry the
   leftmost label of the host as a subdomain label (legacy links of the
   form ``shop1.some-other-root``), else an unmatched host.

Hosts under the platform root are classified as subdomains before any
custom-domain lookup, so a subdomain always wins an ambiguous host.

A directory failure at any step resolves to an unmatched host with no
tenant. It is reported to the probe and never retried.
"""

from __future__ import annotations

from typing import Iterable

from shared_kernel.middleware.tenant_context import HostKind, TenantContext
from tenancy.application.observability import (
    DefaultTenantResolutionProbe,
    TenantResolutionProbe,
)
from tenancy.domain.aggregates import Tenant
from tenancy.domain.hostname import (
    BaseDomainHost,
    CustomDomainCandidate,
    HostnameRules,
    SubdomainHost,
    leftmost_label,
    normalize,
)
from tenancy.ports.exceptions import DirectoryUnavailableError
from tenancy.ports.repositories import ITenantDirectory


class TenantResolver:
    """Resolves a raw hostname and an optional viewer into a TenantContext."""

    def __init__(
        self,
        directory: ITenantDirectory,
        rules: HostnameRules,
        bare_labels: Iterable[str] = ("admin",),
        probe: TenantResolutionProbe | None = None,
    ):
        """Initialize the resolver.

        Args:
            directory: Tenant directory to look hosts up in
            rules: Root domains and reserved labels
            bare_labels: Platform labels served as the base domain when
                no store owns them
            probe: Optional domain probe for observability
        """
        self._directory = directory
        self._rules = rules
        self._bare_labels = frozenset(bare_labels)
        self._probe = probe or DefaultTenantResolutionProbe()

    async def resolve(
        self,
        raw_host: str | None,
        viewer_user_id: str | None = None,
    ) -> TenantContext:
        """Resolve a hostname to a tenant context.

        Args:
            raw_host: Host as received (may carry a port or odd casing)
            viewer_user_id: Authenticated viewer, or None when anonymous

        Returns:
            The resolved context. Never raises for directory failures.
        """
        host = normalize(raw_host, self._rules)
        try:
            match host:
                case BaseDomainHost():
                    return self._base_domain(host)
                case SubdomainHost():
                    return await self._subdomain(host, viewer_user_id)
                case CustomDomainCandidate():
                    return await self._custom_domain(host, viewer_user_id)
        except DirectoryUnavailableError as e:
            self._probe.directory_unavailable(host=host.host, error=e)
        return TenantContext.without_tenant(HostKind.UNMATCHED_HOST)

    def _base_domain(self, host: BaseDomainHost) -> TenantContext:
        self._probe.base_domain_host(host.host)
        return TenantContext.without_tenant(HostKind.BASE_DOMAIN)

    async def _subdomain(
        self, host: SubdomainHost, viewer_user_id: str | None
    ) -> TenantContext:
        tenant = await self._directory.find_by_subdomain(host.label)
        if tenant is not None:
            return self._matched(
                tenant, host.host, HostKind.TENANT_SUBDOMAIN, viewer_user_id
            )

        if host.label in self._bare_labels:
            self._probe.bare_label_fallback(host=host.host, label=host.label)
            return TenantContext.without_tenant(HostKind.BASE_DOMAIN)

        self._probe.host_unmatched(host.host)
        return TenantContext.without_tenant(HostKind.UNMATCHED_HOST)

    async def _custom_domain(
        self, host: CustomDomainCandidate, viewer_user_id: str | None
    ) -> TenantContext:
        tenant = await self._directory.find_by_custom_domain(host.host)
        if tenant is not None:
            return self._matched(
                tenant, host.host, HostKind.TENANT_CUSTOM_DOMAIN, viewer_user_id
            )
        return await self._legacy_label(host, viewer_user_id)

    async def _legacy_label(
        self, host: CustomDomainCandidate, viewer_user_id: str | None
    ) -> TenantContext:
        label = leftmost_label(host.host, self._rules.reserved_labels)
        if label is not None:
            tenant = await self._directory.find_by_subdomain(label)
            if tenant is not None:
                self._probe.legacy_label_fallback(
                    host=host.host, label=label, tenant_id=tenant.id.value
                )
                return self._matched(
                    tenant, host.host, HostKind.TENANT_SUBDOMAIN, viewer_user_id
                )

        self._probe.host_unmatched(host.host)
        return TenantContext.without_tenant(HostKind.UNMATCHED_HOST)

    def _matched(
        self,
        tenant: Tenant,
        host: str,
        host_kind: HostKind,
        viewer_user_id: str | None,
    ) -> TenantContext:
        if tenant.is_orphaned:
            self._probe.orphaned_tenant(tenant_id=tenant.id.value, host=host)
            return TenantContext.without_tenant(HostKind.UNMATCHED_HOST)

        self._probe.tenant_resolved(
            tenant_id=tenant.id.value, host=host, host_kind=host_kind.value
        )
        return context_for_tenant(tenant, host_kind, viewer_user_id)


def context_for_tenant(
    tenant: Tenant,
    host_kind: HostKind,
    viewer_user_id: str | None,
    **overrides,
) -> TenantContext:
    """Build the context a request runs under once ``tenant`` is known."""
    fields = dict(
        tenant_id=tenant.id.value,
        host_kind=host_kind,
        is_owner_viewer=tenant.is_owned_by(viewer_user_id),
        display_name=tenant.display_name,
        subdomain_label=tenant.subdomain_label,
        custom_domain=tenant.active_custom_domain,
    )
    fields.update(overrides)
    return TenantContext(**fields)
