"""Per-session tenant scope for storefront clients.

A ``StorefrontTenantScope`` is created explicitly for one browsing session
and handed to whatever needs the current store. There is no module-level
instance: two sessions never share a scope.

Each ``navigate`` call clears the scope to pending before resolving. When
navigations overlap, only the most recently started one may apply its
answer; earlier answers arriving late are discarded.
"""

from __future__ import annotations

from enum import StrEnum

from shared_kernel.middleware.tenant_context import TenantContext
from tenancy.client.lookup_client import TenantLookupClient
from tenancy.client.observability import DefaultTenantScopeProbe, TenantScopeProbe


class ScopeState(StrEnum):
    PENDING = "pending"
    NO_TENANT = "no_tenant"
    TENANT = "tenant"


class AdminView(StrEnum):
    """What an admin page should render for the current scope."""

    PENDING = "pending"
    NOT_AN_ADMIN_HOST = "not_an_admin_host"
    OWNER = "owner"
    VISITOR = "visitor"


class StorefrontTenantScope:
    """The tenant context of one client session."""

    def __init__(
        self,
        lookup_client: TenantLookupClient,
        probe: TenantScopeProbe | None = None,
    ):
        self._lookup = lookup_client
        self._probe = probe or DefaultTenantScopeProbe()
        self._generation = 0
        self._context: TenantContext | None = None

    @property
    def context(self) -> TenantContext | None:
        """The applied context, or None while a navigation is pending."""
        return self._context

    @property
    def state(self) -> ScopeState:
        if self._context is None:
            return ScopeState.PENDING
        if self._context.has_tenant:
            return ScopeState.TENANT
        return ScopeState.NO_TENANT

    @property
    def admin_view(self) -> AdminView:
        if self._context is None:
            return AdminView.PENDING
        if not self._context.has_tenant:
            return AdminView.NOT_AN_ADMIN_HOST
        if self._context.is_owner_viewer:
            return AdminView.OWNER
        return AdminView.VISITOR

    async def navigate(self, host: str, token: str | None = None) -> bool:
        """Resolve ``host`` and apply the result unless superseded.

        Args:
            host: The hostname the session is now on
            token: The viewer's bearer token, if signed in

        Returns:
            True if this navigation's context was applied, False if a newer
            navigation started while it was in flight.
        """
        self._generation += 1
        generation = self._generation
        self._context = None
        self._probe.navigation_started(host=host, generation=generation)

        context = await self._lookup.lookup(host, token)

        if generation != self._generation:
            self._probe.stale_navigation_discarded(
                host=host,
                generation=generation,
                current_generation=self._generation,
            )
            return False

        self._context = context
        self._probe.navigation_resolved(
            host=host,
            generation=generation,
            tenant_id=context.tenant_id,
            host_kind=context.host_kind.value,
        )
        return True
