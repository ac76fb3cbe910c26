"""Unit tests for StorefrontTenantScope."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from shared_kernel.middleware.tenant_context import HostKind, TenantContext
from tenancy.client import AdminView, ScopeState, StorefrontTenantScope
from tenancy.client.lookup_client import TenantLookupClient

SHOP1 = TenantContext(
    tenant_id="01ARZ3NDEKTSV4RRFFQ69G5FAV",
    host_kind=HostKind.TENANT_SUBDOMAIN,
    is_owner_viewer=True,
)
SHOP2 = TenantContext(
    tenant_id="01BX5ZZKBKACTAV9WEVGEMMVRZ",
    host_kind=HostKind.TENANT_SUBDOMAIN,
)


class GatedLookup:
    """Lookup client whose answers are released by the test, per host."""

    def __init__(self, answers: dict[str, TenantContext]):
        self._answers = answers
        self.gates = {host: asyncio.Event() for host in answers}

    async def lookup(self, host: str, token: str | None = None) -> TenantContext:
        await self.gates[host].wait()
        return self._answers[host]


@pytest.fixture
def lookup_client() -> AsyncMock:
    return AsyncMock(spec=TenantLookupClient)


class TestStates:
    def test_starts_pending(self, lookup_client):
        scope = StorefrontTenantScope(lookup_client)

        assert scope.context is None
        assert scope.state == ScopeState.PENDING
        assert scope.admin_view == AdminView.PENDING

    @pytest.mark.asyncio
    async def test_owner_on_store(self, lookup_client):
        lookup_client.lookup.return_value = SHOP1
        scope = StorefrontTenantScope(lookup_client, probe=MagicMock())

        assert await scope.navigate("shop1.codeopx.com", token="abc") is True

        lookup_client.lookup.assert_awaited_once_with("shop1.codeopx.com", "abc")
        assert scope.context == SHOP1
        assert scope.state == ScopeState.TENANT
        assert scope.admin_view == AdminView.OWNER

    @pytest.mark.asyncio
    async def test_visitor_on_store(self, lookup_client):
        lookup_client.lookup.return_value = SHOP2
        scope = StorefrontTenantScope(lookup_client, probe=MagicMock())

        await scope.navigate("shop2.codeopx.com")

        assert scope.admin_view == AdminView.VISITOR

    @pytest.mark.asyncio
    async def test_platform_host(self, lookup_client):
        lookup_client.lookup.return_value = TenantContext.without_tenant(
            HostKind.BASE_DOMAIN
        )
        scope = StorefrontTenantScope(lookup_client, probe=MagicMock())

        await scope.navigate("codeopx.com")

        assert scope.state == ScopeState.NO_TENANT
        assert scope.admin_view == AdminView.NOT_AN_ADMIN_HOST


class TestNavigation:
    @pytest.mark.asyncio
    async def test_stale_answer_is_discarded(self):
        lookup = GatedLookup({"shop1.codeopx.com": SHOP1, "shop2.codeopx.com": SHOP2})
        probe = MagicMock()
        scope = StorefrontTenantScope(lookup, probe=probe)

        first = asyncio.create_task(scope.navigate("shop1.codeopx.com"))
        await asyncio.sleep(0)
        second = asyncio.create_task(scope.navigate("shop2.codeopx.com"))
        await asyncio.sleep(0)

        lookup.gates["shop2.codeopx.com"].set()
        assert await second is True
        lookup.gates["shop1.codeopx.com"].set()
        assert await first is False

        assert scope.context == SHOP2
        probe.stale_navigation_discarded.assert_called_once_with(
            host="shop1.codeopx.com", generation=1, current_generation=2
        )

    @pytest.mark.asyncio
    async def test_navigation_clears_previous_context(self):
        lookup = GatedLookup({"shop1.codeopx.com": SHOP1, "shop2.codeopx.com": SHOP2})
        lookup.gates["shop1.codeopx.com"].set()
        scope = StorefrontTenantScope(lookup, probe=MagicMock())
        await scope.navigate("shop1.codeopx.com")

        pending = asyncio.create_task(scope.navigate("shop2.codeopx.com"))
        await asyncio.sleep(0)

        assert scope.state == ScopeState.PENDING
        lookup.gates["shop2.codeopx.com"].set()
        await pending
        assert scope.context == SHOP2

    @pytest.mark.asyncio
    async def test_sessions_do_not_share_scope(self, lookup_client):
        lookup_client.lookup.return_value = SHOP1
        first = StorefrontTenantScope(lookup_client, probe=MagicMock())
        second = StorefrontTenantScope(lookup_client, probe=MagicMock())

        await first.navigate("shop1.codeopx.com")

        assert second.state == ScopeState.PENDING
