"""HTTP client for the hostname lookup endpoint."""

from __future__ import annotations

from typing import Any

import httpx

from shared_kernel.middleware.tenant_context import (
    ContextSource,
    HostKind,
    TenantContext,
)
from tenancy.client.observability import DefaultTenantScopeProbe, TenantScopeProbe

LOOKUP_PATH = "/tenancy/lookup"


class TenantLookupClient:
    """Resolves hostnames through ``GET /tenancy/lookup``.

    Never raises for lookup failures: a transport error, a non-200 answer or
    a malformed payload all yield a tenant-less ``unmatched_host`` context.
    Nothing is cached between calls.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        probe: TenantScopeProbe | None = None,
    ):
        """Initialize the client.

        Args:
            http_client: Client whose base URL points at the API
            probe: Optional domain probe for observability
        """
        self._http = http_client
        self._probe = probe or DefaultTenantScopeProbe()

    async def lookup(self, host: str, token: str | None = None) -> TenantContext:
        """Resolve ``host``, forwarding the viewer's bearer token if any."""
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            response = await self._http.get(
                LOOKUP_PATH, params={"host": host}, headers=headers
            )
        except httpx.HTTPError as e:
            self._probe.lookup_failed(host=host, reason=repr(e))
            return TenantContext.without_tenant(HostKind.UNMATCHED_HOST)

        if response.status_code != 200:
            self._probe.lookup_failed(
                host=host, reason="HTTP error", status_code=response.status_code
            )
            return TenantContext.without_tenant(HostKind.UNMATCHED_HOST)

        try:
            return _context_from_payload(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            self._probe.lookup_failed(host=host, reason=f"malformed payload: {e!r}")
            return TenantContext.without_tenant(HostKind.UNMATCHED_HOST)


def _context_from_payload(payload: dict[str, Any]) -> TenantContext:
    return TenantContext(
        tenant_id=payload.get("tenant_id"),
        host_kind=HostKind(payload["host_kind"]),
        is_owner_viewer=bool(payload.get("is_owner_viewer", False)),
        display_name=payload.get("display_name"),
        subdomain_label=payload.get("subdomain_label"),
        custom_domain=payload.get("custom_domain"),
        source=ContextSource(payload.get("source", ContextSource.HOST.value)),
    )
