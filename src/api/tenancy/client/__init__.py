"""Client-side tenant resolution for storefront UIs and SDKs."""

from tenancy.client.lookup_client import TenantLookupClient
from tenancy.client.paths import qualify_api_path
from tenancy.client.scope import AdminView, ScopeState, StorefrontTenantScope

__all__ = [
    "AdminView",
    "ScopeState",
    "StorefrontTenantScope",
    "TenantLookupClient",
    "qualify_api_path",
]
