"""Unit tests for qualify_api_path."""

import pytest

from shared_kernel.middleware.tenant_context import HostKind, TenantContext
from tenancy.client import qualify_api_path

TENANT_ID = "01ARZ3NDEKTSV4RRFFQ69G5FAV"
STORE = TenantContext(tenant_id=TENANT_ID, host_kind=HostKind.TENANT_SUBDOMAIN)


class TestQualifyApiPath:
    def test_appends_tenant(self):
        assert (
            qualify_api_path("/storefront/products", STORE)
            == f"/storefront/products?tenant_id={TENANT_ID}"
        )

    def test_keeps_existing_query_and_fragment(self):
        assert (
            qualify_api_path("/storefront/products?page=2#top", STORE)
            == f"/storefront/products?page=2&tenant_id={TENANT_ID}#top"
        )

    @pytest.mark.parametrize(
        "query", ["q=a%20b", "name=%7Ejane", "tag=a&tag=b", "flag"]
    )
    def test_existing_query_bytes_are_preserved(self, query):
        assert (
            qualify_api_path(f"/storefront/products?{query}", STORE)
            == f"/storefront/products?{query}&tenant_id={TENANT_ID}"
        )

    def test_is_idempotent(self):
        once = qualify_api_path("/storefront/orders", STORE)
        assert qualify_api_path(once, STORE) == once

    def test_existing_tenant_parameter_is_kept(self):
        path = "/storefront/orders?tenant_id=OTHER"
        assert qualify_api_path(path, STORE) == path

    @pytest.mark.parametrize(
        "path", ["https://api.example.com/products", "//cdn.example.com/x.js"]
    )
    def test_absolute_urls_unchanged(self, path):
        assert qualify_api_path(path, STORE) == path

    @pytest.mark.parametrize(
        "context",
        [None, TenantContext.without_tenant(HostKind.BASE_DOMAIN)],
    )
    def test_without_tenant_unchanged(self, context):
        assert qualify_api_path("/storefront/products", context) == "/storefront/products"
