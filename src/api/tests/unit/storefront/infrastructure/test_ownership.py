"""Unit tests for OwnershipFilter."""

import pytest
from sqlalchemy.dialects import sqlite

from shared_kernel.exceptions import UnscopedWriteError
from storefront.infrastructure.models import ProductModel
from storefront.infrastructure.ownership import PRODUCTS


def _sql(clause) -> str:
    return str(
        clause.compile(dialect=sqlite.dialect(), compile_kwargs={"literal_binds": True})
    )


class TestBuild:
    def test_store_context_filters_on_tenant(self, context_a):
        assert _sql(PRODUCTS.build(context_a)) == (
            f"products.tenant_id = '{context_a.tenant_id}'"
        )

    def test_context_without_tenant_matches_nothing(self, base_domain_context):
        assert "tenant_id" not in _sql(PRODUCTS.build(base_domain_context))


class TestStamp:
    def test_sets_owner(self, context_a):
        product = ProductModel(id="p1", name="Bread", price_cents=300)

        PRODUCTS.stamp(product, context_a)

        assert product.tenant_id == context_a.tenant_id

    def test_refuses_without_tenant(self, base_domain_context):
        product = ProductModel(id="p1", name="Bread", price_cents=300)

        with pytest.raises(UnscopedWriteError) as exc_info:
            PRODUCTS.stamp(product, base_domain_context)

        assert exc_info.value.entity == "product"
        assert product.tenant_id is None

    def test_refuses_to_reassign_owner(self, context_a, context_b):
        product = ProductModel(id="p1", name="Bread", price_cents=300)
        PRODUCTS.stamp(product, context_a)

        with pytest.raises(ValueError):
            PRODUCTS.stamp(product, context_b)

        assert product.tenant_id == context_a.tenant_id
