"""Unit tests for CatalogRepository.

Two stores share one database; each test checks that a store context sees
and touches only its own rows.
"""

from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from shared_kernel.exceptions import UnscopedWriteError
from storefront.infrastructure.catalog_repository import CatalogRepository
from storefront.infrastructure.models import ProductModel
from storefront.ports.exceptions import EntityNotFoundError


@pytest.fixture
def probe() -> MagicMock:
    return MagicMock()


@pytest.fixture
def catalog(session, probe) -> CatalogRepository:
    return CatalogRepository(session=session, probe=probe)


@pytest_asyncio.fixture
async def seeded(session, catalog, two_stores, context_a, context_b) -> dict:
    """Bread in store A's "Bakery", a hammer in store B's "Tools"."""
    async with session.begin():
        bakery = await catalog.create_category(context_a, "Bakery")
        tools = await catalog.create_category(context_b, "Tools")
        bread = await catalog.create_product(
            context_a, "Bread", price_cents=300, category_id=bakery.id
        )
        cake = await catalog.create_product(context_a, "Cake", price_cents=1200)
        hammer = await catalog.create_product(
            context_b, "Hammer", price_cents=2500, category_id=tools.id
        )
    return {
        "bakery": bakery,
        "tools": tools,
        "bread": bread,
        "cake": cake,
        "hammer": hammer,
    }


class TestReads:
    @pytest.mark.asyncio
    async def test_lists_only_own_products(self, catalog, seeded, context_a, context_b):
        assert [p.name for p in await catalog.list_products(context_a)] == [
            "Bread",
            "Cake",
        ]
        assert [p.name for p in await catalog.list_products(context_b)] == ["Hammer"]

    @pytest.mark.asyncio
    async def test_filter_by_category(self, catalog, seeded, context_a):
        products = await catalog.list_products(
            context_a, category_id=seeded["bakery"].id
        )
        assert [p.name for p in products] == ["Bread"]

    @pytest.mark.asyncio
    async def test_other_stores_category_filter_is_empty(
        self, catalog, seeded, context_a
    ):
        products = await catalog.list_products(context_a, category_id=seeded["tools"].id)
        assert products == []

    @pytest.mark.asyncio
    async def test_other_stores_product_is_not_found(self, catalog, seeded, context_a):
        assert await catalog.get_product(context_a, seeded["hammer"].id) is None
        assert await catalog.get_product(context_a, seeded["bread"].id) is not None

    @pytest.mark.asyncio
    async def test_context_without_tenant_sees_nothing(
        self, catalog, seeded, base_domain_context
    ):
        assert await catalog.list_products(base_domain_context) == []
        assert await catalog.list_categories(base_domain_context) == []
        assert await catalog.get_product(base_domain_context, seeded["bread"].id) is None

    @pytest.mark.asyncio
    async def test_lists_only_own_categories(self, catalog, seeded, context_b):
        assert [c.name for c in await catalog.list_categories(context_b)] == ["Tools"]


class TestWrites:
    @pytest.mark.asyncio
    async def test_created_rows_are_stamped(self, seeded, context_a, probe):
        assert seeded["bread"].tenant_id == context_a.tenant_id
        assert seeded["bakery"].tenant_id == context_a.tenant_id
        probe.owned_entity_created.assert_any_call(
            "product", seeded["bread"].id, context_a.tenant_id
        )

    @pytest.mark.asyncio
    async def test_unscoped_write_is_refused(
        self, session, catalog, two_stores, base_domain_context, probe
    ):
        with pytest.raises(UnscopedWriteError):
            async with session.begin():
                await catalog.create_product(base_domain_context, "Ghost", price_cents=1)

        probe.unscoped_write_refused.assert_called_once_with("product", "base_domain")
        async with session.begin():
            count = await session.scalar(select(func.count(ProductModel.id)))
        assert count == 0

    @pytest.mark.asyncio
    async def test_cannot_use_other_stores_category(
        self, session, catalog, seeded, context_a, probe
    ):
        with pytest.raises(EntityNotFoundError) as exc_info:
            async with session.begin():
                await catalog.create_product(
                    context_a, "Saw", price_cents=100, category_id=seeded["tools"].id
                )

        assert exc_info.value.entity == "category"
        probe.reference_not_in_scope.assert_called_once_with(
            "category", seeded["tools"].id, context_a.tenant_id
        )

    @pytest.mark.asyncio
    async def test_delete_own_product(self, session, catalog, seeded, context_a):
        async with session.begin():
            await catalog.delete_product(context_a, seeded["cake"].id)

        async with session.begin():
            assert [p.name for p in await catalog.list_products(context_a)] == ["Bread"]

    @pytest.mark.asyncio
    async def test_cannot_delete_other_stores_product(
        self, session, catalog, seeded, context_a, context_b
    ):
        with pytest.raises(EntityNotFoundError):
            async with session.begin():
                await catalog.delete_product(context_a, seeded["hammer"].id)

        async with session.begin():
            assert [p.name for p in await catalog.list_products(context_b)] == [
                "Hammer"
            ]
