"""Unit tests for the storefront routes.

The tenant context is injected directly; repositories are mocks. The
404/401/403 gates come from the real require_* dependencies.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from infrastructure.database.dependencies import get_write_session
from shared_kernel.middleware.tenant_context import HostKind, TenantContext
from storefront import presentation as storefront_presentation
from storefront.dependencies import (
    get_catalog_reader,
    get_catalog_writer,
    get_dashboard_repository,
    get_order_reader,
    get_order_writer,
)
from storefront.infrastructure.catalog_repository import CatalogRepository
from storefront.infrastructure.dashboard_repository import (
    DashboardRepository,
    DashboardStats,
    TopProduct,
)
from storefront.infrastructure.models import (
    CategoryModel,
    OrderItemModel,
    OrderModel,
    ProductModel,
)
from storefront.infrastructure.order_repository import (
    CustomerSummary,
    OrderLine,
    OrderRepository,
)
from storefront.ports.exceptions import EmptyOrderError, EntityNotFoundError
from tenancy.application.value_objects import Viewer
from tenancy.dependencies.tenant_context import (
    get_tenant_context,
    get_tenant_context_probe,
)
from tenancy.dependencies.viewer import get_viewer
from tenancy.domain.value_objects import UserId

TENANT_ID = "01ARZ3NDEKTSV4RRFFQ69G5FAV"
PLACED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

SHOPPER_CONTEXT = TenantContext(
    tenant_id=TENANT_ID, host_kind=HostKind.TENANT_SUBDOMAIN
)
OWNER_CONTEXT = TenantContext(
    tenant_id=TENANT_ID, host_kind=HostKind.TENANT_SUBDOMAIN, is_owner_viewer=True
)
BASE_DOMAIN = TenantContext.without_tenant(HostKind.BASE_DOMAIN)


def _product(**overrides) -> ProductModel:
    fields = dict(
        id="01HPRODUCT00000000000000AA",
        tenant_id=TENANT_ID,
        name="Bread",
        description=None,
        price_cents=300,
        stock=5,
        category_id=None,
    )
    fields.update(overrides)
    return ProductModel(**fields)


def _order() -> OrderModel:
    return OrderModel(
        id="01HORDER000000000000000AAA",
        tenant_id=TENANT_ID,
        customer_name="Ann",
        customer_email="ann@example.com",
        status="pending",
        total_cents=600,
        created_at=PLACED_AT,
        items=[
            OrderItemModel(
                product_id="01HPRODUCT00000000000000AA",
                product_name="Bread",
                quantity=2,
                unit_price_cents=300,
            )
        ],
    )


@pytest.fixture
def catalog() -> Mock:
    repo = Mock(spec=CatalogRepository)
    repo.list_products = AsyncMock(return_value=[_product()])
    repo.get_product = AsyncMock(return_value=_product())
    repo.create_product = AsyncMock(return_value=_product())
    repo.delete_product = AsyncMock(return_value=None)
    repo.list_categories = AsyncMock(
        return_value=[CategoryModel(id="c1", tenant_id=TENANT_ID, name="Bakery")]
    )
    repo.create_category = AsyncMock(
        return_value=CategoryModel(id="c1", tenant_id=TENANT_ID, name="Bakery")
    )
    return repo


@pytest.fixture
def orders() -> Mock:
    repo = Mock(spec=OrderRepository)
    repo.list_orders = AsyncMock(return_value=[_order()])
    repo.get_order = AsyncMock(return_value=_order())
    repo.place_order = AsyncMock(return_value=_order())
    repo.list_customers = AsyncMock(
        return_value=[
            CustomerSummary(
                email="ann@example.com",
                name="Ann",
                phone=None,
                order_count=1,
                total_spent_cents=600,
                last_order_at=PLACED_AT,
            )
        ]
    )
    return repo


@pytest.fixture
def dashboard() -> Mock:
    repo = Mock(spec=DashboardRepository)
    repo.stats = AsyncMock(
        return_value=DashboardStats(
            total_products=1,
            total_orders=1,
            total_customers=1,
            total_revenue_cents=600,
            recent_orders=[_order()],
            top_products=[
                TopProduct("01HPRODUCT00000000000000AA", "Bread", 2, 600)
            ],
        )
    )
    return repo


@pytest.fixture
def make_client(catalog, orders, dashboard, mock_session):
    def _create_test_client(
        context: TenantContext, viewer: Viewer | None = None
    ) -> TestClient:
        app = FastAPI()
        app.include_router(storefront_presentation.router)
        app.dependency_overrides[get_tenant_context] = lambda: context
        app.dependency_overrides[get_viewer] = lambda: viewer
        app.dependency_overrides[get_tenant_context_probe] = lambda: MagicMock()
        app.dependency_overrides[get_write_session] = lambda: mock_session
        app.dependency_overrides[get_catalog_reader] = lambda: catalog
        app.dependency_overrides[get_catalog_writer] = lambda: catalog
        app.dependency_overrides[get_order_reader] = lambda: orders
        app.dependency_overrides[get_order_writer] = lambda: orders
        app.dependency_overrides[get_dashboard_repository] = lambda: dashboard
        return TestClient(app)

    return _create_test_client


@pytest.fixture
def shopper(make_client) -> TestClient:
    return make_client(SHOPPER_CONTEXT)


@pytest.fixture
def owner(make_client) -> TestClient:
    return make_client(OWNER_CONTEXT, Viewer(user_id=UserId(value="owner-1")))


class TestStoreGate:
    def test_base_domain_is_not_a_store(self, make_client, catalog):
        response = make_client(BASE_DOMAIN).get("/storefront/products")

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "not_a_store_host"
        assert response.json()["detail"]["host_kind"] == "base_domain"
        catalog.list_products.assert_not_called()

    def test_management_needs_sign_in(self, shopper, orders):
        response = shopper.get("/storefront/orders")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        orders.list_orders.assert_not_called()

    def test_management_needs_owner(self, make_client, orders):
        client = make_client(
            SHOPPER_CONTEXT, Viewer(user_id=UserId(value="someone-else"))
        )

        response = client.get("/storefront/customers")

        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "not_store_owner"
        orders.list_customers.assert_not_called()


class TestCatalogRoutes:
    def test_list_products(self, shopper, catalog):
        response = shopper.get("/storefront/products", params={"category_id": "c1"})

        assert response.status_code == 200
        assert response.json()[0]["name"] == "Bread"
        catalog.list_products.assert_awaited_once_with(
            SHOPPER_CONTEXT, category_id="c1"
        )

    def test_get_product_from_other_store_is_404(self, shopper, catalog):
        catalog.get_product.return_value = None

        response = shopper.get("/storefront/products/elsewhere")

        assert response.status_code == 404

    def test_create_product(self, owner, catalog, mock_session):
        response = owner.post(
            "/storefront/products", json={"name": "Bread", "price_cents": 300}
        )

        assert response.status_code == 201
        assert response.json()["price_cents"] == 300
        mock_session.begin.assert_called_once()
        assert catalog.create_product.await_args.args[0] == OWNER_CONTEXT

    def test_create_product_rejects_negative_price(self, owner, catalog):
        response = owner.post(
            "/storefront/products", json={"name": "Bread", "price_cents": -1}
        )

        assert response.status_code == 422
        catalog.create_product.assert_not_called()

    def test_create_product_with_foreign_category_is_404(self, owner, catalog):
        catalog.create_product.side_effect = EntityNotFoundError("category", "c9")

        response = owner.post(
            "/storefront/products",
            json={"name": "Saw", "price_cents": 100, "category_id": "c9"},
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Category c9 not found"

    def test_shopper_cannot_create_product(self, shopper, catalog):
        response = shopper.post(
            "/storefront/products", json={"name": "Bread", "price_cents": 300}
        )

        assert response.status_code == 401
        catalog.create_product.assert_not_called()

    def test_delete_product(self, owner, catalog):
        response = owner.delete("/storefront/products/p1")

        assert response.status_code == 204
        catalog.delete_product.assert_awaited_once_with(OWNER_CONTEXT, "p1")

    def test_delete_missing_product_is_404(self, owner, catalog):
        catalog.delete_product.side_effect = EntityNotFoundError("product", "p1")

        assert owner.delete("/storefront/products/p1").status_code == 404

    def test_categories(self, owner, catalog):
        assert owner.get("/storefront/categories").json() == [
            {"id": "c1", "name": "Bakery", "description": None}
        ]
        response = owner.post("/storefront/categories", json={"name": "Bakery"})
        assert response.status_code == 201


class TestOrderRoutes:
    def test_shopper_places_order(self, shopper, orders):
        response = shopper.post(
            "/storefront/orders",
            json={
                "customer_name": "Ann",
                "customer_email": "ann@example.com",
                "items": [{"product_id": "01HPRODUCT00000000000000AA", "quantity": 2}],
            },
        )

        assert response.status_code == 201
        assert response.json()["total_cents"] == 600
        kwargs = orders.place_order.await_args.kwargs
        assert kwargs["lines"] == [
            OrderLine(product_id="01HPRODUCT00000000000000AA", quantity=2)
        ]

    def test_order_without_items_is_rejected(self, shopper, orders):
        response = shopper.post(
            "/storefront/orders",
            json={"customer_name": "Ann", "customer_email": "ann@example.com", "items": []},
        )

        assert response.status_code == 422
        orders.place_order.assert_not_called()

    def test_empty_order_error_is_400(self, shopper, orders):
        orders.place_order.side_effect = EmptyOrderError("An order needs at least one item")

        response = shopper.post(
            "/storefront/orders",
            json={
                "customer_name": "Ann",
                "customer_email": "ann@example.com",
                "items": [{"product_id": "p1"}],
            },
        )

        assert response.status_code == 400

    def test_product_of_other_store_is_404(self, shopper, orders):
        orders.place_order.side_effect = EntityNotFoundError("product", "p9")

        response = shopper.post(
            "/storefront/orders",
            json={
                "customer_name": "Ann",
                "customer_email": "ann@example.com",
                "items": [{"product_id": "p9"}],
            },
        )

        assert response.status_code == 404

    def test_owner_lists_orders(self, owner, orders):
        response = owner.get("/storefront/orders", params={"limit": 10})

        assert response.status_code == 200
        assert response.json()[0]["items"][0]["product_name"] == "Bread"
        orders.list_orders.assert_awaited_once_with(OWNER_CONTEXT, 10)

    def test_get_order_of_other_store_is_404(self, owner, orders):
        orders.get_order.return_value = None

        assert owner.get("/storefront/orders/o1").status_code == 404

    def test_customers(self, owner):
        response = owner.get("/storefront/customers")

        assert response.status_code == 200
        assert response.json()[0]["email"] == "ann@example.com"
        assert response.json()[0]["order_count"] == 1


class TestDashboard:
    def test_stats(self, owner, dashboard):
        response = owner.get("/storefront/dashboard/stats")

        assert response.status_code == 200
        body = response.json()
        assert body["total_revenue_cents"] == 600
        assert body["recent_orders"][0]["items"] == []
        assert body["top_products"][0]["units_sold"] == 2
        dashboard.stats.assert_awaited_once_with(OWNER_CONTEXT)
