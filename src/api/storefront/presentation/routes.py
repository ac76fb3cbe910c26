"""HTTP routes for the storefront of the request's store.

The store is always the one the request's Host resolved to. Shopper-facing
routes need only a store host; management routes also need the store's
owner of record.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from shared_kernel.middleware.tenant_context import TenantContext
from storefront.dependencies import (
    get_catalog_reader,
    get_catalog_writer,
    get_dashboard_repository,
    get_order_reader,
    get_order_writer,
)
from storefront.infrastructure.catalog_repository import CatalogRepository
from storefront.infrastructure.dashboard_repository import DashboardRepository
from storefront.infrastructure.order_repository import OrderLine, OrderRepository
from storefront.ports.exceptions import EmptyOrderError, EntityNotFoundError
from storefront.presentation.models import (
    CategoryResponse,
    CreateCategoryRequest,
    CreateProductRequest,
    CustomerResponse,
    DashboardStatsResponse,
    OrderResponse,
    PlaceOrderRequest,
    ProductResponse,
)
from tenancy.dependencies.tenant_context import (
    require_owner_context,
    require_tenant_context,
)

router = APIRouter(
    prefix="/storefront",
    tags=["storefront"],
)

StoreContext = Annotated[TenantContext, Depends(require_tenant_context)]
OwnerContext = Annotated[TenantContext, Depends(require_owner_context)]
WriteSession = Annotated[AsyncSession, Depends(get_write_session)]


def _not_found(error: EntityNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))


@router.get("/products")
async def list_products(
    context: StoreContext,
    catalog: Annotated[CatalogRepository, Depends(get_catalog_reader)],
    category_id: Annotated[str | None, Query()] = None,
) -> list[ProductResponse]:
    products = await catalog.list_products(context, category_id=category_id)
    return [ProductResponse.from_model(p) for p in products]


@router.post("/products", status_code=status.HTTP_201_CREATED)
async def create_product(
    request: CreateProductRequest,
    context: OwnerContext,
    session: WriteSession,
    catalog: Annotated[CatalogRepository, Depends(get_catalog_writer)],
) -> ProductResponse:
    """Add a product to the store's catalog.

    Raises:
        HTTPException: 404 if ``category_id`` is not a category of this store
    """
    try:
        async with session.begin():
            product = await catalog.create_product(
                context,
                name=request.name,
                price_cents=request.price_cents,
                description=request.description,
                stock=request.stock,
                category_id=request.category_id,
            )
    except EntityNotFoundError as e:
        raise _not_found(e) from e
    return ProductResponse.from_model(product)


@router.get("/products/{product_id}")
async def get_product(
    product_id: str,
    context: StoreContext,
    catalog: Annotated[CatalogRepository, Depends(get_catalog_reader)],
) -> ProductResponse:
    product = await catalog.get_product(context, product_id)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product {product_id} not found",
        )
    return ProductResponse.from_model(product)


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    context: OwnerContext,
    session: WriteSession,
    catalog: Annotated[CatalogRepository, Depends(get_catalog_writer)],
) -> Response:
    try:
        async with session.begin():
            await catalog.delete_product(context, product_id)
    except EntityNotFoundError as e:
        raise _not_found(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/categories")
async def list_categories(
    context: StoreContext,
    catalog: Annotated[CatalogRepository, Depends(get_catalog_reader)],
) -> list[CategoryResponse]:
    categories = await catalog.list_categories(context)
    return [CategoryResponse.from_model(c) for c in categories]


@router.post("/categories", status_code=status.HTTP_201_CREATED)
async def create_category(
    request: CreateCategoryRequest,
    context: OwnerContext,
    session: WriteSession,
    catalog: Annotated[CatalogRepository, Depends(get_catalog_writer)],
) -> CategoryResponse:
    async with session.begin():
        category = await catalog.create_category(
            context, name=request.name, description=request.description
        )
    return CategoryResponse.from_model(category)


@router.get("/orders")
async def list_orders(
    context: OwnerContext,
    orders: Annotated[OrderRepository, Depends(get_order_reader)],
    limit: Annotated[int | None, Query(ge=1, le=500)] = None,
) -> list[OrderResponse]:
    return [OrderResponse.from_model(o) for o in await orders.list_orders(context, limit)]


@router.post("/orders", status_code=status.HTTP_201_CREATED)
async def place_order(
    request: PlaceOrderRequest,
    context: StoreContext,
    session: WriteSession,
    orders: Annotated[OrderRepository, Depends(get_order_writer)],
) -> OrderResponse:
    """Check out against the store of the request's host.

    Raises:
        HTTPException: 400 for an empty order or a non-positive quantity
        HTTPException: 404 if a product is not sold by this store
    """
    lines = [OrderLine(product_id=i.product_id, quantity=i.quantity) for i in request.items]
    try:
        async with session.begin():
            order = await orders.place_order(
                context,
                customer_name=request.customer_name,
                customer_email=request.customer_email,
                customer_phone=request.customer_phone,
                lines=lines,
            )
    except EntityNotFoundError as e:
        raise _not_found(e) from e
    except (EmptyOrderError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e
    return OrderResponse.from_model(order)


@router.get("/orders/{order_id}")
async def get_order(
    order_id: str,
    context: OwnerContext,
    orders: Annotated[OrderRepository, Depends(get_order_reader)],
) -> OrderResponse:
    order = await orders.get_order(context, order_id)
    if order is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order {order_id} not found",
        )
    return OrderResponse.from_model(order)


@router.get("/customers")
async def list_customers(
    context: OwnerContext,
    orders: Annotated[OrderRepository, Depends(get_order_reader)],
) -> list[CustomerResponse]:
    customers = await orders.list_customers(context)
    return [CustomerResponse.from_summary(c) for c in customers]


@router.get("/dashboard/stats")
async def dashboard_stats(
    context: OwnerContext,
    dashboard: Annotated[DashboardRepository, Depends(get_dashboard_repository)],
) -> DashboardStatsResponse:
    return DashboardStatsResponse.from_stats(await dashboard.stats(context))
