"""Pydantic models for storefront requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from storefront.infrastructure.dashboard_repository import DashboardStats
from storefront.infrastructure.models import (
    CategoryModel,
    OrderItemModel,
    OrderModel,
    ProductModel,
)
from storefront.infrastructure.order_repository import CustomerSummary


class CreateCategoryRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)


class CategoryResponse(BaseModel):
    id: str
    name: str
    description: str | None = None

    @classmethod
    def from_model(cls, category: CategoryModel) -> CategoryResponse:
        return cls(id=category.id, name=category.name, description=category.description)


class CreateProductRequest(BaseModel):
    """Request model for adding a product to the catalog."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    price_cents: int = Field(..., ge=0, description="Price in minor currency units")
    stock: int = Field(0, ge=0)
    category_id: str | None = Field(
        None, description="A category of the same store"
    )


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    price_cents: int
    stock: int
    category_id: str | None = None

    @classmethod
    def from_model(cls, product: ProductModel) -> ProductResponse:
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price_cents=product.price_cents,
            stock=product.stock,
            category_id=product.category_id,
        )


class OrderLineRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1, le=1000)


class PlaceOrderRequest(BaseModel):
    """Checkout request; prices come from the catalog, not the client."""

    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: str = Field(
        ..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$"
    )
    customer_phone: str | None = Field(None, max_length=32)
    items: list[OrderLineRequest] = Field(..., min_length=1)


class OrderItemResponse(BaseModel):
    product_id: str | None
    product_name: str
    quantity: int
    unit_price_cents: int

    @classmethod
    def from_model(cls, item: OrderItemModel) -> OrderItemResponse:
        return cls(
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price_cents=item.unit_price_cents,
        )


class OrderResponse(BaseModel):
    id: str
    customer_name: str
    customer_email: str
    status: str
    total_cents: int
    created_at: datetime
    items: list[OrderItemResponse] = Field(default_factory=list)

    @classmethod
    def from_model(cls, order: OrderModel, with_items: bool = True) -> OrderResponse:
        return cls(
            id=order.id,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            status=order.status,
            total_cents=order.total_cents,
            created_at=order.created_at,
            items=(
                [OrderItemResponse.from_model(i) for i in order.items]
                if with_items
                else []
            ),
        )


class CustomerResponse(BaseModel):
    email: str
    name: str
    phone: str | None = None
    order_count: int
    total_spent_cents: int
    last_order_at: datetime

    @classmethod
    def from_summary(cls, customer: CustomerSummary) -> CustomerResponse:
        return cls(
            email=customer.email,
            name=customer.name,
            phone=customer.phone,
            order_count=customer.order_count,
            total_spent_cents=customer.total_spent_cents,
            last_order_at=customer.last_order_at,
        )


class TopProductResponse(BaseModel):
    product_id: str
    name: str
    units_sold: int
    revenue_cents: int


class DashboardStatsResponse(BaseModel):
    """Dashboard figures of the current store."""

    total_products: int
    total_orders: int
    total_customers: int
    total_revenue_cents: int
    recent_orders: list[OrderResponse]
    top_products: list[TopProductResponse]

    @classmethod
    def from_stats(cls, stats: DashboardStats) -> DashboardStatsResponse:
        return cls(
            total_products=stats.total_products,
            total_orders=stats.total_orders,
            total_customers=stats.total_customers,
            total_revenue_cents=stats.total_revenue_cents,
            recent_orders=[
                OrderResponse.from_model(o, with_items=False)
                for o in stats.recent_orders
            ],
            top_products=[
                TopProductResponse(
                    product_id=p.product_id,
                    name=p.name,
                    units_sold=p.units_sold,
                    revenue_cents=p.revenue_cents,
                )
                for p in stats.top_products
            ],
        )
