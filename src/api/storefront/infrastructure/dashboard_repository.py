"""Store dashboard aggregates.

Each aggregate applies the ownership predicate in its WHERE clause, so rows
of other stores are gone before anything is counted, summed or grouped.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.middleware.tenant_context import TenantContext
from storefront.infrastructure.models import OrderItemModel, OrderModel, ProductModel
from storefront.infrastructure.ownership import ORDERS, PRODUCTS


@dataclass(frozen=True)
class TopProduct:
    product_id: str
    name: str
    units_sold: int
    revenue_cents: int


@dataclass(frozen=True)
class DashboardStats:
    total_products: int = 0
    total_orders: int = 0
    total_customers: int = 0
    total_revenue_cents: int = 0
    recent_orders: list[OrderModel] = field(default_factory=list)
    top_products: list[TopProduct] = field(default_factory=list)


class DashboardRepository:
    """Computes dashboard figures for the store named by a TenantContext."""

    def __init__(self, session: AsyncSession, recent: int = 5, top: int = 5) -> None:
        self._session = session
        self._recent = recent
        self._top = top

    async def stats(self, context: TenantContext) -> DashboardStats:
        total_products = await self._session.scalar(
            select(func.count(ProductModel.id)).where(PRODUCTS.build(context))
        )
        order_totals = await self._session.execute(
            select(
                func.count(OrderModel.id),
                func.count(distinct(OrderModel.customer_email)),
                func.coalesce(func.sum(OrderModel.total_cents), 0),
            ).where(ORDERS.build(context))
        )
        total_orders, total_customers, revenue = order_totals.one()

        recent = await self._session.execute(
            ORDERS.select(context)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .limit(self._recent)
        )

        return DashboardStats(
            total_products=total_products or 0,
            total_orders=total_orders,
            total_customers=total_customers,
            total_revenue_cents=int(revenue),
            recent_orders=list(recent.scalars().all()),
            top_products=await self._top_products(context),
        )

    async def _top_products(self, context: TenantContext) -> list[TopProduct]:
        units = func.sum(OrderItemModel.quantity)
        stmt = (
            select(
                ProductModel.id,
                ProductModel.name,
                units,
                func.sum(OrderItemModel.quantity * OrderItemModel.unit_price_cents),
            )
            .select_from(OrderItemModel)
            .join(OrderModel, OrderItemModel.order_id == OrderModel.id)
            .join(ProductModel, OrderItemModel.product_id == ProductModel.id)
            .where(ORDERS.build(context), PRODUCTS.build(context))
            .group_by(ProductModel.id, ProductModel.name)
            .order_by(units.desc(), ProductModel.id)
            .limit(self._top)
        )
        result = await self._session.execute(stmt)
        return [
            TopProduct(
                product_id=product_id,
                name=name,
                units_sold=int(sold),
                revenue_cents=int(revenue),
            )
            for product_id, name, sold, revenue in result.all()
        ]
