"""Store-scoped access to orders and the customer roster."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from ulid import ULID

from shared_kernel.exceptions import UnscopedWriteError
from shared_kernel.middleware.tenant_context import TenantContext
from storefront.infrastructure.models import OrderItemModel, OrderModel, ProductModel
from storefront.infrastructure.observability import (
    DefaultStorefrontRepositoryProbe,
    StorefrontRepositoryProbe,
)
from storefront.infrastructure.ownership import ORDERS, PRODUCTS
from storefront.ports.exceptions import EmptyOrderError, EntityNotFoundError


@dataclass(frozen=True)
class OrderLine:
    """One requested line of a checkout."""

    product_id: str
    quantity: int


@dataclass(frozen=True)
class CustomerSummary:
    """A customer of one store, derived from that store's orders."""

    email: str
    name: str
    phone: str | None
    order_count: int
    total_spent_cents: int
    last_order_at: datetime


class OrderRepository:
    """Orders of the store named by a TenantContext.

    The customer roster has no table of its own: it is the set of people
    who ordered from the store, so it inherits the order filter.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: StorefrontRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultStorefrontRepositoryProbe()

    async def list_orders(
        self, context: TenantContext, limit: int | None = None
    ) -> list[OrderModel]:
        stmt = (
            ORDERS.select(context)
            .options(selectinload(OrderModel.items))
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_order(self, context: TenantContext, order_id: str) -> OrderModel | None:
        stmt = (
            ORDERS.select(context)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def place_order(
        self,
        context: TenantContext,
        customer_name: str,
        customer_email: str,
        lines: list[OrderLine],
        customer_phone: str | None = None,
    ) -> OrderModel:
        """Check out ``lines`` against the context's store.

        Every product must belong to the same store; prices are taken from
        the catalog, never from the caller.

        Raises:
            UnscopedWriteError: If the context has no tenant
            EmptyOrderError: If ``lines`` is empty
            EntityNotFoundError: If a product is not in this store
        """
        if context.tenant_id is None:
            self._probe.unscoped_write_refused("order", context.host_kind.value)
            raise UnscopedWriteError("order")
        if not lines:
            raise EmptyOrderError("An order needs at least one item")
        if any(line.quantity < 1 for line in lines):
            raise ValueError("Item quantities must be positive")

        product_ids = {line.product_id for line in lines}
        result = await self._session.execute(
            PRODUCTS.select(context).where(ProductModel.id.in_(product_ids))
        )
        products = {p.id: p for p in result.scalars().all()}

        for line in lines:
            if line.product_id not in products:
                self._probe.reference_not_in_scope(
                    "product", line.product_id, context.tenant_id
                )
                raise EntityNotFoundError("product", line.product_id)

        items = [
            OrderItemModel(
                product_id=line.product_id,
                product_name=products[line.product_id].name,
                quantity=line.quantity,
                unit_price_cents=products[line.product_id].price_cents,
            )
            for line in lines
        ]
        order = OrderModel(
            id=str(ULID()),
            customer_name=customer_name,
            customer_email=customer_email.strip().lower(),
            customer_phone=customer_phone,
            status="pending",
            total_cents=sum(i.quantity * i.unit_price_cents for i in items),
            items=items,
        )
        ORDERS.stamp(order, context)
        self._session.add(order)
        await self._session.flush()
        self._probe.owned_entity_created("order", order.id, order.tenant_id)
        return order

    async def list_customers(self, context: TenantContext) -> list[CustomerSummary]:
        """The store's customers, most recent first."""
        stmt = (
            select(
                OrderModel.customer_email,
                func.max(OrderModel.customer_name),
                func.max(OrderModel.customer_phone),
                func.count(OrderModel.id),
                func.coalesce(func.sum(OrderModel.total_cents), 0),
                func.max(OrderModel.created_at),
            )
            .where(ORDERS.build(context))
            .group_by(OrderModel.customer_email)
            .order_by(func.max(OrderModel.created_at).desc(), OrderModel.customer_email)
        )
        result = await self._session.execute(stmt)
        return [
            CustomerSummary(
                email=email,
                name=name,
                phone=phone,
                order_count=count,
                total_spent_cents=int(total),
                last_order_at=last_order_at,
            )
            for email, name, phone, count, total, last_order_at in result.all()
        ]
