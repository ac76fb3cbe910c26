"""SQLAlchemy ORM models for store-owned entities.

Products, categories and orders each carry ``tenant_id`` through
``TenantOwnedMixin``. Order items carry none: they are only ever reached
through their (owned) order. Amounts are stored in minor currency units.
"""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from infrastructure.database.models import Base, TenantOwnedMixin, TimestampMixin


class CategoryModel(Base, TenantOwnedMixin, TimestampMixin):
    """ORM model for categories table."""

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<CategoryModel(id={self.id}, tenant_id={self.tenant_id}, name={self.name})>"


class ProductModel(Base, TenantOwnedMixin, TimestampMixin):
    """ORM model for products table.

    ``category_id`` always points at a category of the same tenant; that is
    checked when the product is written.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    category_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<ProductModel(id={self.id}, tenant_id={self.tenant_id}, name={self.name})>"


class OrderModel(Base, TenantOwnedMixin, TimestampMixin):
    """ORM model for orders table.

    Customer details live on the order; the customer roster of a store is
    derived from its orders.
    """

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="pending")
    total_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    items: Mapped[list[OrderItemModel]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )

    def __repr__(self) -> str:
        return f"<OrderModel(id={self.id}, tenant_id={self.tenant_id}, status={self.status})>"


class OrderItemModel(Base):
    """ORM model for order_items table.

    The product name and unit price are copied at checkout so an order
    still reads correctly after the product is edited or deleted.
    """

    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    order: Mapped[OrderModel] = relationship(back_populates="items")
