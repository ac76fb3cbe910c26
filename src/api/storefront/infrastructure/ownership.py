"""Ownership filters for store-owned entities.

Every read of products, categories or orders goes through the entity's
``OwnershipFilter``; every create is stamped by it. A context without a
tenant filters to the empty set, never to "all rows".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy import ColumnElement, Select, false, select

from shared_kernel.exceptions import UnscopedWriteError
from shared_kernel.middleware.tenant_context import TenantContext
from storefront.infrastructure.models import CategoryModel, OrderModel, ProductModel

OwnedModel = TypeVar("OwnedModel", CategoryModel, ProductModel, OrderModel)


@dataclass(frozen=True)
class OwnershipFilter(Generic[OwnedModel]):
    """Tenant predicate and write stamping for one owned entity type."""

    model: type[OwnedModel]
    entity: str

    def build(self, context: TenantContext) -> ColumnElement[bool]:
        """The ownership predicate for ``context``."""
        if context.tenant_id is None:
            return false()
        return self.model.tenant_id == context.tenant_id

    def select(self, context: TenantContext) -> Select[tuple[OwnedModel]]:
        """A SELECT of this entity already restricted to ``context``."""
        return select(self.model).where(self.build(context))

    def stamp(self, row: OwnedModel, context: TenantContext) -> OwnedModel:
        """Set the owner of a new row from ``context``.

        Raises:
            UnscopedWriteError: If the context has no tenant
            ValueError: If the row already belongs to a different tenant
        """
        if context.tenant_id is None:
            raise UnscopedWriteError(self.entity)
        if row.tenant_id is not None and row.tenant_id != context.tenant_id:
            raise ValueError(f"{self.entity} {row.id} is owned by another tenant")
        row.tenant_id = context.tenant_id
        return row


PRODUCTS = OwnershipFilter(ProductModel, "product")
CATEGORIES = OwnershipFilter(CategoryModel, "category")
ORDERS = OwnershipFilter(OrderModel, "order")
