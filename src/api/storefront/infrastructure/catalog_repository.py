"""Store-scoped access to products and categories."""

from __future__ import annotations

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from ulid import ULID

from shared_kernel.exceptions import UnscopedWriteError
from shared_kernel.middleware.tenant_context import TenantContext
from storefront.infrastructure.models import CategoryModel, ProductModel
from storefront.infrastructure.observability import (
    DefaultStorefrontRepositoryProbe,
    StorefrontRepositoryProbe,
)
from storefront.infrastructure.ownership import (
    CATEGORIES,
    PRODUCTS,
    OwnershipFilter,
)
from storefront.ports.exceptions import EntityNotFoundError


class CatalogRepository:
    """Products and categories of the store named by a TenantContext.

    Writes only add to the session and flush; callers own the transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: StorefrontRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultStorefrontRepositoryProbe()

    async def list_products(
        self,
        context: TenantContext,
        category_id: str | None = None,
    ) -> list[ProductModel]:
        stmt = PRODUCTS.select(context).order_by(ProductModel.name, ProductModel.id)
        if category_id is not None:
            stmt = stmt.where(ProductModel.category_id == category_id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_product(
        self, context: TenantContext, product_id: str
    ) -> ProductModel | None:
        stmt = PRODUCTS.select(context).where(ProductModel.id == product_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_categories(self, context: TenantContext) -> list[CategoryModel]:
        stmt = CATEGORIES.select(context).order_by(CategoryModel.name, CategoryModel.id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_category(
        self, context: TenantContext, category_id: str
    ) -> CategoryModel | None:
        stmt = CATEGORIES.select(context).where(CategoryModel.id == category_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create_category(
        self,
        context: TenantContext,
        name: str,
        description: str | None = None,
    ) -> CategoryModel:
        """Create a category owned by the context's store.

        Raises:
            UnscopedWriteError: If the context has no tenant
        """
        category = CategoryModel(id=str(ULID()), name=name, description=description)
        self._stamp(CATEGORIES, category, context)
        self._session.add(category)
        await self._session.flush()
        self._probe.owned_entity_created("category", category.id, category.tenant_id)
        return category

    async def create_product(
        self,
        context: TenantContext,
        name: str,
        price_cents: int,
        description: str | None = None,
        stock: int = 0,
        category_id: str | None = None,
    ) -> ProductModel:
        """Create a product owned by the context's store.

        ``category_id`` must name a category of the same store.

        Raises:
            UnscopedWriteError: If the context has no tenant
            EntityNotFoundError: If the category is not in this store
        """
        product = ProductModel(
            id=str(ULID()),
            name=name,
            description=description,
            price_cents=price_cents,
            stock=stock,
        )
        self._stamp(PRODUCTS, product, context)

        if category_id is not None:
            category = await self.get_category(context, category_id)
            if category is None:
                self._probe.reference_not_in_scope(
                    "category", category_id, context.tenant_id
                )
                raise EntityNotFoundError("category", category_id)
            product.category_id = category.id

        self._session.add(product)
        await self._session.flush()
        self._probe.owned_entity_created("product", product.id, product.tenant_id)
        return product

    async def delete_product(self, context: TenantContext, product_id: str) -> None:
        """Delete a product of the context's store.

        Raises:
            EntityNotFoundError: If no such product exists in this store
        """
        stmt = delete(ProductModel).where(
            PRODUCTS.build(context), ProductModel.id == product_id
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            raise EntityNotFoundError("product", product_id)
        assert context.tenant_id is not None
        self._probe.owned_entity_deleted("product", product_id, context.tenant_id)

    def _stamp(
        self,
        ownership: OwnershipFilter,
        row: CategoryModel | ProductModel,
        context: TenantContext,
    ) -> None:
        try:
            ownership.stamp(row, context)
        except UnscopedWriteError:
            self._probe.unscoped_write_refused(
                ownership.entity, context.host_kind.value
            )
            raise
