"""SQL repositories for the catalog: products and categories.

Product reads always outer-join the category and stock tables so callers
can filter and sort on ``category.name`` and ``stock.quantity``; the
joined data is only attached to the returned Product when the caller
asked to ``include`` it.
"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import delete, func, select, update

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.messages import CategoryMessages, ProductMessages
from storefront.domain.model.product import Category, Product, ProductStock
from storefront.domain.repository.product_repository import (
    CategoryRepository,
    ProductRepository,
)
from storefront.infrastructure.persistence.base_repository import SqlRepository
from storefront.infrastructure.persistence.mapping import as_utc, to_money
from storefront.infrastructure.persistence.tables import (
    CategoryRow,
    ProductRow,
    ProductStockRow,
)


class SqlProductRepository(SqlRepository[Product], ProductRepository):

    columns = {
        "id": ProductRow.id,
        "name": ProductRow.name,
        "description": ProductRow.description,
        "price": ProductRow.price,
        "category_id": ProductRow.category_id,
        "category.name": CategoryRow.name,
        "is_active": ProductRow.is_active,
        "stock.quantity": ProductStockRow.quantity,
        "created_at": ProductRow.created_at,
    }

    def _from_clause(self) -> Any:
        return (
            ProductRow.__table__
            .outerjoin(CategoryRow.__table__, ProductRow.category_id == CategoryRow.id)
            .outerjoin(ProductStockRow.__table__, ProductStockRow.product_id == ProductRow.id)
        )

    def _entities(self) -> tuple[Any, ...]:
        return (ProductRow, CategoryRow, ProductStockRow)

    async def _hydrate(self, rows: Sequence[Any], include: frozenset[str]) -> list[Product]:
        products: list[Product] = []
        for product_row, category_row, stock_row in rows:
            product = self._to_domain(product_row)
            if "stock" in include and stock_row is not None:
                product.stock = _stock_to_domain(stock_row)
            if "category" in include and category_row is not None:
                product.category = _category_to_domain(category_row)
            products.append(product)
        return products

    # --- Writes ---------------------------------------------------------------

    async def add(self, product: Product) -> None:
        # The product row must exist before its stock row references it.
        self._session.add(self._to_row(product))
        await self._flush()
        if product.stock is not None:
            self._session.add(_stock_to_row(product.stock))
            await self._flush()

    async def update(self, product: Product) -> None:
        # Stock is never written through a product save.
        result = await self._session.execute(
            update(ProductRow)
            .where(ProductRow.id == product.id)
            .values(
                name=product.name,
                description=product.description,
                price=product.price.amount,
                currency=product.price.currency,
                category_id=product.category_id,
                is_active=product.is_active,
                updated_at=product.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise EntityNotFoundError(
                f"Product '{product.id}' not found", key=ProductMessages.NOT_FOUND
            )

    async def delete(self, product: Product) -> None:
        await self._session.execute(
            delete(ProductStockRow)
            .where(ProductStockRow.product_id == product.id)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(
            delete(ProductRow)
            .where(ProductRow.id == product.id)
            .execution_options(synchronize_session=False)
        )

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_domain(row: ProductRow) -> Product:
        return Product(
            id=row.id,
            name=row.name,
            price=to_money(row.price, row.currency),
            category_id=row.category_id,
            description=row.description,
            is_active=row.is_active,
            created_at=as_utc(row.created_at),
            updated_at=as_utc(row.updated_at),
        )

    @staticmethod
    def _to_row(product: Product) -> ProductRow:
        return ProductRow(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price.amount,
            currency=product.price.currency,
            category_id=product.category_id,
            is_active=product.is_active,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class SqlCategoryRepository(SqlRepository[Category], CategoryRepository):

    columns = {
        "id": CategoryRow.id,
        "name": CategoryRow.name,
    }

    def _from_clause(self) -> Any:
        return CategoryRow.__table__

    def _entities(self) -> tuple[Any, ...]:
        return (CategoryRow,)

    async def _hydrate(self, rows: Sequence[Any], include: frozenset[str]) -> list[Category]:
        return [_category_to_domain(row) for (row,) in rows]

    async def get_by_name(self, name: str) -> Category | None:
        stmt = select(CategoryRow).where(func.lower(CategoryRow.name) == name.strip().lower())
        row = (await self._session.execute(stmt)).scalars().first()
        return _category_to_domain(row) if row is not None else None

    async def add(self, category: Category) -> None:
        self._session.add(
            CategoryRow(id=category.id, name=category.name, description=category.description)
        )
        await self._flush()

    async def update(self, category: Category) -> None:
        result = await self._session.execute(
            update(CategoryRow)
            .where(CategoryRow.id == category.id)
            .values(name=category.name, description=category.description)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise EntityNotFoundError(
                f"Category '{category.id}' not found", key=CategoryMessages.NOT_FOUND
            )

    async def delete(self, category: Category) -> None:
        await self._session.execute(
            delete(CategoryRow)
            .where(CategoryRow.id == category.id)
            .execution_options(synchronize_session=False)
        )


def _category_to_domain(row: CategoryRow) -> Category:
    return Category(id=row.id, name=row.name, description=row.description)


def _stock_to_domain(row: ProductStockRow) -> ProductStock:
    return ProductStock(product_id=row.product_id, quantity=row.quantity, id=row.id)


def _stock_to_row(stock: ProductStock) -> ProductStockRow:
    return ProductStockRow(id=stock.id, product_id=stock.product_id, quantity=stock.quantity)
