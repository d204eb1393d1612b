"""SQL repository for ProductStock.

Reservation is one conditional UPDATE; the store's row-level atomicity
is what keeps two concurrent checkouts from selling the same unit.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, update

from storefront.domain.exceptions import EntityNotFoundError, InsufficientStockError
from storefront.domain.messages import ProductMessages
from storefront.domain.model.product import ProductStock
from storefront.domain.repository.stock_repository import StockRepository
from storefront.domain.specification import eq
from storefront.infrastructure.persistence.base_repository import SqlRepository
from storefront.infrastructure.persistence.tables import ProductStockRow

logger = logging.getLogger(__name__)


class SqlStockRepository(SqlRepository[ProductStock], StockRepository):

    columns = {
        "id": ProductStockRow.id,
        "product_id": ProductStockRow.product_id,
        "quantity": ProductStockRow.quantity,
    }

    def _from_clause(self) -> Any:
        return ProductStockRow.__table__

    def _entities(self) -> tuple[Any, ...]:
        return (ProductStockRow,)

    async def _hydrate(self, rows: Sequence[Any], include: frozenset[str]) -> list[ProductStock]:
        return [
            ProductStock(product_id=row.product_id, quantity=row.quantity, id=row.id)
            for (row,) in rows
        ]

    async def get_by_product_id(self, product_id: UUID) -> ProductStock | None:
        found = await self.query(eq("product_id", product_id))
        return found[0] if found else None

    # --- Reservation protocol -------------------------------------------------

    async def reserve_stock(self, product_id: UUID, quantity: int) -> None:
        result = await self._session.execute(
            update(ProductStockRow)
            .where(
                ProductStockRow.product_id == product_id,
                ProductStockRow.quantity >= quantity,
            )
            .values(
                quantity=ProductStockRow.quantity - quantity,
                version=ProductStockRow.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self._raise_missing_or_short(product_id, quantity)
        logger.debug("Reserved %d of %s", quantity, product_id)

    async def release_stock(self, product_id: UUID, quantity: int) -> None:
        result = await self._session.execute(
            update(ProductStockRow)
            .where(ProductStockRow.product_id == product_id)
            .values(
                quantity=ProductStockRow.quantity + quantity,
                version=ProductStockRow.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise EntityNotFoundError(
                f"No stock record for product '{product_id}'",
                key=ProductMessages.STOCK_NOT_FOUND,
            )
        logger.debug("Released %d of %s", quantity, product_id)

    async def set_quantity(self, product_id: UUID, quantity: int) -> None:
        result = await self._session.execute(
            update(ProductStockRow)
            .where(ProductStockRow.product_id == product_id)
            .values(quantity=quantity, version=ProductStockRow.version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise EntityNotFoundError(
                f"No stock record for product '{product_id}'",
                key=ProductMessages.STOCK_NOT_FOUND,
            )

    async def _raise_missing_or_short(self, product_id: UUID, quantity: int) -> None:
        stock = await self.get_by_product_id(product_id)
        if stock is None:
            raise EntityNotFoundError(
                f"No stock record for product '{product_id}'",
                key=ProductMessages.STOCK_NOT_FOUND,
            )
        raise InsufficientStockError(
            f"Insufficient stock for product {product_id} "
            f"(need {quantity}, have {stock.quantity})",
            key=ProductMessages.INSUFFICIENT_STOCK,
            params=(quantity, stock.quantity),
        )

    # --- Generic writes -------------------------------------------------------

    async def add(self, stock: ProductStock) -> None:
        self._session.add(
            ProductStockRow(id=stock.id, product_id=stock.product_id, quantity=stock.quantity)
        )
        await self._flush()

    async def update(self, stock: ProductStock) -> None:
        await self.set_quantity(stock.product_id, stock.quantity)

    async def delete(self, stock: ProductStock) -> None:
        await self._session.execute(
            delete(ProductStockRow)
            .where(ProductStockRow.id == stock.id)
            .execution_options(synchronize_session=False)
        )
