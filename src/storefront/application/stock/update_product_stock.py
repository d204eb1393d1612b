"""Application service: Update Product Stock use case.

Sets the absolute on-hand quantity (a stock-take or manual correction).
Reservations made by orders go through the reservation service instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from storefront.application.contracts import (
    PRODUCTS_PATTERN,
    Command,
    product_key,
    stock_key,
)
from storefront.application.dto import StockInfoDTO
from storefront.application.result import FieldError, Result
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.messages import ProductMessages
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateProductStock(Command):
    product_id: UUID
    quantity: int

    def cache_keys(self):
        return (stock_key(self.product_id), product_key(self.product_id))

    def cache_patterns(self):
        return (PRODUCTS_PATTERN,)


class UpdateProductStockValidator:

    async def validate(self, command: UpdateProductStock, uow: UnitOfWork) -> list[FieldError]:
        if command.quantity < 0:
            return [FieldError("quantity", ProductMessages.STOCK_QUANTITY_NEGATIVE)]
        return []


class UpdateProductStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: UpdateProductStock) -> Result[StockInfoDTO]:
        stock = await self._uow.stock.get_by_product_id(command.product_id)
        if stock is None:
            raise EntityNotFoundError(
                f"No stock record for product '{command.product_id}'",
                key=ProductMessages.STOCK_NOT_FOUND,
            )

        previous = stock.quantity
        stock.update_quantity(command.quantity)
        await self._uow.stock.set_quantity(command.product_id, stock.quantity)

        logger.info(
            "Stock for %s set from %d to %d", command.product_id, previous, stock.quantity
        )
        return Result.success(
            StockInfoDTO(
                product_id=stock.product_id,
                quantity=stock.quantity,
                in_stock=stock.quantity > 0,
            )
        )
