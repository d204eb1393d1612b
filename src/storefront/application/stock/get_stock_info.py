"""Application service: Get Product Stock Info query."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from storefront.application.contracts import Query
from storefront.application.dto import StockInfoDTO
from storefront.application.result import Result
from storefront.domain.messages import ProductMessages
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class GetProductStockInfo(Query):
    product_id: UUID


class GetProductStockInfoHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, query: GetProductStockInfo) -> Result[StockInfoDTO]:
        stock = await self._uow.stock.get_by_product_id(query.product_id)
        if stock is None:
            return Result.not_found(ProductMessages.STOCK_NOT_FOUND, str(query.product_id))
        return Result.success(
            StockInfoDTO(
                product_id=stock.product_id,
                quantity=stock.quantity,
                in_stock=stock.quantity > 0,
            )
        )
