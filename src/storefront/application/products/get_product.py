"""Application service: Get Product By Id query."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from storefront.application.contracts import Query
from storefront.application.dto import ProductDTO, product_to_dto
from storefront.application.result import Result
from storefront.domain.messages import ProductMessages
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class GetProductById(Query):
    product_id: UUID


class GetProductByIdHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, query: GetProductById) -> Result[ProductDTO]:
        product = await self._uow.products.get_by_id(
            query.product_id, include=("stock", "category")
        )
        if product is None:
            return Result.not_found(ProductMessages.NOT_FOUND, str(query.product_id))
        return Result.success(product_to_dto(product))
