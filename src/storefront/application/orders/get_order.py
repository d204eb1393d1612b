"""Application service: Get Order By Id query."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from storefront.application.contracts import Query
from storefront.application.dto import OrderDTO, order_to_dto
from storefront.application.result import Result
from storefront.domain.messages import OrderMessages
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class GetOrderById(Query):
    order_id: UUID


class GetOrderByIdHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, query: GetOrderById) -> Result[OrderDTO]:
        order = await self._uow.orders.get_by_id(query.order_id, include=("items",))
        if order is None:
            return Result.not_found(OrderMessages.NOT_FOUND, str(query.order_id))
        return Result.success(order_to_dto(order))
