"""Application service: Get User Orders query.

Every order of the calling user with its lines, newest first.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.contracts import Query
from storefront.application.dto import OrderDTO, order_to_dto
from storefront.application.identity import parse_user_id
from storefront.application.orders.list_orders import DEFAULT_ORDER
from storefront.application.result import Result
from storefront.domain.model.order import Order
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.specification import Specification, eq


@dataclass(frozen=True)
class GetUserOrders(Query):
    user_id: str | None


class GetUserOrdersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, query: GetUserOrders) -> Result[list[OrderDTO]]:
        user_id = parse_user_id(query.user_id)
        spec: Specification[Order] = (
            Specification()
            .where(eq("user_id", user_id))
            .include("items")
            .ordered_by(*DEFAULT_ORDER)
        )
        orders = await self._uow.orders.apply_specification(spec)
        return Result.success([order_to_dto(order) for order in orders])
