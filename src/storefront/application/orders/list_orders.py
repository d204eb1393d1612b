"""Application service: Get Orders query.

Newest first unless ``order_by`` says otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.contracts import Query
from storefront.application.dto import OrderDTO, order_to_dto
from storefront.application.identity import parse_user_id
from storefront.application.orders.update_order_status import parse_status
from storefront.application.result import FieldError, Result
from storefront.domain.messages import OrderMessages
from storefront.domain.model.order import Order
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.specification import (
    DEFAULT_PAGE_SIZE,
    PagedResult,
    PageRequest,
    SortField,
    Specification,
    eq,
    parse_order_by,
)

DEFAULT_ORDER = (SortField("order_date", descending=True),)


@dataclass(frozen=True)
class GetOrders(Query):
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    user_id: str | None = None
    status: str | None = None
    order_by: str | None = None


class GetOrdersValidator:

    async def validate(self, query: GetOrders, uow: UnitOfWork) -> list[FieldError]:
        if query.status is not None and parse_status(query.status) is None:
            return [FieldError("status", OrderMessages.STATUS_INVALID, (query.status,))]
        return []


class GetOrdersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, query: GetOrders) -> Result[PagedResult[OrderDTO]]:
        page = PageRequest(query.page, query.page_size)

        spec: Specification[Order] = Specification().include("items")
        if query.user_id is not None:
            spec = spec.where(eq("user_id", parse_user_id(query.user_id)))
        if query.status is not None:
            spec = spec.where(eq("status", parse_status(query.status).value))
        spec = spec.ordered_by(*(parse_order_by(query.order_by) or DEFAULT_ORDER))

        orders = await self._uow.orders.get_paged(spec, page=page)
        return Result.success(orders.map(order_to_dto))
