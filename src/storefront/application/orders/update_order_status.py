"""Application service: Update Order Status use case.

Moves an order along the forward-only state machine. Moving to Cancelled
releases stock exactly like ``CancelOrder``.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from storefront.application.contracts import (
    ORDERS_PATTERN,
    PRODUCTS_PATTERN,
    STOCK_PATTERN,
    Command,
    order_key,
)
from storefront.application.result import FieldError, Result
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.messages import OrderMessages
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)


def parse_status(raw: str | OrderStatus) -> OrderStatus | None:
    if isinstance(raw, OrderStatus):
        return raw
    for status in OrderStatus:
        if status.value.lower() == str(raw).strip().lower():
            return status
    return None


@dataclass(frozen=True)
class UpdateOrderStatus(Command):
    order_id: UUID
    status: str | OrderStatus

    def cache_keys(self):
        return (order_key(self.order_id),)

    def cache_patterns(self):
        patterns = [ORDERS_PATTERN]
        if parse_status(self.status) is OrderStatus.CANCELLED:
            patterns += [PRODUCTS_PATTERN, STOCK_PATTERN]
        return tuple(patterns)


class UpdateOrderStatusValidator:

    async def validate(self, command: UpdateOrderStatus, uow: UnitOfWork) -> list[FieldError]:
        if parse_status(command.status) is None:
            return [FieldError("status", OrderMessages.STATUS_INVALID, (str(command.status),))]
        return []


class UpdateOrderStatusHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: UpdateOrderStatus) -> Result[str]:
        new_status = parse_status(command.status)
        order = await self._uow.orders.get_by_id(command.order_id, include=("items",))
        if order is None:
            raise EntityNotFoundError(
                f"Order '{command.order_id}' not found", key=OrderMessages.NOT_FOUND
            )

        order.transition_to(new_status)
        if new_status is OrderStatus.CANCELLED:
            await InventoryReservationService(self._uow.stock).release_for_order(order)
        await self._uow.orders.update(order)

        return Result.success(order.status.value)
