"""Application service: Cancel Order use case.

Pending and Processing orders can be cancelled. Cancelling gives the
stock of every line back, exactly once, in the same transaction as the
status change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from storefront.application.contracts import (
    ORDERS_PATTERN,
    PRODUCTS_PATTERN,
    STOCK_PATTERN,
    Command,
    order_key,
)
from storefront.application.result import Result
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.messages import OrderMessages
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CancelOrder(Command):
    order_id: UUID

    def cache_keys(self):
        return (order_key(self.order_id),)

    def cache_patterns(self):
        return (ORDERS_PATTERN, PRODUCTS_PATTERN, STOCK_PATTERN)


class CancelOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: CancelOrder) -> Result[None]:
        order = await self._uow.orders.get_by_id(command.order_id, include=("items",))
        if order is None:
            raise EntityNotFoundError(
                f"Order '{command.order_id}' not found", key=OrderMessages.NOT_FOUND
            )

        order.cancel()  # raises if Shipped, Delivered or already Cancelled
        await InventoryReservationService(self._uow.stock).release_for_order(order)
        await self._uow.orders.update(order)

        logger.info("Cancelled order %s", order.id)
        return Result.success()
