"""Domain service: Inventory Reservation.

This service coordinates the cross-aggregate operation of reserving
or releasing stock for an order. It lives in the domain layer because
the reserve/release pairing is a core business rule, not just
orchestration.

Reservation is two-phase (validate-then-mutate) so an obviously short
line fails before any stock moves. The mutation itself goes through the
repository's atomic conditional update, so a concurrent reservation that
wins the race still cannot push stock below zero; the caller's unit of
work then rolls back whatever this order had already reserved.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from uuid import UUID

from storefront.domain.exceptions import EntityNotFoundError, InsufficientStockError
from storefront.domain.messages import OrderMessages, ProductMessages
from storefront.domain.model.order import Order
from storefront.domain.repository.stock_repository import StockRepository

logger = logging.getLogger(__name__)


class InventoryReservationService:

    def __init__(self, stock_repo: StockRepository) -> None:
        self._stock_repo = stock_repo

    async def reserve_for_order(self, order: Order) -> None:
        """Reserve stock for every line item in the order.

        Phase 1: sum the requested quantity per product and check it
        against the stock on hand. Fails before any mutation.
        Phase 2: reserve each product's total atomically.
        """
        requested = _quantities_by_product(order)

        # Phase 1: validate
        for product_id, qty in requested.items():
            stock = await self._stock_repo.get_by_product_id(product_id)
            if stock is None:
                raise EntityNotFoundError(
                    f"No stock record for product '{product_id}'",
                    key=ProductMessages.STOCK_NOT_FOUND,
                    params=(str(product_id),),
                )
            if not stock.has_at_least(qty):
                raise InsufficientStockError(
                    f"Insufficient stock for product '{product_id}' "
                    f"(need {qty}, have {stock.quantity})",
                    key=OrderMessages.INSUFFICIENT_STOCK,
                    params=(str(product_id),),
                )

        # Phase 2: mutate
        for product_id, qty in requested.items():
            try:
                await self._stock_repo.reserve_stock(product_id, qty)
            except InsufficientStockError as exc:
                raise InsufficientStockError(
                    str(exc),
                    key=OrderMessages.INSUFFICIENT_STOCK,
                    params=(str(product_id),),
                ) from exc
        logger.debug("Reserved stock for order %s: %s", order.id, dict(requested))

    async def release_for_order(self, order: Order) -> None:
        """Give back the stock of every line. Call exactly once per order."""
        for product_id, qty in _quantities_by_product(order).items():
            await self._stock_repo.release_stock(product_id, qty)
        logger.debug("Released stock for order %s", order.id)


def _quantities_by_product(order: Order) -> OrderedDict[UUID, int]:
    quantities: OrderedDict[UUID, int] = OrderedDict()
    for line in order.items:
        quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity.value
    return quantities
