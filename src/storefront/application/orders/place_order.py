"""Application service: Place Order use case (checkout).

Orchestrates address resolution, product lookup, stock reservation and
order creation in one unit of work:

1. Resolve shipping and billing addresses.
2. Take the requested lines, or the caller's cart when none are given.
3. For each line, in order: the product must exist, be active and have
   enough stock. The first violation fails the whole placement.
4. Create the Order with *current* prices (snapshot).
5. Reserve stock for every line atomically.
6. Persist the order; a cart that supplied the lines is cleared.

Any failure leaves the transaction uncommitted, so no stock is reserved
and no order exists.
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
    cart_key,
)
from storefront.application.dto import AddressInput, OrderItemSpec
from storefront.application.identity import parse_user_id
from storefront.application.orders.address_resolution import AddressResolver
from storefront.application.result import FieldError, Result
from storefront.domain.exceptions import (
    BusinessRuleViolation,
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from storefront.domain.messages import OrderMessages
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaceOrder(Command):
    user_id: str | None
    items: tuple[OrderItemSpec, ...] = ()
    shipping_address: AddressInput | None = None
    shipping_address_id: UUID | None = None
    billing_address: AddressInput | None = None
    billing_address_id: UUID | None = None
    use_same_for_billing: bool = True

    def cache_keys(self):
        return (cart_key(self.user_id),)

    def cache_patterns(self):
        return (ORDERS_PATTERN, PRODUCTS_PATTERN, STOCK_PATTERN)


class PlaceOrderValidator:

    async def validate(self, command: PlaceOrder, uow: UnitOfWork) -> list[FieldError]:
        return [
            FieldError(f"items[{index}].quantity", OrderMessages.QUANTITY_MUST_BE_POSITIVE)
            for index, spec in enumerate(command.items)
            if spec.quantity <= 0
        ]


class PlaceOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: PlaceOrder) -> Result[UUID]:
        user_id = parse_user_id(command.user_id)

        shipping, billing = await AddressResolver(self._uow).resolve(
            user_id,
            shipping_address=command.shipping_address,
            shipping_address_id=command.shipping_address_id,
            billing_address=command.billing_address,
            billing_address_id=command.billing_address_id,
            use_same_for_billing=command.use_same_for_billing,
        )

        cart: Cart | None = None
        lines = list(command.items)
        if not lines:
            cart = await self._uow.carts.get_by_user_id_with_items(user_id)
            if cart is not None:
                lines = [
                    OrderItemSpec(product_id=item.product_id, quantity=item.quantity)
                    for item in cart.items
                ]
        if not lines:
            raise ValidationError(
                "An order needs at least one item", key=OrderMessages.EMPTY_ORDER, field="items"
            )

        order = Order.create(user_id, shipping, billing)
        for spec in lines:
            product = await self._uow.products.get_by_id(spec.product_id, include=("stock",))
            if product is None:
                raise EntityNotFoundError(
                    f"Product not found: '{spec.product_id}'",
                    key=OrderMessages.PRODUCT_NOT_FOUND,
                    params=(str(spec.product_id),),
                )
            if not product.is_active:
                raise BusinessRuleViolation(
                    f"Product '{product.name}' is not active",
                    key=OrderMessages.PRODUCT_NOT_ACTIVE,
                    params=(product.name,),
                )
            if not product.has_sufficient_stock(spec.quantity):
                raise InsufficientStockError(
                    f"Insufficient stock for '{product.name}'",
                    key=OrderMessages.INSUFFICIENT_STOCK,
                    params=(product.name,),
                )
            order.add_item(product.id, product.price, spec.quantity)  # <-- price snapshot

        await InventoryReservationService(self._uow.stock).reserve_for_order(order)
        await self._uow.orders.add(order)

        if cart is not None:
            cart.clear()
            await self._uow.carts.update(cart)

        logger.info(
            "Placed order %s for user %s: %d line(s), total %s",
            order.id, user_id, len(order.items), order.total_amount,
        )
        return Result.success(order.id)
