"""Application service: Add To Cart use case.

Creates the caller's cart lazily on first use. The price of a new line is
snapshotted from the catalog; adding to an existing line keeps its
original price.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from storefront.application.carts.rules import CartBusinessRules
from storefront.application.contracts import Command, cart_key
from storefront.application.dto import CartSummaryDTO, cart_summary
from storefront.application.identity import parse_user_id
from storefront.application.result import FieldError, Result
from storefront.domain.messages import CartMessages
from storefront.domain.model.cart import Cart
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddToCart(Command):
    user_id: str | None
    product_id: UUID | None
    quantity: int

    def cache_keys(self):
        return (cart_key(self.user_id),)


class AddToCartValidator:

    async def validate(self, command: AddToCart, uow: UnitOfWork) -> list[FieldError]:
        errors: list[FieldError] = []
        if command.product_id is None:
            errors.append(FieldError("product_id", CartMessages.PRODUCT_ID_REQUIRED))
        if command.quantity <= 0:
            errors.append(FieldError("quantity", CartMessages.QUANTITY_MUST_BE_POSITIVE))
        return errors


class AddToCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: AddToCart) -> Result[CartSummaryDTO]:
        user_id = parse_user_id(command.user_id)
        rules = CartBusinessRules(self._uow)

        product = await rules.check_product_exists(command.product_id)
        rules.check_product_is_active(product)

        cart = await self._uow.carts.get_by_user_id_with_items(user_id)
        is_new_cart = cart is None
        if cart is None:
            cart = Cart.create(user_id)

        existing = cart.get_item(product.id)
        new_quantity = command.quantity + (existing.quantity if existing else 0)
        unit_price = existing.unit_price if existing else product.price

        rules.check_max_items_in_cart(cart, product.id)
        rules.check_max_quantity_per_item(new_quantity)
        rules.check_max_total_amount(cart.total_amount + unit_price * command.quantity)
        rules.check_sufficient_stock(product, new_quantity)

        cart.add_item(product.id, product.price, command.quantity)

        if is_new_cart:
            await self._uow.carts.add(cart)
        else:
            await self._uow.carts.update(cart)

        logger.info(
            "Added %d x %s to cart %s (line qty %d)",
            command.quantity, product.id, cart.id, new_quantity,
        )
        return Result.success(cart_summary(cart))
