"""Application service: Update Cart Item Quantity use case.

The new quantity replaces the old one outright, so stock is checked
against the new quantity rather than the difference. Every check runs
before the cart changes; a refusal leaves the cart untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from storefront.application.carts.rules import CartBusinessRules
from storefront.application.contracts import Command, cart_key
from storefront.application.dto import CartSummaryDTO, cart_summary
from storefront.application.identity import parse_user_id
from storefront.application.result import FieldError, Result
from storefront.domain.exceptions import CartItemNotFoundError
from storefront.domain.messages import CartMessages
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class UpdateCartItemQuantity(Command):
    user_id: str | None
    product_id: UUID | None
    quantity: int

    def cache_keys(self):
        return (cart_key(self.user_id),)


class UpdateCartItemQuantityValidator:

    async def validate(self, command: UpdateCartItemQuantity, uow: UnitOfWork) -> list[FieldError]:
        errors: list[FieldError] = []
        if command.product_id is None:
            errors.append(FieldError("product_id", CartMessages.PRODUCT_ID_REQUIRED))
        if command.quantity <= 0:
            errors.append(FieldError("quantity", CartMessages.QUANTITY_MUST_BE_POSITIVE))
        return errors


class UpdateCartItemQuantityHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: UpdateCartItemQuantity) -> Result[CartSummaryDTO]:
        user_id = parse_user_id(command.user_id)
        rules = CartBusinessRules(self._uow)

        cart = await rules.check_cart_exists(user_id)
        item = cart.get_item(command.product_id)
        if item is None:
            raise CartItemNotFoundError(
                f"Product '{command.product_id}' is not in this cart",
                key=CartMessages.CART_ITEM_NOT_FOUND,
            )
        product = await rules.check_product_exists(command.product_id)

        rules.check_max_quantity_per_item(command.quantity)
        rules.check_max_total_amount(
            cart.total_amount - item.line_total + item.unit_price * command.quantity
        )
        rules.check_sufficient_stock(product, command.quantity)

        cart.update_item_quantity(command.product_id, command.quantity)
        await self._uow.carts.update(cart)

        return Result.success(cart_summary(cart))
