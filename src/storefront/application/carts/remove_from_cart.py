"""Application service: Remove From Cart use case."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from storefront.application.carts.rules import CartBusinessRules
from storefront.application.contracts import Command, cart_key
from storefront.application.dto import CartSummaryDTO, cart_summary
from storefront.application.identity import parse_user_id
from storefront.application.result import FieldError, Result
from storefront.domain.messages import CartMessages
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class RemoveFromCart(Command):
    user_id: str | None
    product_id: UUID | None

    def cache_keys(self):
        return (cart_key(self.user_id),)


class RemoveFromCartValidator:

    async def validate(self, command: RemoveFromCart, uow: UnitOfWork) -> list[FieldError]:
        if command.product_id is None:
            return [FieldError("product_id", CartMessages.PRODUCT_ID_REQUIRED)]
        return []


class RemoveFromCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: RemoveFromCart) -> Result[CartSummaryDTO]:
        user_id = parse_user_id(command.user_id)
        cart = await CartBusinessRules(self._uow).check_cart_exists(user_id)

        cart.remove_item(command.product_id)  # raises CartItemNotFoundError
        await self._uow.carts.update(cart)

        return Result.success(cart_summary(cart))
