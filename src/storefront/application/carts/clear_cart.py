"""Application service: Clear Cart use case.

Clearing removes every line but keeps the cart itself.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.carts.rules import CartBusinessRules
from storefront.application.contracts import Command, cart_key
from storefront.application.dto import CartSummaryDTO, cart_summary
from storefront.application.identity import parse_user_id
from storefront.application.result import Result
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class ClearCart(Command):
    user_id: str | None

    def cache_keys(self):
        return (cart_key(self.user_id),)


class ClearCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: ClearCart) -> Result[CartSummaryDTO]:
        user_id = parse_user_id(command.user_id)
        cart = await CartBusinessRules(self._uow).check_cart_exists(user_id)
        cart.clear()
        await self._uow.carts.update(cart)
        return Result.success(cart_summary(cart))
