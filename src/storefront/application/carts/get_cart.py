"""Application service: Get Cart query.

A user who never added anything gets an empty cart view, not NotFound.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.contracts import Query
from storefront.application.dto import CartDTO, cart_to_dto, empty_cart
from storefront.application.identity import parse_user_id
from storefront.application.result import Result
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class GetCart(Query):
    user_id: str | None


class GetCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, query: GetCart) -> Result[CartDTO]:
        user_id = parse_user_id(query.user_id)
        cart = await self._uow.carts.get_by_user_id_with_items(user_id)
        if cart is None:
            return Result.success(empty_cart(user_id))
        return Result.success(cart_to_dto(cart))
