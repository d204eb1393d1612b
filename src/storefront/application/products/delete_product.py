"""Application service: Delete Product use case.

Cart and order lines keep a reference to their product, so a product that
appears in any of them is refused. Deactivate it instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from storefront.application.contracts import (
    PRODUCTS_PATTERN,
    Command,
    product_key,
    stock_key,
)
from storefront.application.result import Result
from storefront.domain.exceptions import BusinessRuleViolation, EntityNotFoundError
from storefront.domain.messages import ProductMessages
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class DeleteProduct(Command):
    product_id: UUID

    def cache_keys(self):
        return (product_key(self.product_id), stock_key(self.product_id))

    def cache_patterns(self):
        return (PRODUCTS_PATTERN,)


class DeleteProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: DeleteProduct) -> Result[None]:
        product = await self._uow.products.get_by_id(command.product_id)
        if product is None:
            raise EntityNotFoundError(
                f"Product '{command.product_id}' not found", key=ProductMessages.NOT_FOUND
            )
        if await self._uow.carts.contains_product(product.id) or (
            await self._uow.orders.contains_product(product.id)
        ):
            raise BusinessRuleViolation(
                f"Product '{product.id}' is referenced by a cart or an order",
                key=ProductMessages.IN_USE,
            )

        await self._uow.products.delete(product)
        return Result.success()
