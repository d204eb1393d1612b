"""Application service: activate or deactivate a product.

Inactive products stay in the catalog but cannot be added to carts or
ordered.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from storefront.application.contracts import PRODUCTS_PATTERN, Command, product_key
from storefront.application.dto import ProductDTO, product_to_dto
from storefront.application.result import Result
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.messages import ProductMessages
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class SetProductActive(Command):
    product_id: UUID
    is_active: bool

    def cache_keys(self):
        return (product_key(self.product_id),)

    def cache_patterns(self):
        return (PRODUCTS_PATTERN,)


class SetProductActiveHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: SetProductActive) -> Result[ProductDTO]:
        product = await self._uow.products.get_by_id(
            command.product_id, include=("stock", "category")
        )
        if product is None:
            raise EntityNotFoundError(
                f"Product '{command.product_id}' not found", key=ProductMessages.NOT_FOUND
            )

        if command.is_active:
            product.activate()
        else:
            product.deactivate()
        await self._uow.products.update(product)

        return Result.success(product_to_dto(product))
