"""Application service: Update Product use case.

Price changes never touch existing carts or orders; their lines carry
their own price snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from storefront.application.contracts import PRODUCTS_PATTERN, Command, product_key
from storefront.application.dto import ProductDTO, product_to_dto
from storefront.application.products.pricing import parse_price, price_errors
from storefront.application.result import FieldError, Result
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.messages import ProductMessages
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class UpdateProduct(Command):
    product_id: UUID
    name: str
    price: Decimal | str
    category_id: UUID
    description: str | None = None

    def cache_keys(self):
        return (product_key(self.product_id),)

    def cache_patterns(self):
        return (PRODUCTS_PATTERN,)


class UpdateProductValidator:

    async def validate(self, command: UpdateProduct, uow: UnitOfWork) -> list[FieldError]:
        errors = price_errors(command.price)
        if await uow.categories.get_by_id(command.category_id) is None:
            errors.append(FieldError("category_id", ProductMessages.CATEGORY_NOT_FOUND))
        return errors


class UpdateProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: UpdateProduct) -> Result[ProductDTO]:
        product = await self._uow.products.get_by_id(
            command.product_id, include=("stock", "category")
        )
        if product is None:
            raise EntityNotFoundError(
                f"Product '{command.product_id}' not found", key=ProductMessages.NOT_FOUND
            )

        product.update(
            name=command.name,
            price=parse_price(command.price),
            category_id=command.category_id,
            description=command.description,
        )
        await self._uow.products.update(product)

        product.category = await self._uow.categories.get_by_id(product.category_id)
        return Result.success(product_to_dto(product))
