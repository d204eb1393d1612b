"""Application service: Create Product use case.

A product is created together with its stock record; both are written in
the same unit of work.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from storefront.application.contracts import PRODUCTS_PATTERN, Command
from storefront.application.dto import ProductDTO, product_to_dto
from storefront.application.products.pricing import parse_price, price_errors
from storefront.application.result import FieldError, Result
from storefront.domain.messages import ProductMessages
from storefront.domain.model.product import Product
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateProduct(Command):
    name: str
    price: Decimal | str
    category_id: UUID
    description: str | None = None
    initial_stock: int = 0

    def cache_patterns(self):
        return (PRODUCTS_PATTERN,)


class CreateProductValidator:

    async def validate(self, command: CreateProduct, uow: UnitOfWork) -> list[FieldError]:
        errors = price_errors(command.price)
        if command.initial_stock < 0:
            errors.append(FieldError("initial_stock", ProductMessages.STOCK_QUANTITY_NEGATIVE))
        if await uow.categories.get_by_id(command.category_id) is None:
            errors.append(FieldError("category_id", ProductMessages.CATEGORY_NOT_FOUND))
        return errors


class CreateProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: CreateProduct) -> Result[ProductDTO]:
        product = Product.create(
            name=command.name,
            price=parse_price(command.price),
            category_id=command.category_id,
            description=command.description,
            initial_stock=command.initial_stock,
        )
        product.category = await self._uow.categories.get_by_id(command.category_id)
        await self._uow.products.add(product)

        logger.info("Created product %s (%s)", product.id, product.name)
        return Result.success(product_to_dto(product))
