"""Application service: Get All Products query.

Paged listing with an optional category filter, a case-insensitive name
search and a free-text ``order_by`` such as ``"category.name desc, price"``.
Unknown sort keys are rejected with an Invalid result.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from storefront.application.contracts import Query
from storefront.application.dto import ProductDTO, product_to_dto
from storefront.application.result import Result
from storefront.domain.specification import (
    DEFAULT_PAGE_SIZE,
    PagedResult,
    PageRequest,
    Specification,
    contains,
    eq,
    parse_order_by,
)
from storefront.domain.model.product import Product
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class GetAllProducts(Query):
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    category_id: UUID | None = None
    search: str | None = None
    order_by: str | None = None
    active_only: bool = False


def product_listing_spec(query: GetAllProducts) -> Specification[Product]:
    spec: Specification[Product] = Specification().include("stock", "category")
    if query.category_id is not None:
        spec = spec.where(eq("category_id", query.category_id))
    if query.search and query.search.strip():
        spec = spec.where(contains("name", query.search.strip()))
    if query.active_only:
        spec = spec.where(eq("is_active", True))
    return spec.ordered_by(*parse_order_by(query.order_by))


class GetAllProductsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, query: GetAllProducts) -> Result[PagedResult[ProductDTO]]:
        page = PageRequest(query.page, query.page_size)
        products = await self._uow.products.get_paged(product_listing_spec(query), page=page)
        return Result.success(products.map(product_to_dto))
