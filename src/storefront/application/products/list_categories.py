"""Application service: Get All Categories query.

Sorted by name unless ``order_by`` says otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.contracts import Query
from storefront.application.dto import CategoryDTO, category_to_dto
from storefront.application.result import Result
from storefront.domain.model.product import Category
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.specification import (
    DEFAULT_PAGE_SIZE,
    PagedResult,
    PageRequest,
    SortField,
    Specification,
    contains,
    parse_order_by,
)

DEFAULT_ORDER = (SortField("name"),)


@dataclass(frozen=True)
class GetAllCategories(Query):
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    search: str | None = None
    order_by: str | None = None


class GetAllCategoriesHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, query: GetAllCategories) -> Result[PagedResult[CategoryDTO]]:
        page = PageRequest(query.page, query.page_size)

        spec: Specification[Category] = Specification()
        if query.search and query.search.strip():
            spec = spec.where(contains("name", query.search.strip()))
        spec = spec.ordered_by(*(parse_order_by(query.order_by) or DEFAULT_ORDER))

        categories = await self._uow.categories.get_paged(spec, page=page)
        return Result.success(categories.map(category_to_dto))
