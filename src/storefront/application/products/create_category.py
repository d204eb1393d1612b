"""Application service: Create Category use case."""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.contracts import CATEGORIES_PATTERN, Command
from storefront.application.dto import CategoryDTO, category_to_dto
from storefront.application.result import FieldError, Result
from storefront.domain.messages import CategoryMessages
from storefront.domain.model.product import Category
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class CreateCategory(Command):
    name: str
    description: str | None = None

    def cache_patterns(self):
        return (CATEGORIES_PATTERN,)


class CreateCategoryValidator:
    """Category names are unique, case-insensitively."""

    async def validate(self, command: CreateCategory, uow: UnitOfWork) -> list[FieldError]:
        if not command.name or not command.name.strip():
            return [FieldError("name", CategoryMessages.NAME_REQUIRED)]
        if await uow.categories.get_by_name(command.name.strip()) is not None:
            return [FieldError("name", CategoryMessages.NAME_EXISTS, (command.name.strip(),))]
        return []


class CreateCategoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: CreateCategory) -> Result[CategoryDTO]:
        category = Category.create(command.name, command.description)
        await self._uow.categories.add(category)
        return Result.success(category_to_dto(category))
