"""Application service: Update Category use case."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from storefront.application.contracts import CATEGORIES_PATTERN, PRODUCTS_PATTERN, Command
from storefront.application.dto import CategoryDTO, category_to_dto
from storefront.application.result import FieldError, Result
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.messages import CategoryMessages
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class UpdateCategory(Command):
    category_id: UUID
    name: str
    description: str | None = None

    def cache_patterns(self):
        # Product reads embed the category name.
        return (CATEGORIES_PATTERN, PRODUCTS_PATTERN)


class UpdateCategoryValidator:
    """Renaming a category to its own name is fine; taking another's is not."""

    async def validate(self, command: UpdateCategory, uow: UnitOfWork) -> list[FieldError]:
        if not command.name or not command.name.strip():
            return [FieldError("name", CategoryMessages.NAME_REQUIRED)]
        existing = await uow.categories.get_by_name(command.name.strip())
        if existing is not None and existing.id != command.category_id:
            return [FieldError("name", CategoryMessages.NAME_EXISTS, (command.name.strip(),))]
        return []


class UpdateCategoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: UpdateCategory) -> Result[CategoryDTO]:
        category = await self._uow.categories.get_by_id(command.category_id)
        if category is None:
            raise EntityNotFoundError(
                f"Category '{command.category_id}' not found", key=CategoryMessages.NOT_FOUND
            )

        category.update(command.name, command.description)
        await self._uow.categories.update(category)
        return Result.success(category_to_dto(category))
