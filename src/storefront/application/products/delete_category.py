"""Application service: Delete Category use case.

A category that still has products cannot be deleted; move or delete the
products first.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from storefront.application.contracts import CATEGORIES_PATTERN, Command
from storefront.application.result import Result
from storefront.domain.exceptions import BusinessRuleViolation, EntityNotFoundError
from storefront.domain.messages import CategoryMessages
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.specification import eq


@dataclass(frozen=True)
class DeleteCategory(Command):
    category_id: UUID

    def cache_patterns(self):
        return (CATEGORIES_PATTERN,)


class DeleteCategoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: DeleteCategory) -> Result[None]:
        category = await self._uow.categories.get_by_id(command.category_id)
        if category is None:
            raise EntityNotFoundError(
                f"Category '{command.category_id}' not found", key=CategoryMessages.NOT_FOUND
            )
        if await self._uow.products.any(eq("category_id", category.id)):
            raise BusinessRuleViolation(
                f"Category '{category.name}' still has products",
                key=CategoryMessages.HAS_PRODUCTS,
            )

        await self._uow.categories.delete(category)
        return Result.success()
