"""Generic repository contract shared by every aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Every read funnels through a ``Specification`` (or a bare
``Criterion`` plus ``order_by``/``include``); concrete implementations
translate it to SQL or evaluate it in memory.

Repositories always hand out detached domain objects. Nothing is tracked:
a change is persisted only by an explicit ``add``, ``update`` or ``delete``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Iterable, Sequence, TypeVar
from uuid import UUID

from storefront.domain.specification import (
    Criterion,
    PagedResult,
    PageRequest,
    SortField,
    Specification,
)

T = TypeVar("T")


class Repository(ABC, Generic[T]):

    # --- Reads ----------------------------------------------------------------

    @abstractmethod
    async def query(
        self,
        criteria: Specification[T] | Criterion | None = None,
        *,
        order_by: Sequence[SortField] | str | None = None,
        include: Iterable[str] = (),
    ) -> list[T]:
        """Return every entity matching ``criteria`` in the requested order."""

    @abstractmethod
    async def apply_specification(self, spec: Specification[T]) -> list[T]:
        """Run a complete specification, honouring its skip/take."""

    @abstractmethod
    async def get_paged(
        self,
        criteria: Specification[T] | Criterion | None = None,
        *,
        page: PageRequest,
        order_by: Sequence[SortField] | str | None = None,
        include: Iterable[str] = (),
    ) -> PagedResult[T]:
        """Return one page of matches plus the total match count."""

    @abstractmethod
    async def get_by_id(self, entity_id: UUID, *, include: Iterable[str] = ()) -> T | None:
        """Return an entity by id, or None if not found."""

    @abstractmethod
    async def any(self, criteria: Specification[T] | Criterion | None = None) -> bool:
        """True when at least one entity matches."""

    @abstractmethod
    async def count(self, criteria: Specification[T] | Criterion | None = None) -> int:
        """Number of matching entities."""

    async def long_count(self, criteria: Specification[T] | Criterion | None = None) -> int:
        return await self.count(criteria)

    # --- Writes ---------------------------------------------------------------

    @abstractmethod
    async def add(self, entity: T) -> None:
        """Persist a new entity."""

    @abstractmethod
    async def update(self, entity: T) -> None:
        """Persist changes to an existing entity."""

    @abstractmethod
    async def delete(self, entity: T) -> None:
        """Remove an entity."""
