"""Shared SQL implementation of the generic repository contract.

Subclasses describe *what* to select (``_from_clause``, ``_entities``,
``columns``) and how to turn result rows into aggregates (``_hydrate``);
this class turns a ``Specification`` into the WHERE / ORDER BY / LIMIT
parts and runs the statements on the unit of work's session.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import replace
from typing import Any, Generic, Iterable, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.domain.repository.base import Repository
from storefront.domain.specification import (
    Criterion,
    PagedResult,
    PageRequest,
    SortField,
    Specification,
    as_specification,
    eq,
)
from storefront.infrastructure.persistence.query import (
    ColumnMap,
    compile_criterion,
    order_clauses,
)

T = TypeVar("T")


class SqlRepository(Repository[T], Generic[T]):
    columns: ColumnMap

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # --- Hooks ----------------------------------------------------------------

    @abstractmethod
    def _from_clause(self) -> Any:
        """Table or join every read selects from."""

    @abstractmethod
    def _entities(self) -> tuple[Any, ...]:
        """Row classes selected per result row."""

    @abstractmethod
    async def _hydrate(self, rows: Sequence[Any], include: frozenset[str]) -> list[T]:
        """Map result rows (tuples of ``_entities``) to domain objects."""

    @property
    def _id_column(self) -> Any:
        return self.columns["id"]

    # --- Reads ----------------------------------------------------------------

    async def query(
        self,
        criteria: Specification[T] | Criterion | None = None,
        *,
        order_by: Sequence[SortField] | str | None = None,
        include: Iterable[str] = (),
    ) -> list[T]:
        spec = as_specification(criteria, order_by, include)
        return await self.apply_specification(replace(spec, skip=None, take=None))

    async def apply_specification(self, spec: Specification[T]) -> list[T]:
        stmt = self._select(spec)
        if spec.skip:
            stmt = stmt.offset(spec.skip)
        if spec.take is not None:
            stmt = stmt.limit(spec.take)
        rows = (await self._session.execute(stmt)).all()
        return await self._hydrate(rows, spec.includes)

    async def get_paged(
        self,
        criteria: Specification[T] | Criterion | None = None,
        *,
        page: PageRequest,
        order_by: Sequence[SortField] | str | None = None,
        include: Iterable[str] = (),
    ) -> PagedResult[T]:
        spec = as_specification(criteria, order_by, include)
        total = await self.count(spec)
        items = await self.apply_specification(replace(spec, skip=page.skip, take=page.take))
        return PagedResult(
            items=items, total_count=total, page=page.page, page_size=page.page_size
        )

    async def get_by_id(self, entity_id: UUID, *, include: Iterable[str] = ()) -> T | None:
        found = await self.query(eq("id", entity_id), include=include)
        return found[0] if found else None

    async def any(self, criteria: Specification[T] | Criterion | None = None) -> bool:
        spec = as_specification(criteria)
        stmt = (
            select(self._id_column)
            .select_from(self._from_clause())
            .where(compile_criterion(spec.criteria, self.columns))
            .limit(1)
        )
        return (await self._session.execute(stmt)).first() is not None

    async def count(self, criteria: Specification[T] | Criterion | None = None) -> int:
        spec = as_specification(criteria)
        stmt = (
            select(func.count())
            .select_from(self._from_clause())
            .where(compile_criterion(spec.criteria, self.columns))
        )
        return (await self._session.execute(stmt)).scalar_one()

    # --- Helpers --------------------------------------------------------------

    def _select(self, spec: Specification[T]) -> Select:
        # populate_existing: bulk UPDATEs bypass the identity map.
        return (
            select(*self._entities())
            .select_from(self._from_clause())
            .where(compile_criterion(spec.criteria, self.columns))
            .order_by(*order_clauses(spec.order_by, self.columns, self._id_column))
            .execution_options(populate_existing=True)
        )

    async def _flush(self) -> None:
        await self._session.flush()

    async def _insert_rows(self, row_type: Any, values: list[dict[str, Any]]) -> None:
        # Child rows go in as a bulk INSERT so they never enter the identity
        # map, where a later delete-and-rewrite would collide with them.
        if values:
            await self._session.execute(insert(row_type), values)
