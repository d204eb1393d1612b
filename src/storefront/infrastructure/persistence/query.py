"""Compile specifications to SQL.

Each SQL repository publishes a column map mirroring its aggregate's
field map: the same keys, pointing at columns instead of accessors. An
unknown key is rejected with ``InvalidSortKeyError``, exactly like the
in-memory evaluator.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from sqlalchemy import and_, false, not_, or_, true
from sqlalchemy.sql.elements import ColumnElement

from storefront.domain.exceptions import InvalidSortKeyError
from storefront.domain.messages import QueryMessages
from storefront.domain.specification import (
    AllOf,
    AnyOf,
    Compare,
    Criterion,
    Not,
    SortField,
)

ColumnMap = Mapping[str, ColumnElement[Any]]


def resolve_column(columns: ColumnMap, key: str) -> ColumnElement[Any]:
    try:
        return columns[key]
    except KeyError:
        raise InvalidSortKeyError(
            f"Unknown field '{key}'; expected one of: {', '.join(sorted(columns))}",
            key=QueryMessages.INVALID_SORT_KEY,
            params=(key,),
        ) from None


def compile_criterion(criterion: Criterion | None, columns: ColumnMap) -> ColumnElement[bool]:
    if criterion is None:
        return true()
    if isinstance(criterion, AllOf):
        if not criterion.parts:
            return true()
        return and_(*(compile_criterion(part, columns) for part in criterion.parts))
    if isinstance(criterion, AnyOf):
        if not criterion.parts:
            return false()
        return or_(*(compile_criterion(part, columns) for part in criterion.parts))
    if isinstance(criterion, Not):
        return not_(compile_criterion(criterion.part, columns))
    if isinstance(criterion, Compare):
        return _compile_compare(criterion, resolve_column(columns, criterion.key))
    raise TypeError(f"Unsupported criterion {criterion!r}")


def _compile_compare(criterion: Compare, column: ColumnElement[Any]) -> ColumnElement[bool]:
    op, value = criterion.op, criterion.value
    if op == "eq":
        return column.is_(None) if value is None else column == value
    if op == "ne":
        return column.is_not(None) if value is None else column != value
    if op == "in":
        return column.in_(list(value))
    if op == "contains":
        escaped = str(value).replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return column.ilike(f"%{escaped}%", escape="\\")
    if op == "lt":
        return column < value
    if op == "le":
        return column <= value
    if op == "gt":
        return column > value
    return column >= value


def order_clauses(
    order_by: Sequence[SortField],
    columns: ColumnMap,
    tie_breaker: ColumnElement[Any],
) -> list[Any]:
    """ORDER BY terms for ``order_by``, always ending on ``tie_breaker``.

    NULLs sort after values ascending and before them descending, the same
    as the in-memory sort.
    """
    clauses: list[Any] = []
    for sort_field in order_by:
        column = resolve_column(columns, sort_field.key)
        if sort_field.descending:
            clauses.append(column.desc().nulls_first())
        else:
            clauses.append(column.asc().nulls_last())
    clauses.append(tie_breaker.asc())
    return clauses
