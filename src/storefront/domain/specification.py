"""Query specifications - the one way every read and write path filters,
sorts and pages aggregates.

A ``Specification`` is an immutable value: a filter ``Criterion``, the set of
related data to load with each aggregate, an ordered list of sort fields and
optional skip/take. Criteria only ever name *keys* (``"price"``,
``"category.name"``); each aggregate publishes an explicit field map
(``PRODUCT_FIELDS`` and friends) that turns a key into an accessor. The SQL
repositories keep a matching column map, so the same specification runs in
memory and in the database. Unknown keys are rejected, never ignored.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, Iterable, Mapping, Sequence, TypeVar

from storefront.domain.exceptions import InvalidSortKeyError, ValidationError
from storefront.domain.messages import QueryMessages

T = TypeVar("T")
U = TypeVar("U")

FieldMap = Mapping[str, Callable[[Any], Any]]

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


# ---------------------------------------------------------------------------
# Criteria
# ---------------------------------------------------------------------------


class Criterion:
    """Base class for filter expressions. Combine with ``&``, ``|`` and ``~``."""

    def __and__(self, other: Criterion) -> Criterion:
        return AllOf((self, other))

    def __or__(self, other: Criterion) -> Criterion:
        return AnyOf((self, other))

    def __invert__(self) -> Criterion:
        return Not(self)


COMPARISON_OPERATORS = frozenset({"eq", "ne", "lt", "le", "gt", "ge", "in", "contains"})


@dataclass(frozen=True, eq=True)
class Compare(Criterion):
    key: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in COMPARISON_OPERATORS:
            raise ValueError(f"Unknown comparison operator '{self.op}'")


@dataclass(frozen=True)
class AllOf(Criterion):
    parts: tuple[Criterion, ...]


@dataclass(frozen=True)
class AnyOf(Criterion):
    parts: tuple[Criterion, ...]


@dataclass(frozen=True)
class Not(Criterion):
    part: Criterion


def eq(key: str, value: Any) -> Compare:
    return Compare(key, "eq", value)


def ne(key: str, value: Any) -> Compare:
    return Compare(key, "ne", value)


def lt(key: str, value: Any) -> Compare:
    return Compare(key, "lt", value)


def le(key: str, value: Any) -> Compare:
    return Compare(key, "le", value)


def gt(key: str, value: Any) -> Compare:
    return Compare(key, "gt", value)


def ge(key: str, value: Any) -> Compare:
    return Compare(key, "ge", value)


def is_in(key: str, values: Iterable[Any]) -> Compare:
    return Compare(key, "in", tuple(values))


def contains(key: str, text: str) -> Compare:
    """Case-insensitive substring match."""
    return Compare(key, "contains", text)


def criterion_keys(criterion: Criterion | None) -> set[str]:
    """Every field key a criterion refers to."""
    if criterion is None:
        return set()
    if isinstance(criterion, Compare):
        return {criterion.key}
    if isinstance(criterion, (AllOf, AnyOf)):
        keys: set[str] = set()
        for part in criterion.parts:
            keys |= criterion_keys(part)
        return keys
    if isinstance(criterion, Not):
        return criterion_keys(criterion.part)
    raise TypeError(f"Unsupported criterion {criterion!r}")


def matches(criterion: Criterion | None, entity: Any, fields: FieldMap) -> bool:
    """Evaluate ``criterion`` against one in-memory aggregate."""
    if criterion is None:
        return True
    if isinstance(criterion, AllOf):
        return all(matches(part, entity, fields) for part in criterion.parts)
    if isinstance(criterion, AnyOf):
        return any(matches(part, entity, fields) for part in criterion.parts)
    if isinstance(criterion, Not):
        return not matches(criterion.part, entity, fields)
    if isinstance(criterion, Compare):
        actual = resolve_field(fields, criterion.key)(entity)
        return _compare(actual, criterion.op, criterion.value)
    raise TypeError(f"Unsupported criterion {criterion!r}")


def _compare(actual: Any, op: str, expected: Any) -> bool:
    if op == "eq":
        return actual == expected
    if op == "ne":
        return actual != expected
    if op == "in":
        return actual in expected
    if actual is None:
        return False
    if op == "contains":
        return str(expected).lower() in str(actual).lower()
    if op == "lt":
        return actual < expected
    if op == "le":
        return actual <= expected
    if op == "gt":
        return actual > expected
    return actual >= expected


def resolve_field(fields: FieldMap, key: str) -> Callable[[Any], Any]:
    try:
        return fields[key]
    except KeyError:
        raise InvalidSortKeyError(
            f"Unknown field '{key}'; expected one of: {', '.join(sorted(fields))}",
            key=QueryMessages.INVALID_SORT_KEY,
            params=(key,),
        ) from None


def _and(left: Criterion | None, right: Criterion | None) -> Criterion | None:
    if left is None:
        return right
    if right is None:
        return left
    return AllOf((left, right))


def _or(left: Criterion | None, right: Criterion | None) -> Criterion | None:
    # A missing side matches everything, so the union does too.
    if left is None or right is None:
        return None
    return AnyOf((left, right))


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SortField:
    key: str
    descending: bool = False

    def __str__(self) -> str:
        return f"{self.key} {'desc' if self.descending else 'asc'}"


def parse_order_by(text: str | None) -> tuple[SortField, ...]:
    """Parse ``"category.name desc, price"`` into sort fields.

    Keys are matched case-insensitively; the direction defaults to ``asc``.
    """
    if text is None or not text.strip():
        return ()

    sort_fields: list[SortField] = []
    for chunk in text.split(","):
        parts = chunk.split()
        if not parts:
            continue
        if len(parts) > 2:
            raise InvalidSortKeyError(
                f"Invalid sort clause '{chunk.strip()}'",
                key=QueryMessages.INVALID_SORT_KEY,
                params=(chunk.strip(),),
            )
        direction = parts[1].lower() if len(parts) == 2 else "asc"
        if direction not in ("asc", "desc"):
            raise InvalidSortKeyError(
                f"Invalid sort direction '{parts[1]}'",
                key=QueryMessages.INVALID_SORT_DIRECTION,
                params=(parts[1],),
            )
        sort_fields.append(SortField(parts[0].lower(), direction == "desc"))
    return tuple(sort_fields)


def validate_keys(spec: Specification, fields: FieldMap) -> None:
    """Raise ``InvalidSortKeyError`` if the spec names a key ``fields`` lacks."""
    for key in criterion_keys(spec.criteria) | {s.key for s in spec.order_by}:
        resolve_field(fields, key)


def _sort_key(accessor: Callable[[Any], Any]) -> Callable[[Any], tuple]:
    # None sorts after every real value, and never gets compared with one.
    def key(entity: Any) -> tuple:
        value = accessor(entity)
        return (value is None, value)

    return key


def sort_items(items: Sequence[T], order_by: Sequence[SortField], fields: FieldMap) -> list[T]:
    """Stable multi-key sort; the first field is the primary key."""
    result = list(items)
    for sort_field in reversed(order_by):
        accessor = resolve_field(fields, sort_field.key)
        result.sort(key=_sort_key(accessor), reverse=sort_field.descending)
    return result


# ---------------------------------------------------------------------------
# Paging
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PageRequest:
    """1-based page request.

    Non-positive values are rejected; an oversize page is clamped to
    ``MAX_PAGE_SIZE``.
    """

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationError(
                "Page must be a positive integer",
                key=QueryMessages.PAGE_MUST_BE_POSITIVE,
            )
        if self.page_size < 1:
            raise ValidationError(
                "Page size must be a positive integer",
                key=QueryMessages.PAGE_SIZE_MUST_BE_POSITIVE,
            )
        if self.page_size > MAX_PAGE_SIZE:
            object.__setattr__(self, "page_size", MAX_PAGE_SIZE)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def take(self) -> int:
        return self.page_size


@dataclass(frozen=True)
class PagedResult(Generic[T]):
    items: list[T]
    total_count: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def map(self, fn: Callable[[T], U]) -> PagedResult[U]:
        return PagedResult(
            items=[fn(item) for item in self.items],
            total_count=self.total_count,
            page=self.page,
            page_size=self.page_size,
        )


# ---------------------------------------------------------------------------
# Specification
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Specification(Generic[T]):
    criteria: Criterion | None = None
    includes: frozenset[str] = frozenset()
    order_by: tuple[SortField, ...] = ()
    skip: int | None = None
    take: int | None = None

    @property
    def is_paging_enabled(self) -> bool:
        return self.take is not None

    # --- Builders (each returns a new specification) --------------------------

    def where(self, criterion: Criterion) -> Specification[T]:
        return replace(self, criteria=_and(self.criteria, criterion))

    def include(self, *paths: str) -> Specification[T]:
        return replace(self, includes=self.includes | frozenset(paths))

    def ordered_by(self, *sort_fields: SortField | str) -> Specification[T]:
        parsed: list[SortField] = []
        for item in sort_fields:
            if isinstance(item, SortField):
                parsed.append(item)
            else:
                parsed.extend(parse_order_by(item))
        return replace(self, order_by=self.order_by + tuple(parsed))

    def paged(self, page: PageRequest) -> Specification[T]:
        return replace(self, skip=page.skip, take=page.take)

    # --- Combinators ----------------------------------------------------------

    def and_(self, other: Specification[T]) -> Specification[T]:
        return self._merge(other, _and(self.criteria, other.criteria))

    def or_(self, other: Specification[T]) -> Specification[T]:
        return self._merge(other, _or(self.criteria, other.criteria))

    def not_(self) -> Specification[T]:
        negated = Not(self.criteria) if self.criteria is not None else Not(AllOf(()))
        return replace(self, criteria=negated)

    __and__ = and_
    __or__ = or_
    __invert__ = not_

    def _merge(self, other: Specification[T], criteria: Criterion | None) -> Specification[T]:
        return Specification(
            criteria=criteria,
            includes=self.includes | other.includes,
            order_by=self.order_by or other.order_by,
            skip=self.skip if self.skip is not None else other.skip,
            take=self.take if self.take is not None else other.take,
        )

    # --- In-memory evaluation -------------------------------------------------

    def evaluate(self, items: Iterable[T], fields: FieldMap) -> list[T]:
        """Filter, sort and (if enabled) page ``items`` in memory."""
        validate_keys(self, fields)
        selected = [item for item in items if matches(self.criteria, item, fields)]
        selected = sort_items(selected, self.order_by, fields)
        if self.is_paging_enabled:
            start = self.skip or 0
            selected = selected[start:start + self.take]
        return selected


def as_specification(
    source: Specification[T] | Criterion | None,
    order_by: Sequence[SortField] | str | None = None,
    include: Iterable[str] = (),
) -> Specification[T]:
    """Normalise the ``(predicate | spec, order_by, include)`` argument triple."""
    if isinstance(source, Specification):
        spec = source
    else:
        spec = Specification(criteria=source)
    if order_by:
        if isinstance(order_by, str):
            spec = spec.ordered_by(order_by)
        else:
            spec = spec.ordered_by(*order_by)
    include = tuple(include)
    if include:
        spec = spec.include(*include)
    return spec


def paginate(items: Sequence[T], spec: Specification[T], page: PageRequest, fields: FieldMap) -> PagedResult[T]:
    """Page an in-memory collection the way the SQL repositories do."""
    unpaged = replace(spec, skip=None, take=None)
    selected = unpaged.evaluate(items, fields)
    return PagedResult(
        items=selected[page.skip:page.skip + page.take],
        total_count=len(selected),
        page=page.page,
        page_size=page.page_size,
    )


__all__ = [
    "AllOf",
    "AnyOf",
    "Compare",
    "Criterion",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "Not",
    "PageRequest",
    "PagedResult",
    "SortField",
    "Specification",
    "as_specification",
    "contains",
    "criterion_keys",
    "eq",
    "ge",
    "gt",
    "is_in",
    "le",
    "lt",
    "matches",
    "ne",
    "paginate",
    "parse_order_by",
    "sort_items",
    "validate_keys",
]
