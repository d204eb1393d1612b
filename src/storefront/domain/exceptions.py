"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so handlers can catch them uniformly and turn them into ``Result`` values.
Every exception carries a symbolic ``key`` (see ``storefront.domain.messages``)
plus optional ``params``; the human-readable message is for logs only.
"""

from __future__ import annotations

from typing import Any


class DomainException(Exception):
    """Base class for all domain errors."""

    default_key = "Domain:Error"

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        params: tuple[Any, ...] = (),
    ) -> None:
        super().__init__(message)
        self.key = key or self.default_key
        self.params = params


class ValidationError(DomainException):
    """A value failed a shape or invariant check.

    ``field`` names the offending input when there is one.
    """

    default_key = "Domain:Validation"

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        params: tuple[Any, ...] = (),
        field: str | None = None,
    ) -> None:
        super().__init__(message, key=key, params=params)
        self.field = field


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    default_key = "Domain:NotFound"


class BusinessRuleViolation(DomainException):
    """A business rule refused the operation."""

    default_key = "Domain:BusinessRule"


class InsufficientStockError(BusinessRuleViolation):
    """Requested quantity exceeds the stock on hand."""


class InvalidStatusTransitionError(BusinessRuleViolation):
    """The order state machine does not allow the requested move."""


class CartItemNotFoundError(EntityNotFoundError):
    """The cart has no line for the given product."""


class InvalidSortKeyError(ValidationError):
    """A sort or filter key does not exist on the aggregate."""


class ConcurrencyConflictError(DomainException):
    """The row changed since it was loaded (optimistic version mismatch)."""

    default_key = "Domain:ConcurrencyConflict"
