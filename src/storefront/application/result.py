"""The outcome contract every handler returns.

A ``Result`` is one of five shapes: Success (with a value), NotFound,
Error (one or more messages), Unauthorized, or Invalid (per-field errors).
Messages are symbolic keys plus format params; rendering them is the
presentation layer's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Iterable, TypeVar

from storefront.domain.exceptions import (
    BusinessRuleViolation,
    DomainException,
    EntityNotFoundError,
    ValidationError,
)

T = TypeVar("T")


class ResultStatus(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    ERROR = "error"
    UNAUTHORIZED = "unauthorized"
    INVALID = "invalid"


@dataclass(frozen=True)
class Message:
    key: str
    params: tuple[Any, ...] = ()


@dataclass(frozen=True)
class FieldError:
    field: str
    key: str
    params: tuple[Any, ...] = ()


# Domain failures a handler is expected to turn into a Result. Anything else
# (store failures, concurrency conflicts, bugs) propagates.
EXPECTED_ERRORS = (ValidationError, EntityNotFoundError, BusinessRuleViolation)


@dataclass(frozen=True)
class Result(Generic[T]):
    status: ResultStatus
    value: T | None = None
    errors: tuple[Message, ...] = ()
    field_errors: tuple[FieldError, ...] = ()

    @property
    def is_success(self) -> bool:
        return self.status is ResultStatus.OK

    @property
    def keys(self) -> list[str]:
        """Every error key carried by this result, in order."""
        return [m.key for m in self.errors] + [f.key for f in self.field_errors]

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def success(value: T | None = None) -> Result[T]:
        return Result(ResultStatus.OK, value=value)

    @staticmethod
    def not_found(key: str, *params: Any) -> Result[T]:
        return Result(ResultStatus.NOT_FOUND, errors=(Message(key, params),))

    @staticmethod
    def error(key: str, *params: Any) -> Result[T]:
        return Result(ResultStatus.ERROR, errors=(Message(key, params),))

    @staticmethod
    def unauthorized() -> Result[T]:
        return Result(ResultStatus.UNAUTHORIZED)

    @staticmethod
    def invalid(field_errors: Iterable[FieldError]) -> Result[T]:
        return Result(ResultStatus.INVALID, field_errors=tuple(field_errors))

    @staticmethod
    def from_exception(exc: DomainException) -> Result[T]:
        if isinstance(exc, EntityNotFoundError):
            return Result.not_found(exc.key, *exc.params)
        if isinstance(exc, ValidationError):
            return Result.invalid([FieldError(exc.field or "", exc.key, exc.params)])
        return Result.error(exc.key, *exc.params)
