"""Request pipeline.

``Mediator.send`` runs every request through the same behaviours, in
order:

1. open one unit of work for the whole request;
2. validation - the registered validator may read through the unit of
   work; any field error short-circuits with an Invalid result;
3. the handler - expected domain failures it raises become Results;
4. transaction - a transactional command commits only when the result is
   a success, everything else (failures, exceptions, cancellation) rolls
   back on exit;
5. cache invalidation - after a successful commit only; failures are
   logged, never raised;
6. metrics - request counts by outcome plus duration.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from storefront.application.contracts import Command, Request
from storefront.application.identity import UnauthorizedError
from storefront.application.ports import CacheInvalidator, MetricsSink, NullMetricsSink
from storefront.application.result import EXPECTED_ERRORS, FieldError, Result
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class Handler(Protocol):
    async def handle(self, request: Any) -> Result: ...


class Validator(Protocol):
    async def validate(self, request: Any, uow: UnitOfWork) -> list[FieldError]: ...


HandlerFactory = Callable[[UnitOfWork], Handler]


@dataclass(frozen=True)
class _Registration:
    handler_factory: HandlerFactory
    validator: Validator | None


class Mediator:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        cache: CacheInvalidator,
        metrics: MetricsSink | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = cache
        self._metrics = metrics or NullMetricsSink()
        self._registry: dict[type, _Registration] = {}

    def register(
        self,
        request_type: type,
        handler_factory: HandlerFactory,
        validator: Validator | None = None,
    ) -> None:
        self._registry[request_type] = _Registration(handler_factory, validator)

    async def send(self, request: Request) -> Result:
        name = type(request).__name__
        try:
            registration = self._registry[type(request)]
        except KeyError:
            raise LookupError(f"No handler registered for {name}") from None

        tags = {"request": name}
        started = time.perf_counter()
        logger.debug("Handling %s", name)
        try:
            result, committed = await self._run(request, registration)
        except Exception:
            self._metrics.increment("requests.failed", tags=tags)
            logger.exception("Unhandled error while handling %s", name)
            raise
        finally:
            self._metrics.observe(
                "requests.duration_ms", (time.perf_counter() - started) * 1000, tags=tags
            )

        self._metrics.increment(f"requests.{result.status.value}", tags=tags)
        if committed:
            await self._invalidate(request)
        return result

    # --- Behaviours -----------------------------------------------------------

    async def _run(self, request: Request, registration: _Registration) -> tuple[Result, bool]:
        async with self._uow_factory() as uow:
            result = await self._validate_and_handle(request, registration, uow)
            if not _is_transactional(request):
                return result, False
            if not result.is_success:
                logger.info(
                    "Rolling back %s (%s: %s)",
                    type(request).__name__,
                    result.status.value,
                    ", ".join(result.keys) or "-",
                )
                return result, False
            await uow.commit()
            return result, True

    async def _validate_and_handle(
        self, request: Request, registration: _Registration, uow: UnitOfWork
    ) -> Result:
        try:
            if registration.validator is not None:
                errors = await registration.validator.validate(request, uow)
                if errors:
                    return Result.invalid(errors)
            handler = registration.handler_factory(uow)
            return await handler.handle(request)
        except UnauthorizedError as exc:
            logger.info("Unauthorized %s: %s", type(request).__name__, exc)
            return Result.unauthorized()
        except EXPECTED_ERRORS as exc:
            return Result.from_exception(exc)

    async def _invalidate(self, request: Request) -> None:
        if not isinstance(request, Command):
            return
        for key in request.cache_keys():
            try:
                await self._cache.remove_key(key)
            except Exception:
                logger.warning("Cache invalidation failed for key %s", key, exc_info=True)
        for pattern in request.cache_patterns():
            try:
                await self._cache.remove_by_pattern(pattern)
            except Exception:
                logger.warning("Cache invalidation failed for pattern %s", pattern, exc_info=True)


def _is_transactional(request: Request) -> bool:
    return isinstance(request, Command) and request.transactional
