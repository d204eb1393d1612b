"""Outbound ports the application layer talks to.

Concrete adapters live in ``storefront.infrastructure``; tests use the
recording fakes in ``tests/fakes.py``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping


class CacheInvalidator(ABC):
    """Fire-and-forget cache eviction.

    Correctness never depends on the cache, so callers log failures and
    move on.
    """

    @abstractmethod
    async def remove_key(self, key: str) -> None:
        """Evict one entry."""

    @abstractmethod
    async def remove_by_pattern(self, pattern: str) -> None:
        """Evict every entry whose key matches a glob pattern."""


class Localizer(ABC):

    @abstractmethod
    def translate(self, key: str, params: tuple[Any, ...] = ()) -> str:
        """Render a symbolic message key for humans."""


class MetricsSink(ABC):

    @abstractmethod
    def increment(self, name: str, value: int = 1, tags: Mapping[str, str] | None = None) -> None:
        """Add ``value`` to a counter."""

    @abstractmethod
    def observe(self, name: str, value: float, tags: Mapping[str, str] | None = None) -> None:
        """Record one sample of a distribution (e.g. a duration in ms)."""


class NullMetricsSink(MetricsSink):

    def increment(self, name: str, value: int = 1, tags: Mapping[str, str] | None = None) -> None:
        pass

    def observe(self, name: str, value: float, tags: Mapping[str, str] | None = None) -> None:
        pass
