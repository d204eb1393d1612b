"""Cache invalidation adapter.

No shared cache is deployed alongside the command-line process, so
evictions are only recorded in the log. A Redis-backed adapter would
implement the same two methods.
"""

from __future__ import annotations

import logging

from storefront.application.ports import CacheInvalidator

logger = logging.getLogger(__name__)


class LoggingCacheInvalidator(CacheInvalidator):

    async def remove_key(self, key: str) -> None:
        logger.debug("Cache invalidated key %s", key)

    async def remove_by_pattern(self, pattern: str) -> None:
        logger.debug("Cache invalidated pattern %s", pattern)
