"""Abstract repository for the Order aggregate.

``include=("items",)`` loads order lines; ``update`` only ever persists the
status, timestamps and version (lines are write-once).
"""

from __future__ import annotations

from abc import abstractmethod
from uuid import UUID

from storefront.domain.model.order import Order
from storefront.domain.repository.base import Repository


class OrderRepository(Repository[Order]):

    @abstractmethod
    async def contains_product(self, product_id: UUID) -> bool:
        """True when any order has a line for ``product_id``."""
