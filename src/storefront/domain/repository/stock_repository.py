"""Abstract repository for ProductStock.

Stock is the hot, contended resource. The reservation pair below must be
implemented as single atomic statements, never as read-compare-write.
"""

from __future__ import annotations

from abc import abstractmethod
from uuid import UUID

from storefront.domain.model.product import ProductStock
from storefront.domain.repository.base import Repository


class StockRepository(Repository[ProductStock]):

    @abstractmethod
    async def get_by_product_id(self, product_id: UUID) -> ProductStock | None:
        """Return the stock record for a product, or None."""

    @abstractmethod
    async def reserve_stock(self, product_id: UUID, quantity: int) -> None:
        """Atomically subtract ``quantity`` if at least that much is on hand.

        Raises ``InsufficientStockError`` (nothing changed) when it is not,
        or ``EntityNotFoundError`` when the product has no stock record.
        """

    @abstractmethod
    async def release_stock(self, product_id: UUID, quantity: int) -> None:
        """Add ``quantity`` back. Never fails on bounds."""

    @abstractmethod
    async def set_quantity(self, product_id: UUID, quantity: int) -> None:
        """Overwrite the on-hand quantity (stock-take / manual correction)."""
