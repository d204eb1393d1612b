"""Unit-of-work port.

One unit of work spans one request. Use it as an async context manager:
anything not explicitly committed is rolled back on exit, including when
the surrounding task is cancelled.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import (
    CategoryRepository,
    ProductRepository,
)
from storefront.domain.repository.stock_repository import StockRepository
from storefront.domain.repository.user_address_repository import UserAddressRepository


class UnitOfWork(ABC):
    carts: CartRepository
    products: ProductRepository
    categories: CategoryRepository
    stock: StockRepository
    orders: OrderRepository
    addresses: UserAddressRepository

    async def __aenter__(self) -> UnitOfWork:
        self._committed = False
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if not self._committed:
            await self.rollback()

    async def commit(self) -> None:
        await self._commit()
        self._committed = True

    @abstractmethod
    async def _commit(self) -> None:
        """Make every change of this unit of work durable."""

    @abstractmethod
    async def rollback(self) -> None:
        """Discard every change of this unit of work."""
