"""Abstract repositories for the catalog: products and categories.

``ProductRepository.get_by_id`` and ``query`` accept ``include`` paths:
``"stock"`` loads the ProductStock, ``"category"`` the Category.
"""

from __future__ import annotations

from abc import abstractmethod

from storefront.domain.model.product import Category, Product
from storefront.domain.repository.base import Repository


class ProductRepository(Repository[Product]):
    pass


class CategoryRepository(Repository[Category]):

    @abstractmethod
    async def get_by_name(self, name: str) -> Category | None:
        """Return a category by exact (case-insensitive) name, or None."""
