"""Abstract repository for the Cart aggregate."""

from __future__ import annotations

from abc import abstractmethod
from uuid import UUID

from storefront.domain.model.cart import Cart
from storefront.domain.repository.base import Repository


class CartRepository(Repository[Cart]):
    """At most one cart exists per user.

    ``update`` compares the cart's ``version`` with the stored one and raises
    ``ConcurrencyConflictError`` on mismatch.
    """

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> Cart | None:
        """Return the user's cart header (items not loaded), or None."""

    @abstractmethod
    async def get_by_user_id_with_items(self, user_id: UUID) -> Cart | None:
        """Return the user's cart with every line item, or None."""

    @abstractmethod
    async def contains_product(self, product_id: UUID) -> bool:
        """True when any cart holds a line for ``product_id``."""
