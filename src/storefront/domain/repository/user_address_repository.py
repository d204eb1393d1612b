"""Abstract repository for stored user addresses."""

from __future__ import annotations

from abc import abstractmethod
from uuid import UUID

from storefront.domain.model.user_address import UserAddress
from storefront.domain.repository.base import Repository


class UserAddressRepository(Repository[UserAddress]):

    @abstractmethod
    async def get_default_address(self, user_id: UUID) -> UserAddress | None:
        """Return the user's active default address, or None."""

    @abstractmethod
    async def set_default_address(self, user_id: UUID, address_id: UUID) -> None:
        """Make ``address_id`` the only default address of ``user_id``."""

    @abstractmethod
    async def list_for_user(self, user_id: UUID) -> list[UserAddress]:
        """Every active address of a user, default first."""
