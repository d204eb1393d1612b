"""SQL repository for stored user addresses."""

from __future__ import annotations

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, update

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.messages import AddressMessages
from storefront.domain.model.user_address import UserAddress
from storefront.domain.repository.user_address_repository import UserAddressRepository
from storefront.domain.specification import SortField, eq
from storefront.infrastructure.persistence.base_repository import SqlRepository
from storefront.infrastructure.persistence.mapping import address_columns, address_from
from storefront.infrastructure.persistence.tables import UserAddressRow


class SqlUserAddressRepository(SqlRepository[UserAddress], UserAddressRepository):

    columns = {
        "id": UserAddressRow.id,
        "user_id": UserAddressRow.user_id,
        "label": UserAddressRow.label,
        "is_default": UserAddressRow.is_default,
        "is_active": UserAddressRow.is_active,
    }

    def _from_clause(self) -> Any:
        return UserAddressRow.__table__

    def _entities(self) -> tuple[Any, ...]:
        return (UserAddressRow,)

    async def _hydrate(self, rows: Sequence[Any], include: frozenset[str]) -> list[UserAddress]:
        return [
            UserAddress(
                id=row.id,
                user_id=row.user_id,
                label=row.label,
                address=address_from(row),
                is_default=row.is_default,
                is_active=row.is_active,
            )
            for (row,) in rows
        ]

    async def get_default_address(self, user_id: UUID) -> UserAddress | None:
        found = await self.query(
            eq("user_id", user_id) & eq("is_default", True) & eq("is_active", True)
        )
        return found[0] if found else None

    async def set_default_address(self, user_id: UUID, address_id: UUID) -> None:
        await self._session.execute(
            update(UserAddressRow)
            .where(UserAddressRow.user_id == user_id, UserAddressRow.id != address_id)
            .values(is_default=False)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(
            update(UserAddressRow)
            .where(UserAddressRow.user_id == user_id, UserAddressRow.id == address_id)
            .values(is_default=True)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise EntityNotFoundError(
                f"Address '{address_id}' not found", key=AddressMessages.NOT_FOUND
            )

    async def list_for_user(self, user_id: UUID) -> list[UserAddress]:
        return await self.query(
            eq("user_id", user_id) & eq("is_active", True),
            order_by=(SortField("is_default", descending=True), SortField("label")),
        )

    # --- Writes ---------------------------------------------------------------

    async def add(self, user_address: UserAddress) -> None:
        self._session.add(
            UserAddressRow(
                id=user_address.id,
                user_id=user_address.user_id,
                label=user_address.label,
                is_default=user_address.is_default,
                is_active=user_address.is_active,
                **address_columns("", user_address.address),
            )
        )
        await self._flush()

    async def update(self, user_address: UserAddress) -> None:
        result = await self._session.execute(
            update(UserAddressRow)
            .where(UserAddressRow.id == user_address.id)
            .values(
                label=user_address.label,
                is_default=user_address.is_default,
                is_active=user_address.is_active,
                **address_columns("", user_address.address),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise EntityNotFoundError(
                f"Address '{user_address.id}' not found", key=AddressMessages.NOT_FOUND
            )

    async def delete(self, user_address: UserAddress) -> None:
        await self._session.execute(
            delete(UserAddressRow)
            .where(UserAddressRow.id == user_address.id)
            .execution_options(synchronize_session=False)
        )
