"""Application service: Set Default User Address use case.

Each user has at most one default address at any time.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from storefront.application.contracts import Command, addresses_key
from storefront.application.dto import UserAddressDTO, user_address_to_dto
from storefront.application.identity import parse_user_id
from storefront.application.result import Result
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.messages import AddressMessages
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class SetDefaultUserAddress(Command):
    user_id: str | None
    address_id: UUID

    def cache_keys(self):
        return (addresses_key(self.user_id),)


class SetDefaultUserAddressHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: SetDefaultUserAddress) -> Result[UserAddressDTO]:
        user_id = parse_user_id(command.user_id)
        user_address = await self._uow.addresses.get_by_id(command.address_id)
        # Another user's address is reported exactly like a missing one.
        if user_address is None or not user_address.is_usable_by(user_id):
            raise EntityNotFoundError(
                f"Address '{command.address_id}' not found", key=AddressMessages.NOT_FOUND
            )

        await self._uow.addresses.set_default_address(user_id, user_address.id)
        user_address.set_as_default()
        return Result.success(user_address_to_dto(user_address))
