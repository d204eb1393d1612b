"""Application service: Update User Address use case.

Changes the label and the address itself. Orders already placed keep the
address they were shipped to.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from storefront.application.contracts import Command, addresses_key
from storefront.application.dto import AddressInput, UserAddressDTO, user_address_to_dto
from storefront.application.identity import parse_user_id
from storefront.application.result import Result
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.messages import AddressMessages
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class UpdateUserAddress(Command):
    user_id: str | None
    address_id: UUID
    label: str
    address: AddressInput

    def cache_keys(self):
        return (addresses_key(self.user_id),)


class UpdateUserAddressHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: UpdateUserAddress) -> Result[UserAddressDTO]:
        user_id = parse_user_id(command.user_id)
        user_address = await self._uow.addresses.get_by_id(command.address_id)
        if user_address is None or not user_address.is_usable_by(user_id):
            raise EntityNotFoundError(
                f"Address '{command.address_id}' not found", key=AddressMessages.NOT_FOUND
            )

        user_address.update(command.label, command.address.to_address())
        await self._uow.addresses.update(user_address)
        return Result.success(user_address_to_dto(user_address))
