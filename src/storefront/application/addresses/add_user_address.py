"""Application service: Add User Address use case.

A user's first address always becomes their default.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.contracts import Command, addresses_key
from storefront.application.dto import AddressInput, UserAddressDTO, user_address_to_dto
from storefront.application.identity import parse_user_id
from storefront.application.result import Result
from storefront.domain.model.user_address import UserAddress
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class AddUserAddress(Command):
    user_id: str | None
    label: str
    address: AddressInput
    make_default: bool = False

    def cache_keys(self):
        return (addresses_key(self.user_id),)


class AddUserAddressHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: AddUserAddress) -> Result[UserAddressDTO]:
        user_id = parse_user_id(command.user_id)
        user_address = UserAddress.create(
            user_id=user_id,
            label=command.label,
            address=command.address.to_address(),
        )
        has_default = await self._uow.addresses.get_default_address(user_id) is not None

        await self._uow.addresses.add(user_address)
        if command.make_default or not has_default:
            await self._uow.addresses.set_default_address(user_id, user_address.id)
            user_address.set_as_default()

        return Result.success(user_address_to_dto(user_address))
