"""Application service: Delete User Address use case.

Deleting archives the address rather than removing the row. The default
address cannot be deleted until another one is made the default.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from storefront.application.contracts import Command, addresses_key
from storefront.application.identity import parse_user_id
from storefront.application.result import Result
from storefront.domain.exceptions import BusinessRuleViolation, EntityNotFoundError
from storefront.domain.messages import AddressMessages
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class DeleteUserAddress(Command):
    user_id: str | None
    address_id: UUID

    def cache_keys(self):
        return (addresses_key(self.user_id),)


class DeleteUserAddressHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, command: DeleteUserAddress) -> Result[None]:
        user_id = parse_user_id(command.user_id)
        user_address = await self._uow.addresses.get_by_id(command.address_id)
        if user_address is None or not user_address.is_usable_by(user_id):
            raise EntityNotFoundError(
                f"Address '{command.address_id}' not found", key=AddressMessages.NOT_FOUND
            )
        if user_address.is_default:
            raise BusinessRuleViolation(
                f"Address '{user_address.id}' is the default address",
                key=AddressMessages.DEFAULT_CANNOT_BE_DELETED,
            )

        user_address.deactivate()
        await self._uow.addresses.update(user_address)
        return Result.success()
