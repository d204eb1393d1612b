"""Application service: Get User Addresses query."""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.contracts import Query
from storefront.application.dto import UserAddressDTO, user_address_to_dto
from storefront.application.identity import parse_user_id
from storefront.application.result import Result
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class GetUserAddresses(Query):
    user_id: str | None


class GetUserAddressesHandler:
    """Active addresses only, the default one first."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def handle(self, query: GetUserAddresses) -> Result[list[UserAddressDTO]]:
        user_id = parse_user_id(query.user_id)
        addresses = await self._uow.addresses.list_for_user(user_id)
        return Result.success([user_address_to_dto(a) for a in addresses])
