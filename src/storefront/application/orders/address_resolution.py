"""Shipping and billing address resolution for checkout.

Each side resolves through exactly one path:

* an inline address;
* the id of one of the caller's stored, active addresses;
* otherwise the caller's default address.

Billing may instead reuse the shipping address. Naming two paths for the
same side is ambiguous and refused.
"""

from __future__ import annotations

from uuid import UUID

from storefront.application.dto import AddressInput
from storefront.domain.exceptions import (
    BusinessRuleViolation,
    EntityNotFoundError,
    ValidationError,
)
from storefront.domain.messages import OrderMessages
from storefront.domain.model.value_objects import Address
from storefront.domain.repository.unit_of_work import UnitOfWork


class AddressResolver:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def resolve(
        self,
        user_id: UUID,
        *,
        shipping_address: AddressInput | None,
        shipping_address_id: UUID | None,
        billing_address: AddressInput | None,
        billing_address_id: UUID | None,
        use_same_for_billing: bool,
    ) -> tuple[Address, Address]:
        shipping = await self._resolve_side(
            user_id,
            shipping_address,
            shipping_address_id,
            required_key=OrderMessages.SHIPPING_ADDRESS_REQUIRED,
            not_found_key=OrderMessages.SHIPPING_ADDRESS_NOT_FOUND,
            field="shipping_address",
        )
        if use_same_for_billing:
            if billing_address is not None or billing_address_id is not None:
                raise BusinessRuleViolation(
                    "Billing address given together with 'use same as shipping'",
                    key=OrderMessages.ADDRESS_AMBIGUOUS,
                    params=("billing_address",),
                )
            return shipping, shipping

        billing = await self._resolve_side(
            user_id,
            billing_address,
            billing_address_id,
            required_key=OrderMessages.BILLING_ADDRESS_REQUIRED,
            not_found_key=OrderMessages.BILLING_ADDRESS_NOT_FOUND,
            field="billing_address",
        )
        return shipping, billing

    async def _resolve_side(
        self,
        user_id: UUID,
        inline: AddressInput | None,
        address_id: UUID | None,
        *,
        required_key: str,
        not_found_key: str,
        field: str,
    ) -> Address:
        if inline is not None and address_id is not None:
            raise BusinessRuleViolation(
                f"Both an inline {field} and a stored address id were given",
                key=OrderMessages.ADDRESS_AMBIGUOUS,
                params=(field,),
            )
        if inline is not None:
            return inline.to_address()

        if address_id is not None:
            stored = await self._uow.addresses.get_by_id(address_id)
            if stored is None or not stored.is_usable_by(user_id):
                raise EntityNotFoundError(
                    f"Address '{address_id}' not found for user {user_id}",
                    key=not_found_key,
                )
            return stored.address

        default = await self._uow.addresses.get_default_address(user_id)
        if default is None or not default.is_usable_by(user_id):
            raise ValidationError(
                f"No {field} given and user has no default address",
                key=required_key,
                field=field,
            )
        return default.address
