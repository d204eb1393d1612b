"""UserAddress - a stored, labelled address belonging to one user."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable
from uuid import UUID, uuid4

from storefront.domain.exceptions import ValidationError
from storefront.domain.messages import AddressMessages
from storefront.domain.model.value_objects import Address

LABEL_MIN_LENGTH = 2
LABEL_MAX_LENGTH = 50


@dataclass
class UserAddress:

    id: UUID
    user_id: UUID
    label: str
    address: Address
    is_default: bool = False
    is_active: bool = True

    @staticmethod
    def create(
        user_id: UUID, label: str, address: Address, is_default: bool = False
    ) -> UserAddress:
        return UserAddress(
            id=uuid4(),
            user_id=user_id,
            label=_validated_label(label),
            address=address,
            is_default=is_default,
        )

    def update(self, label: str, address: Address) -> None:
        self.label = _validated_label(label)
        self.address = address

    def set_as_default(self) -> None:
        self.is_default = True

    def unset_as_default(self) -> None:
        self.is_default = False

    def activate(self) -> None:
        self.is_active = True

    def deactivate(self) -> None:
        self.is_active = False

    def is_usable_by(self, user_id: UUID) -> bool:
        """True when the address belongs to ``user_id`` and is not archived."""
        return self.user_id == user_id and self.is_active


def _validated_label(label: str) -> str:
    label = (label or "").strip()
    if not LABEL_MIN_LENGTH <= len(label) <= LABEL_MAX_LENGTH:
        raise ValidationError(
            f"Label must be between {LABEL_MIN_LENGTH} and {LABEL_MAX_LENGTH} characters",
            key=AddressMessages.LABEL_LENGTH,
            params=(LABEL_MIN_LENGTH, LABEL_MAX_LENGTH),
        )
    return label


USER_ADDRESS_FIELDS: dict[str, Callable[[UserAddress], Any]] = {
    "id": lambda a: a.id,
    "user_id": lambda a: a.user_id,
    "label": lambda a: a.label,
    "is_default": lambda a: a.is_default,
    "is_active": lambda a: a.is_active,
}
