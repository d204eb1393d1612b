"""Cart aggregate - one shopping cart per user.

The Cart owns its line items. Every mutation validates the resulting state
first and only then changes anything, so a refused operation leaves the
cart exactly as it was.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable
from uuid import UUID, uuid4

from storefront.domain.exceptions import (
    BusinessRuleViolation,
    CartItemNotFoundError,
    ValidationError,
)
from storefront.domain.messages import CartMessages
from storefront.domain.model.value_objects import Money

# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_ITEMS_IN_CART = 50
MAX_QUANTITY_PER_ITEM = 999
MAX_TOTAL_AMOUNT = Money(Decimal("999999.99"))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_item_count(item_count: int) -> None:
    if item_count > MAX_ITEMS_IN_CART:
        raise BusinessRuleViolation(
            f"Maximum {MAX_ITEMS_IN_CART} items per cart",
            key=CartMessages.MAX_ITEMS_EXCEEDED,
            params=(MAX_ITEMS_IN_CART,),
        )


def ensure_line_quantity(quantity: int) -> None:
    if quantity <= 0:
        raise ValidationError(
            "Quantity must be greater than zero",
            key=CartMessages.QUANTITY_MUST_BE_POSITIVE,
        )
    if quantity > MAX_QUANTITY_PER_ITEM:
        raise BusinessRuleViolation(
            f"Maximum quantity per item is {MAX_QUANTITY_PER_ITEM}",
            key=CartMessages.MAX_QUANTITY_EXCEEDED,
            params=(MAX_QUANTITY_PER_ITEM,),
        )


def ensure_total_amount(total: Money) -> None:
    if total > MAX_TOTAL_AMOUNT:
        raise BusinessRuleViolation(
            f"Cart total {total} exceeds maximum {MAX_TOTAL_AMOUNT}",
            key=CartMessages.MAX_TOTAL_AMOUNT_EXCEEDED,
            params=(MAX_TOTAL_AMOUNT.amount,),
        )


@dataclass
class CartItem:
    """A line in a cart.

    ``unit_price`` is the product price captured when the line was first
    added; later catalog price changes do not touch it.
    """

    cart_id: UUID
    product_id: UUID
    unit_price: Money
    quantity: int
    id: UUID = field(default_factory=uuid4)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass
class Cart:
    """Aggregate root for a user's cart.

    ``version`` is the optimistic concurrency token; repositories compare
    it on update and bump it on success.
    """

    id: UUID
    user_id: UUID
    items: list[CartItem] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime | None = None
    version: int = 0

    @staticmethod
    def create(user_id: UUID) -> Cart:
        if user_id is None:
            raise ValidationError("User ID cannot be empty")
        return Cart(id=uuid4(), user_id=user_id)

    # --- Computed properties --------------------------------------------------

    @property
    def total_amount(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result

    @property
    def total_items(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def has_item(self, product_id: UUID) -> bool:
        return self.get_item(product_id) is not None

    def get_item(self, product_id: UUID) -> CartItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    # --- Mutations ------------------------------------------------------------

    def add_item(self, product_id: UUID, unit_price: Money, quantity: int) -> CartItem:
        """Add ``quantity`` units of a product.

        An existing line grows by ``quantity`` and keeps its original price
        snapshot; otherwise a new line is appended at ``unit_price``.
        """
        if quantity <= 0:
            raise ValidationError(
                "Quantity must be greater than zero",
                key=CartMessages.QUANTITY_MUST_BE_POSITIVE,
            )

        existing = self.get_item(product_id)
        if existing is not None:
            new_quantity = existing.quantity + quantity
            ensure_line_quantity(new_quantity)
            ensure_total_amount(self.total_amount + existing.unit_price * quantity)
            existing.quantity = new_quantity
            self._touch()
            return existing

        ensure_item_count(len(self.items) + 1)
        ensure_line_quantity(quantity)
        ensure_total_amount(self.total_amount + unit_price * quantity)
        item = CartItem(
            cart_id=self.id,
            product_id=product_id,
            unit_price=unit_price,
            quantity=quantity,
        )
        self.items.append(item)
        self._touch()
        return item

    def remove_item(self, product_id: UUID) -> None:
        item = self._find_item(product_id)
        self.items.remove(item)
        self._touch()

    def update_item_quantity(self, product_id: UUID, quantity: int) -> None:
        """Replace a line's quantity outright (not additive)."""
        item = self._find_item(product_id)
        ensure_line_quantity(quantity)
        ensure_total_amount(
            self.total_amount - item.line_total + item.unit_price * quantity
        )
        item.quantity = quantity
        self._touch()

    def clear(self) -> None:
        if self.items:
            self.items.clear()
            self._touch()

    # --- Internal helpers -----------------------------------------------------

    def _find_item(self, product_id: UUID) -> CartItem:
        item = self.get_item(product_id)
        if item is None:
            raise CartItemNotFoundError(
                f"Product '{product_id}' is not in this cart",
                key=CartMessages.CART_ITEM_NOT_FOUND,
            )
        return item

    def _touch(self) -> None:
        self.updated_at = _utcnow()


CART_FIELDS: dict[str, Callable[[Cart], Any]] = {
    "id": lambda c: c.id,
    "user_id": lambda c: c.user_id,
    "created_at": lambda c: c.created_at,
    "updated_at": lambda c: c.updated_at,
}
