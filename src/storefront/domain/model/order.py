"""Order aggregate - the purchase record.

The Order is an aggregate root that owns its line items. Once placed, only
its status (and the timestamps that go with it) ever changes; the lines and
their price snapshots are write-once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable
from uuid import UUID, uuid4

from storefront.domain.exceptions import (
    InvalidStatusTransitionError,
    ValidationError,
)
from storefront.domain.messages import OrderMessages
from storefront.domain.model.value_objects import Address, Money, Quantity


class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


# Forward-only state machine. Anything not listed here is rejected.
ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderItem:
    """Captures the price snapshot of a product at order-creation time."""

    product_id: UUID
    unit_price: Money  # locked at order-creation time
    quantity: Quantity
    id: UUID = field(default_factory=uuid4)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for purchase orders.

    Use ``Order.create()`` for new orders. The plain ``__init__`` lets the
    repository reconstitute persisted orders without re-validating.
    """

    id: UUID
    user_id: UUID
    shipping_address: Address
    billing_address: Address
    items: list[OrderItem] = field(default_factory=list)
    status: OrderStatus = OrderStatus.PENDING
    order_date: datetime = field(default_factory=_utcnow)
    updated_at: datetime | None = None
    version: int = 0

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(user_id: UUID, shipping_address: Address, billing_address: Address) -> Order:
        if shipping_address is None:
            raise ValidationError(
                "Shipping address is required", key=OrderMessages.SHIPPING_ADDRESS_REQUIRED
            )
        if billing_address is None:
            raise ValidationError(
                "Billing address is required", key=OrderMessages.BILLING_ADDRESS_REQUIRED
            )
        return Order(
            id=uuid4(),
            user_id=user_id,
            shipping_address=shipping_address,
            billing_address=billing_address,
        )

    def add_item(self, product_id: UUID, unit_price: Money, quantity: int) -> OrderItem:
        """Append a line while the order is still being assembled."""
        if self.status != OrderStatus.PENDING:
            raise ValidationError(
                f"Cannot add items to an order in {self.status.value} status",
                key=OrderMessages.CANNOT_BE_MODIFIED,
            )
        if quantity <= 0:
            raise ValidationError(
                "Quantity must be greater than zero",
                key=OrderMessages.QUANTITY_MUST_BE_POSITIVE,
            )
        item = OrderItem(product_id=product_id, unit_price=unit_price, quantity=Quantity(quantity))
        self.items.append(item)
        return item

    # --- State transitions ----------------------------------------------------

    def can_transition_to(self, new_status: OrderStatus) -> bool:
        return new_status in ALLOWED_TRANSITIONS[self.status]

    def transition_to(self, new_status: OrderStatus) -> None:
        if not self.can_transition_to(new_status):
            raise InvalidStatusTransitionError(
                f"Cannot move order from {self.status.value} to {new_status.value}",
                key=OrderMessages.INVALID_STATUS_TRANSITION,
                params=(self.status.value, new_status.value),
            )
        self.status = new_status
        self.updated_at = _utcnow()

    def cancel(self) -> None:
        """Transition PENDING|PROCESSING -> CANCELLED.

        Stock release for every line is the caller's job and must happen
        exactly once, in the same unit of work.
        """
        if not self.is_cancellable:
            raise InvalidStatusTransitionError(
                f"Cannot cancel order in {self.status.value} status",
                key=OrderMessages.CANNOT_BE_CANCELLED,
                params=(self.status.value,),
            )
        self.transition_to(OrderStatus.CANCELLED)

    # --- Computed properties --------------------------------------------------

    @property
    def is_cancellable(self) -> bool:
        return self.can_transition_to(OrderStatus.CANCELLED)

    @property
    def total_amount(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result


ORDER_FIELDS: dict[str, Callable[[Order], Any]] = {
    "id": lambda o: o.id,
    "user_id": lambda o: o.user_id,
    "status": lambda o: o.status.value,
    "order_date": lambda o: o.order_date,
    "updated_at": lambda o: o.updated_at,
}
