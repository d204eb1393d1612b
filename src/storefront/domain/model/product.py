"""Catalog aggregates: Category, Product and its ProductStock.

Products live independently of carts and orders. They have their own
lifecycle: prices change, products are activated and deactivated. The
stock counter is owned by the product but mutated on its own by the
reservation protocol, never through a product save.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable
from uuid import UUID, uuid4

from storefront.domain.exceptions import InsufficientStockError, ValidationError
from storefront.domain.messages import (
    CategoryMessages,
    ProductMessages,
)
from storefront.domain.model.value_objects import Money

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _validated_name(name: str, min_length: int, max_length: int, keys) -> str:
    if not name or not name.strip():
        raise ValidationError("Name is required", key=keys.NAME_REQUIRED)
    name = name.strip()
    if not min_length <= len(name) <= max_length:
        raise ValidationError(
            f"Name must be between {min_length} and {max_length} characters",
            key=keys.NAME_LENGTH,
            params=(min_length, max_length),
        )
    return name


@dataclass
class Category:
    id: UUID
    name: str
    description: str | None = None

    @staticmethod
    def create(name: str, description: str | None = None) -> Category:
        name = _validated_name(name, 2, NAME_MAX_LENGTH, CategoryMessages)
        return Category(id=uuid4(), name=name, description=description)

    def update(self, name: str, description: str | None = None) -> None:
        self.name = _validated_name(name, 2, NAME_MAX_LENGTH, CategoryMessages)
        self.description = description


@dataclass
class ProductStock:
    """Inventory counter for one product.

    Invariant: ``quantity`` is never negative.
    """

    product_id: UUID
    quantity: int = 0
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValidationError(
                "Stock quantity cannot be negative",
                key=ProductMessages.STOCK_QUANTITY_NEGATIVE,
            )

    def has_at_least(self, quantity: int) -> bool:
        return self.quantity >= quantity

    def reserve(self, quantity: int) -> None:
        """Take ``quantity`` units out of stock, all or nothing."""
        if quantity <= 0:
            raise ValidationError(
                "Reservation quantity must be positive",
                key=ProductMessages.STOCK_QUANTITY_MUST_BE_POSITIVE,
            )
        if quantity > self.quantity:
            raise InsufficientStockError(
                f"Insufficient stock for product {self.product_id} "
                f"(need {quantity}, have {self.quantity})",
                key=ProductMessages.INSUFFICIENT_STOCK,
                params=(quantity, self.quantity),
            )
        self.quantity -= quantity

    def release(self, quantity: int) -> None:
        """Put previously reserved units back. Never fails on bounds."""
        if quantity <= 0:
            raise ValidationError(
                "Release quantity must be positive",
                key=ProductMessages.STOCK_QUANTITY_MUST_BE_POSITIVE,
            )
        self.quantity += quantity

    def update_quantity(self, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError(
                "Stock quantity cannot be negative",
                key=ProductMessages.STOCK_QUANTITY_NEGATIVE,
            )
        self.quantity = quantity


@dataclass
class Product:
    """A sellable item in the catalog.

    ``stock`` and ``category`` are only populated when the repository was
    asked to include them. A product loaded without stock reports no
    available quantity.
    """

    id: UUID
    name: str
    price: Money
    category_id: UUID
    description: str | None = None
    is_active: bool = True
    stock: ProductStock | None = None
    category: Category | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime | None = None

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(
        name: str,
        price: Money,
        category_id: UUID,
        description: str | None = None,
        initial_stock: int = 0,
    ) -> Product:
        product_id = uuid4()
        product = Product(
            id=product_id,
            name=_validated_name(name, NAME_MIN_LENGTH, NAME_MAX_LENGTH, ProductMessages),
            price=_validated_price(price),
            category_id=category_id,
            description=_validated_description(description),
            stock=ProductStock(product_id=product_id, quantity=initial_stock),
        )
        return product

    # --- Mutations ------------------------------------------------------------

    def update(
        self,
        name: str,
        price: Money,
        category_id: UUID,
        description: str | None,
    ) -> None:
        self.name = _validated_name(name, NAME_MIN_LENGTH, NAME_MAX_LENGTH, ProductMessages)
        self.price = _validated_price(price)
        self.category_id = category_id
        self.description = _validated_description(description)
        self.updated_at = _utcnow()

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing carts or orders because they
        capture a price snapshot when the line is added.
        """
        self.price = _validated_price(new_price)
        self.updated_at = _utcnow()

    def activate(self) -> None:
        self.is_active = True
        self.updated_at = _utcnow()

    def deactivate(self) -> None:
        self.is_active = False
        self.updated_at = _utcnow()

    # --- Queries --------------------------------------------------------------

    def has_sufficient_stock(self, requested_quantity: int) -> bool:
        if self.stock is None:
            return False
        return self.stock.has_at_least(requested_quantity)

    def is_orderable(self, requested_quantity: int) -> bool:
        return self.is_active and self.has_sufficient_stock(requested_quantity)


def _validated_price(price: Money) -> Money:
    if price.amount <= 0:
        raise ValidationError(
            "Product price must be greater than zero",
            key=ProductMessages.PRICE_MUST_BE_POSITIVE,
        )
    if not price.has_whole_cents():
        raise ValidationError(
            f"Product price cannot have more than two decimal places, got {price.amount}",
            key=ProductMessages.PRICE_PRECISION,
            field="price",
        )
    return price


def _validated_description(description: str | None) -> str | None:
    if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Description cannot be longer than {DESCRIPTION_MAX_LENGTH} characters",
            key=ProductMessages.DESCRIPTION_TOO_LONG,
            params=(DESCRIPTION_MAX_LENGTH,),
        )
    return description


def _category_name(product: Product) -> str | None:
    return product.category.name if product.category is not None else None


def _stock_quantity(product: Product) -> int | None:
    return product.stock.quantity if product.stock is not None else None


# Keys a caller may filter or sort products by.
PRODUCT_FIELDS: dict[str, Callable[[Product], Any]] = {
    "id": lambda p: p.id,
    "name": lambda p: p.name,
    "description": lambda p: p.description,
    "price": lambda p: p.price.amount,
    "category_id": lambda p: p.category_id,
    "category.name": _category_name,
    "is_active": lambda p: p.is_active,
    "stock.quantity": _stock_quantity,
    "created_at": lambda p: p.created_at,
}

CATEGORY_FIELDS: dict[str, Callable[[Category], Any]] = {
    "id": lambda c: c.id,
    "name": lambda c: c.name,
}

STOCK_FIELDS: dict[str, Callable[[ProductStock], Any]] = {
    "id": lambda s: s.id,
    "product_id": lambda s: s.product_id,
    "quantity": lambda s: s.quantity,
}
