"""Data Transfer Objects - plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world. Money is formatted
(e.g. "$15.00"); timestamps are rendered as "YYYY-MM-DD HH:MM UTC".
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order
from storefront.domain.model.product import Category, Product
from storefront.domain.model.user_address import UserAddress
from storefront.domain.model.value_objects import Address, Money

# --- Inputs -------------------------------------------------------------------


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: one explicitly requested order line."""

    product_id: UUID
    quantity: int


@dataclass(frozen=True)
class AddressInput:
    """Input: an inline postal address, validated when converted."""

    street: str
    city: str
    zip_code: str
    country: str

    def to_address(self) -> Address:
        return Address(
            street=self.street,
            city=self.city,
            zip_code=self.zip_code,
            country=self.country,
        )


# --- Outputs ------------------------------------------------------------------


@dataclass(frozen=True)
class CategoryDTO:
    id: UUID
    name: str
    description: str | None


@dataclass(frozen=True)
class ProductDTO:
    id: UUID
    name: str
    description: str | None
    price: str
    category_id: UUID
    category_name: str | None
    is_active: bool
    stock_quantity: int | None
    created_at: str


@dataclass(frozen=True)
class StockInfoDTO:
    product_id: UUID
    quantity: int
    in_stock: bool


@dataclass(frozen=True)
class CartItemDTO:
    product_id: UUID
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class CartDTO:
    id: UUID | None  # None until the user's first add-to-cart
    user_id: UUID
    items: list[CartItemDTO]
    total_items: int
    total_amount: str


@dataclass(frozen=True)
class CartSummaryDTO:
    cart_id: UUID
    total_items: int
    total_amount: str


@dataclass(frozen=True)
class OrderItemDTO:
    product_id: UUID
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    id: UUID
    user_id: UUID
    status: str
    shipping_address: str
    billing_address: str
    items: list[OrderItemDTO]
    total: str
    order_date: str


@dataclass(frozen=True)
class UserAddressDTO:
    id: UUID
    label: str
    address: str
    is_default: bool


# --- Mapping ------------------------------------------------------------------


def format_money(money: Money) -> str:
    return str(money.rounded())


def format_timestamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M UTC")


def category_to_dto(category: Category) -> CategoryDTO:
    return CategoryDTO(id=category.id, name=category.name, description=category.description)


def product_to_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,
        name=product.name,
        description=product.description,
        price=format_money(product.price),
        category_id=product.category_id,
        category_name=product.category.name if product.category else None,
        is_active=product.is_active,
        stock_quantity=product.stock.quantity if product.stock else None,
        created_at=format_timestamp(product.created_at),
    )


def cart_summary(cart: Cart) -> CartSummaryDTO:
    return CartSummaryDTO(
        cart_id=cart.id,
        total_items=cart.total_items,
        total_amount=format_money(cart.total_amount),
    )


def cart_to_dto(cart: Cart) -> CartDTO:
    return CartDTO(
        id=cart.id,
        user_id=cart.user_id,
        items=[
            CartItemDTO(
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=format_money(item.unit_price),
                line_total=format_money(item.line_total),
            )
            for item in cart.items
        ],
        total_items=cart.total_items,
        total_amount=format_money(cart.total_amount),
    )


def empty_cart(user_id: UUID) -> CartDTO:
    return CartDTO(
        id=None,
        user_id=user_id,
        items=[],
        total_items=0,
        total_amount=format_money(Money.zero()),
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,
        user_id=order.user_id,
        status=order.status.value,
        shipping_address=str(order.shipping_address),
        billing_address=str(order.billing_address),
        items=[
            OrderItemDTO(
                product_id=item.product_id,
                quantity=item.quantity.value,
                unit_price=format_money(item.unit_price),
                line_total=format_money(item.line_total),
            )
            for item in order.items
        ],
        total=format_money(order.total_amount),
        order_date=format_timestamp(order.order_date),
    )


def user_address_to_dto(user_address: UserAddress) -> UserAddressDTO:
    return UserAddressDTO(
        id=user_address.id,
        label=user_address.label,
        address=str(user_address.address),
        is_default=user_address.is_default,
    )
