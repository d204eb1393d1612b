"""SQLAlchemy table mappings.

Rows are plain persistence records. Repositories translate them to and
from the domain dataclasses; no ORM relationship crosses an aggregate
boundary, and child rows (cart items, order items) are loaded and written
explicitly by their aggregate's repository.
"""

from __future__ import annotations

import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class CategoryRow(Base):
    __tablename__ = "categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(String(500), nullable=True)


class ProductRow(Base):
    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, index=True)
    description = Column(String(500), nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    category_id = Column(Uuid, ForeignKey("categories.id"), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("price > 0", name="check_positive_price"),
    )


class ProductStockRow(Base):
    __tablename__ = "product_stocks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    product_id = Column(
        Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    quantity = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="check_non_negative_stock"),
    )


class CartRow(Base):
    __tablename__ = "carts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False, default=0)


class CartItemRow(Base):
    __tablename__ = "cart_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    cart_id = Column(Uuid, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Uuid, ForeignKey("products.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    unit_price = Column(Numeric(12, 2), nullable=False)  # Price at time of adding
    currency = Column(String(3), nullable=False, default="USD")
    quantity = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_product"),
        CheckConstraint("quantity > 0", name="check_positive_cart_quantity"),
        Index("idx_cart_items_cart", "cart_id"),
    )


class OrderRow(Base):
    __tablename__ = "orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    status = Column(String(20), nullable=False, index=True)
    order_date = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False, default=0)

    shipping_street = Column(String(200), nullable=False)
    shipping_city = Column(String(100), nullable=False)
    shipping_zip_code = Column(String(20), nullable=False)
    shipping_country = Column(String(100), nullable=False)

    billing_street = Column(String(200), nullable=False)
    billing_city = Column(String(100), nullable=False)
    billing_zip_code = Column(String(20), nullable=False)
    billing_country = Column(String(100), nullable=False)


class OrderItemRow(Base):
    __tablename__ = "order_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Uuid, ForeignKey("products.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    unit_price = Column(Numeric(12, 2), nullable=False)  # snapshot at order time
    currency = Column(String(3), nullable=False, default="USD")
    quantity = Column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_positive_order_quantity"),
        Index("idx_order_items_order", "order_id"),
    )


class UserAddressRow(Base):
    __tablename__ = "user_addresses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    label = Column(String(50), nullable=False)
    street = Column(String(200), nullable=False)
    city = Column(String(100), nullable=False)
    zip_code = Column(String(20), nullable=False)
    country = Column(String(100), nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
