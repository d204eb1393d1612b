"""Unit tests for the Cart aggregate."""

from decimal import Decimal
from uuid import uuid4

import pytest

from storefront.domain.exceptions import (
    BusinessRuleViolation,
    CartItemNotFoundError,
    ValidationError,
)
from storefront.domain.messages import CartMessages
from storefront.domain.model.cart import MAX_ITEMS_IN_CART, Cart
from storefront.domain.model.value_objects import Money


def _cart() -> Cart:
    return Cart.create(uuid4())


class TestAddItem:

    def test_new_line_snapshots_price(self):
        cart = _cart()
        product_id = uuid4()
        cart.add_item(product_id, Money.of("10.00"), 2)
        assert cart.total_items == 1
        assert cart.total_amount == Money.of("20.00")

    def test_same_product_grows_line_and_keeps_first_price(self):
        cart = _cart()
        product_id = uuid4()
        cart.add_item(product_id, Money.of("10.00"), 2)
        cart.add_item(product_id, Money.of("15.00"), 3)

        item = cart.get_item(product_id)
        assert cart.total_items == 1
        assert item.quantity == 5
        assert item.unit_price == Money.of("10.00")
        assert cart.total_amount == Money.of("50.00")

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            _cart().add_item(uuid4(), Money.of("1.00"), 0)

    def test_item_count_ceiling(self):
        cart = _cart()
        for _ in range(MAX_ITEMS_IN_CART):
            cart.add_item(uuid4(), Money.of("1.00"), 1)

        with pytest.raises(BusinessRuleViolation, match="Maximum 50 items") as excinfo:
            cart.add_item(uuid4(), Money.of("1.00"), 1)
        assert excinfo.value.key == CartMessages.MAX_ITEMS_EXCEEDED
        assert cart.total_items == MAX_ITEMS_IN_CART

    def test_line_quantity_ceiling_leaves_cart_unchanged(self):
        cart = _cart()
        product_id = uuid4()
        cart.add_item(product_id, Money.of("1.00"), 998)

        with pytest.raises(BusinessRuleViolation, match="Maximum quantity per item is 999"):
            cart.add_item(product_id, Money.of("1.00"), 2)
        assert cart.get_item(product_id).quantity == 998

    def test_total_amount_ceiling(self):
        cart = _cart()
        cart.add_item(uuid4(), Money(Decimal("999999.00")), 1)
        with pytest.raises(BusinessRuleViolation, match="exceeds maximum") as excinfo:
            cart.add_item(uuid4(), Money.of("1.00"), 1)
        assert excinfo.value.key == CartMessages.MAX_TOTAL_AMOUNT_EXCEEDED


class TestUpdateAndRemove:

    def test_update_quantity_replaces(self):
        cart = _cart()
        product_id = uuid4()
        cart.add_item(product_id, Money.of("4.00"), 5)
        cart.update_item_quantity(product_id, 2)
        assert cart.get_item(product_id).quantity == 2
        assert cart.total_amount == Money.of("8.00")

    def test_update_missing_line(self):
        with pytest.raises(CartItemNotFoundError, match="is not in this cart"):
            _cart().update_item_quantity(uuid4(), 1)

    def test_remove_line(self):
        cart = _cart()
        product_id = uuid4()
        cart.add_item(product_id, Money.of("4.00"), 1)
        cart.remove_item(product_id)
        assert cart.is_empty

    def test_remove_missing_line(self):
        with pytest.raises(CartItemNotFoundError):
            _cart().remove_item(uuid4())

    def test_clear(self):
        cart = _cart()
        cart.add_item(uuid4(), Money.of("4.00"), 1)
        cart.add_item(uuid4(), Money.of("6.00"), 1)
        cart.clear()
        assert cart.is_empty
        assert cart.total_amount == Money.zero()


class TestCartWalkthrough:

    def test_add_grow_then_refused_update(self):
        cart = _cart()
        p1 = uuid4()

        cart.add_item(p1, Money.of("10.00"), 2)
        assert cart.total_amount == Money.of("20.00")
        assert cart.total_items == 1

        cart.add_item(p1, Money.of("10.00"), 3)
        assert cart.get_item(p1).quantity == 5
        assert cart.total_amount == Money.of("50.00")

        with pytest.raises(BusinessRuleViolation) as excinfo:
            cart.update_item_quantity(p1, 1000)
        assert excinfo.value.key == CartMessages.MAX_QUANTITY_EXCEEDED
        assert cart.get_item(p1).quantity == 5
        assert cart.total_amount == Money.of("50.00")
