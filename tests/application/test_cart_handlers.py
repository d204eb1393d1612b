"""Integration tests for the cart use cases.

Requests go through the Mediator against in-memory fake repositories.
"""

import asyncio
from uuid import uuid4

from storefront.application.carts.add_to_cart import AddToCart
from storefront.application.carts.clear_cart import ClearCart
from storefront.application.carts.get_cart import GetCart
from storefront.application.carts.remove_from_cart import RemoveFromCart
from storefront.application.carts.update_cart_item_quantity import UpdateCartItemQuantity
from storefront.application.result import ResultStatus
from storefront.domain.messages import CartMessages
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.bootstrap import build_mediator
from tests.fakes import FakeUnitOfWork, RecordingCache, seed_category, seed_product


def _setup(stock: int = 10, price: str = "10.00"):
    """Mediator over a fake store holding one active product."""
    uow = FakeUnitOfWork()
    cache = RecordingCache()
    mediator = build_mediator(lambda: uow, cache=cache)
    product = seed_product(uow, seed_category(uow), price=price, stock=stock)
    return mediator, uow, cache, product


def _send(mediator, request):
    return asyncio.run(mediator.send(request))


USER = str(uuid4())


class TestAddToCart:

    def test_first_add_creates_cart(self):
        mediator, uow, cache, product = _setup()
        result = _send(mediator, AddToCart(USER, product.id, 2))

        assert result.is_success
        assert result.value.total_items == 1
        assert result.value.total_amount == "$20.00"
        assert len(uow.carts.all()) == 1
        assert cache.removed_keys == [f"cart:{USER}"]

    def test_second_add_grows_line_at_original_price(self):
        mediator, uow, _, product = _setup()
        _send(mediator, AddToCart(USER, product.id, 2))

        stored = uow.products.all()[0]
        stored.update_price(Money.of("99.00"))
        uow.products.seed(stored)

        result = _send(mediator, AddToCart(USER, product.id, 3))
        assert result.value.total_items == 1
        assert result.value.total_amount == "$50.00"

    def test_unknown_product(self):
        mediator, _, _, _ = _setup()
        result = _send(mediator, AddToCart(USER, uuid4(), 1))
        assert result.status is ResultStatus.NOT_FOUND
        assert result.keys == [CartMessages.PRODUCT_NOT_FOUND]

    def test_inactive_product(self):
        mediator, uow, _, _ = _setup()
        inactive = seed_product(uow, seed_category(uow, "Garden"), name="Shovel", is_active=False)
        result = _send(mediator, AddToCart(USER, inactive.id, 1))
        assert result.status is ResultStatus.ERROR
        assert result.keys == [CartMessages.PRODUCT_NOT_ACTIVE]

    def test_insufficient_stock_creates_nothing(self):
        mediator, uow, cache, product = _setup(stock=3)
        result = _send(mediator, AddToCart(USER, product.id, 4))

        assert result.status is ResultStatus.ERROR
        assert result.keys == [CartMessages.INSUFFICIENT_STOCK]
        assert uow.carts.all() == []
        assert cache.removed_keys == []

    def test_stock_is_checked_against_the_grown_line(self):
        mediator, _, _, product = _setup(stock=5)
        _send(mediator, AddToCart(USER, product.id, 3))
        result = _send(mediator, AddToCart(USER, product.id, 3))
        assert result.keys == [CartMessages.INSUFFICIENT_STOCK]

    def test_line_quantity_ceiling_checked_before_stock(self):
        mediator, _, _, product = _setup(stock=5)
        result = _send(mediator, AddToCart(USER, product.id, 1000))
        assert result.keys == [CartMessages.MAX_QUANTITY_EXCEEDED]

    def test_invalid_input(self):
        mediator, _, _, _ = _setup()
        result = _send(mediator, AddToCart(USER, None, 0))
        assert result.status is ResultStatus.INVALID
        assert [e.field for e in result.field_errors] == ["product_id", "quantity"]

    def test_missing_user_is_unauthorized(self):
        mediator, _, _, product = _setup()
        for user in (None, "", "not-a-uuid"):
            result = _send(mediator, AddToCart(user, product.id, 1))
            assert result.status is ResultStatus.UNAUTHORIZED


class TestChangeCart:

    def test_update_quantity(self):
        mediator, _, _, product = _setup()
        _send(mediator, AddToCart(USER, product.id, 2))
        result = _send(mediator, UpdateCartItemQuantity(USER, product.id, 7))
        assert result.value.total_amount == "$70.00"

    def test_update_beyond_stock_leaves_cart(self):
        mediator, _, _, product = _setup(stock=4)
        _send(mediator, AddToCart(USER, product.id, 2))

        result = _send(mediator, UpdateCartItemQuantity(USER, product.id, 5))
        assert result.keys == [CartMessages.INSUFFICIENT_STOCK]
        cart = _send(mediator, GetCart(USER)).value
        assert cart.items[0].quantity == 2

    def test_update_without_cart(self):
        mediator, _, _, product = _setup()
        result = _send(mediator, UpdateCartItemQuantity(USER, product.id, 1))
        assert result.status is ResultStatus.NOT_FOUND
        assert result.keys == [CartMessages.CART_NOT_FOUND]

    def test_update_product_not_in_cart(self):
        mediator, _, _, product = _setup()
        _send(mediator, AddToCart(USER, product.id, 1))
        result = _send(mediator, UpdateCartItemQuantity(USER, uuid4(), 1))
        assert result.keys == [CartMessages.CART_ITEM_NOT_FOUND]

    def test_remove(self):
        mediator, _, _, product = _setup()
        _send(mediator, AddToCart(USER, product.id, 1))
        result = _send(mediator, RemoveFromCart(USER, product.id))
        assert result.value.total_items == 0

    def test_remove_missing_line(self):
        mediator, _, _, product = _setup()
        _send(mediator, AddToCart(USER, product.id, 1))
        result = _send(mediator, RemoveFromCart(USER, uuid4()))
        assert result.status is ResultStatus.NOT_FOUND
        assert result.keys == [CartMessages.CART_ITEM_NOT_FOUND]

    def test_clear_keeps_the_cart(self):
        mediator, uow, _, product = _setup()
        _send(mediator, AddToCart(USER, product.id, 1))
        result = _send(mediator, ClearCart(USER))
        assert result.value.total_items == 0
        assert len(uow.carts.all()) == 1


class TestGetCart:

    def test_user_without_cart_gets_empty_view(self):
        mediator, _, _, _ = _setup()
        cart = _send(mediator, GetCart(USER)).value
        assert cart.id is None
        assert cart.items == []
        assert cart.total_amount == "$0.00"

    def test_lines_are_listed(self):
        mediator, _, _, product = _setup(price="2.50")
        _send(mediator, AddToCart(USER, product.id, 4))
        cart = _send(mediator, GetCart(USER)).value
        assert [(i.product_id, i.quantity, i.line_total) for i in cart.items] == [
            (product.id, 4, "$10.00")
        ]

    def test_get_cart_requires_user(self):
        mediator, _, _, _ = _setup()
        result = _send(mediator, GetCart(None))
        assert result.status is ResultStatus.UNAUTHORIZED
        assert result.keys == []
