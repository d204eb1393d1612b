"""Integration tests for the PlaceOrder use case (checkout).

Uses in-memory fake repositories; every request runs through the Mediator
so a failed placement is rolled back exactly as in production.
"""

import asyncio
from uuid import uuid4

from storefront.application.addresses.add_user_address import AddUserAddress
from storefront.application.carts.add_to_cart import AddToCart
from storefront.application.carts.get_cart import GetCart
from storefront.application.dto import AddressInput, OrderItemSpec
from storefront.application.orders.get_order import GetOrderById
from storefront.application.orders.place_order import PlaceOrder
from storefront.application.result import ResultStatus
from storefront.domain.messages import OrderMessages
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.value_objects import Address, Money
from storefront.infrastructure.bootstrap import build_mediator
from tests.fakes import FakeUnitOfWork, RecordingCache, seed_category, seed_product

USER = str(uuid4())
HOME = AddressInput("1 Main St", "Springfield", "12345", "US")
OFFICE = AddressInput("9 Market Rd", "Shelbyville", "54321", "US")


def _setup():
    uow = FakeUnitOfWork()
    cache = RecordingCache()
    mediator = build_mediator(lambda: uow, cache=cache)
    tools = seed_category(uow)
    widget = seed_product(uow, tools, name="Widget", price="15.00", stock=10)
    gadget = seed_product(uow, tools, name="Gadget", price="25.00", stock=5)
    return mediator, uow, cache, widget, gadget


def _send(mediator, request):
    return asyncio.run(mediator.send(request))


def _place(mediator, *lines, **kwargs):
    kwargs.setdefault("shipping_address", HOME)
    items = tuple(OrderItemSpec(product_id, qty) for product_id, qty in lines)
    return _send(mediator, PlaceOrder(USER, items, **kwargs))


class TestPlaceOrderHappyPath:

    def test_creates_pending_order_with_snapshot_prices(self):
        mediator, uow, _, widget, gadget = _setup()
        result = _place(mediator, (widget.id, 3), (gadget.id, 2))

        assert result.is_success
        order = _send(mediator, GetOrderById(result.value)).value
        assert order.status == OrderStatus.PENDING.value
        assert order.total == "$95.00"
        assert [i.unit_price for i in order.items] == ["$15.00", "$25.00"]

    def test_reserves_stock(self):
        mediator, uow, _, widget, gadget = _setup()
        _place(mediator, (widget.id, 3), (gadget.id, 5))
        assert uow.stock.quantity_of(widget.id) == 7
        assert uow.stock.quantity_of(gadget.id) == 0

    def test_price_change_does_not_touch_placed_order(self):
        mediator, uow, _, widget, _ = _setup()
        order_id = _place(mediator, (widget.id, 1)).value

        stored = uow.products.all()[0]
        stored.update_price(Money.of("99.99"))
        uow.products.seed(stored)

        assert _send(mediator, GetOrderById(order_id)).value.total == "$15.00"

    def test_billing_defaults_to_shipping(self):
        mediator, uow, _, widget, _ = _setup()
        order_id = _place(mediator, (widget.id, 1)).value
        order = uow.orders.all()[0]
        assert order.id == order_id
        assert order.billing_address == order.shipping_address == HOME.to_address()

    def test_separate_billing(self):
        mediator, uow, _, widget, _ = _setup()
        _place(mediator, (widget.id, 1), billing_address=OFFICE, use_same_for_billing=False)
        order = uow.orders.all()[0]
        assert order.billing_address == Address("9 Market Rd", "Shelbyville", "54321", "US")

    def test_invalidates_caches_after_commit(self):
        mediator, _, cache, widget, _ = _setup()
        _place(mediator, (widget.id, 1))
        assert cache.removed_keys == [f"cart:{USER}"]
        assert set(cache.removed_patterns) == {"orders:*", "products:*", "stock:*"}


class TestPlaceOrderFromCart:

    def test_cart_lines_are_ordered_and_cart_cleared(self):
        mediator, uow, _, widget, gadget = _setup()
        _send(mediator, AddToCart(USER, widget.id, 2))
        _send(mediator, AddToCart(USER, gadget.id, 1))

        result = _place(mediator)

        assert result.is_success
        assert uow.stock.quantity_of(widget.id) == 8
        assert uow.stock.quantity_of(gadget.id) == 4
        assert _send(mediator, GetCart(USER)).value.items == []

    def test_explicit_items_leave_cart_alone(self):
        mediator, _, _, widget, gadget = _setup()
        _send(mediator, AddToCart(USER, widget.id, 2))
        _place(mediator, (gadget.id, 1))
        assert len(_send(mediator, GetCart(USER)).value.items) == 1

    def test_no_items_and_empty_cart(self):
        mediator, _, _, _, _ = _setup()
        result = _place(mediator)
        assert result.status is ResultStatus.INVALID
        assert result.keys == [OrderMessages.EMPTY_ORDER]


class TestPlaceOrderFailures:

    def test_insufficient_stock_reserves_nothing(self):
        mediator, uow, cache, _, _ = _setup()
        scarce = seed_product(uow, seed_category(uow, "Rare"), name="Scarce", stock=1)

        result = _place(mediator, (scarce.id, 2))

        assert result.status is ResultStatus.ERROR
        assert result.keys == [OrderMessages.INSUFFICIENT_STOCK]
        assert uow.stock.quantity_of(scarce.id) == 1
        assert uow.orders.all() == []
        assert cache.removed_patterns == []

    def test_one_short_line_fails_the_whole_order(self):
        mediator, uow, _, widget, gadget = _setup()
        result = _place(mediator, (widget.id, 4), (gadget.id, 6))

        assert result.keys == [OrderMessages.INSUFFICIENT_STOCK]
        assert uow.stock.quantity_of(widget.id) == 10
        assert uow.stock.quantity_of(gadget.id) == 5

    def test_unknown_product(self):
        mediator, _, _, widget, _ = _setup()
        missing = uuid4()
        result = _place(mediator, (widget.id, 1), (missing, 1))
        assert result.status is ResultStatus.NOT_FOUND
        assert result.errors[0].key == OrderMessages.PRODUCT_NOT_FOUND
        assert result.errors[0].params == (str(missing),)

    def test_inactive_product(self):
        mediator, uow, _, _, _ = _setup()
        retired = seed_product(uow, seed_category(uow, "Old"), name="Retired", is_active=False)
        result = _place(mediator, (retired.id, 1))
        assert result.keys == [OrderMessages.PRODUCT_NOT_ACTIVE]

    def test_non_positive_quantity_is_invalid(self):
        mediator, _, _, widget, _ = _setup()
        result = _place(mediator, (widget.id, 0))
        assert result.status is ResultStatus.INVALID
        assert result.field_errors[0].field == "items[0].quantity"

    def test_requires_user(self):
        mediator, _, _, widget, _ = _setup()
        result = _send(mediator, PlaceOrder(None, (OrderItemSpec(widget.id, 1),), HOME))
        assert result.status is ResultStatus.UNAUTHORIZED


class TestAddressResolution:

    def test_falls_back_to_default_address(self):
        mediator, uow, _, widget, _ = _setup()
        _send(mediator, AddUserAddress(USER, "Home", HOME))

        result = _place(mediator, (widget.id, 1), shipping_address=None)

        assert result.is_success
        assert uow.orders.all()[0].shipping_address == HOME.to_address()

    def test_stored_address_by_id(self):
        mediator, uow, _, widget, _ = _setup()
        _send(mediator, AddUserAddress(USER, "Home", HOME))
        office = _send(mediator, AddUserAddress(USER, "Office", OFFICE)).value

        _place(mediator, (widget.id, 1), shipping_address=None, shipping_address_id=office.id)
        assert uow.orders.all()[0].shipping_address == OFFICE.to_address()

    def test_someone_elses_address_is_not_found(self):
        mediator, _, _, widget, _ = _setup()
        other = _send(mediator, AddUserAddress(str(uuid4()), "Home", HOME)).value

        result = _place(mediator, (widget.id, 1), shipping_address=None, shipping_address_id=other.id)
        assert result.status is ResultStatus.NOT_FOUND
        assert result.keys == [OrderMessages.SHIPPING_ADDRESS_NOT_FOUND]

    def test_no_address_at_all(self):
        mediator, _, _, widget, _ = _setup()
        result = _place(mediator, (widget.id, 1), shipping_address=None)
        assert result.status is ResultStatus.INVALID
        assert result.keys == [OrderMessages.SHIPPING_ADDRESS_REQUIRED]

    def test_inline_and_stored_is_ambiguous(self):
        mediator, _, _, widget, _ = _setup()
        result = _place(mediator, (widget.id, 1), shipping_address_id=uuid4())
        assert result.keys == [OrderMessages.ADDRESS_AMBIGUOUS]

    def test_billing_with_same_flag_is_ambiguous(self):
        mediator, _, _, widget, _ = _setup()
        result = _place(mediator, (widget.id, 1), billing_address=OFFICE)
        assert result.status is ResultStatus.ERROR
        assert result.keys == [OrderMessages.ADDRESS_AMBIGUOUS]

    def test_invalid_inline_address(self):
        mediator, _, _, widget, _ = _setup()
        bad = AddressInput("1 Main St", "", "12345", "US")
        result = _place(mediator, (widget.id, 1), shipping_address=bad)
        assert result.status is ResultStatus.INVALID
        assert result.field_errors[0].field == "city"
