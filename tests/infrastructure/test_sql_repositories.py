"""Integration tests for the SQLAlchemy repositories.

Each test runs against a fresh SQLite database file under pytest's
``tmp_path``.
"""

import asyncio
from uuid import uuid4

import pytest

from storefront.config import Settings
from storefront.domain.exceptions import (
    ConcurrencyConflictError,
    EntityNotFoundError,
    InsufficientStockError,
    InvalidSortKeyError,
)
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.product import Category, Product
from storefront.domain.model.user_address import UserAddress
from storefront.domain.model.value_objects import Address, Money
from storefront.domain.specification import PageRequest, eq
from storefront.infrastructure.persistence.database import (
    create_engine,
    create_session_factory,
    init_db,
)
from storefront.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork

HOME = Address("1 Main St", "Springfield", "12345", "US")


def _run(tmp_path, scenario):
    """Create a database, run ``scenario(uow_factory)`` and dispose of the engine."""

    async def main():
        settings = Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
        engine = create_engine(settings)
        try:
            await init_db(engine)
            session_factory = create_session_factory(engine)
            return await scenario(lambda: SqlAlchemyUnitOfWork(session_factory))
        finally:
            await engine.dispose()

    return asyncio.run(main())


async def _seed_catalog(uow_factory):
    """Books(Atlas 30.00 x2, Novel 12.00 x0), Toys(Kite 18.00 x7, Yo-yo 3.00 x50)."""
    products = {}
    async with uow_factory() as uow:
        for category_name, items in (
            ("Books", (("Atlas", "30.00", 2), ("Novel", "12.00", 0))),
            ("Toys", (("Kite", "18.00", 7), ("Yo-yo", "3.00", 50))),
        ):
            category = Category.create(category_name)
            await uow.categories.add(category)
            for name, price, stock in items:
                product = Product.create(name, Money.of(price), category.id, initial_stock=stock)
                await uow.products.add(product)
                products[name] = product
        await uow.commit()
    return products


class TestProductQueries:

    def test_sort_by_category_name_desc_with_includes(self, tmp_path):
        async def scenario(uow_factory):
            await _seed_catalog(uow_factory)
            async with uow_factory() as uow:
                return await uow.products.query(
                    order_by="category.name desc, price", include=("category", "stock")
                )

        products = _run(tmp_path, scenario)
        assert [p.name for p in products] == ["Yo-yo", "Kite", "Novel", "Atlas"]
        assert products[0].category.name == "Toys"
        assert products[0].stock.quantity == 50

    def test_relations_only_loaded_when_included(self, tmp_path):
        async def scenario(uow_factory):
            products = await _seed_catalog(uow_factory)
            async with uow_factory() as uow:
                return await uow.products.get_by_id(products["Atlas"].id)

        atlas = _run(tmp_path, scenario)
        assert atlas.price == Money.of("30.00")
        assert atlas.stock is None
        assert atlas.category is None

    def test_filter_on_joined_column_and_page(self, tmp_path):
        async def scenario(uow_factory):
            await _seed_catalog(uow_factory)
            async with uow_factory() as uow:
                return await uow.products.get_paged(
                    eq("category.name", "Toys"), page=PageRequest(1, 1), order_by="name"
                )

        page = _run(tmp_path, scenario)
        assert [p.name for p in page.items] == ["Kite"]
        assert page.total_count == 2
        assert page.has_next

    def test_unknown_sort_key(self, tmp_path):
        async def scenario(uow_factory):
            async with uow_factory() as uow:
                await uow.products.query(order_by="colour")

        with pytest.raises(InvalidSortKeyError):
            _run(tmp_path, scenario)

    def test_count_and_any(self, tmp_path):
        async def scenario(uow_factory):
            await _seed_catalog(uow_factory)
            async with uow_factory() as uow:
                return (
                    await uow.products.count(eq("is_active", True)),
                    await uow.products.any(eq("name", "Drone")),
                    await uow.categories.get_by_name("toys"),
                    await uow.products.long_count(),
                )

        count, any_drone, toys, total = _run(tmp_path, scenario)
        assert count == 4
        assert not any_drone
        assert toys.name == "Toys"
        assert total == 4


class TestCatalogDeletes:

    def test_product_delete_takes_its_stock_row(self, tmp_path):
        async def scenario(uow_factory):
            products = await _seed_catalog(uow_factory)
            novel = products["Novel"]
            async with uow_factory() as uow:
                await uow.products.delete(novel)
                await uow.commit()

            async with uow_factory() as uow:
                return (
                    await uow.products.get_by_id(novel.id),
                    await uow.stock.get_by_product_id(novel.id),
                    await uow.products.count(eq("category.name", "Books")),
                )

        product, stock, remaining = _run(tmp_path, scenario)
        assert product is None
        assert stock is None
        assert remaining == 1

    def test_stock_delete_leaves_the_product(self, tmp_path):
        async def scenario(uow_factory):
            products = await _seed_catalog(uow_factory)
            kite = products["Kite"]
            async with uow_factory() as uow:
                await uow.stock.delete(await uow.stock.get_by_product_id(kite.id))
                await uow.commit()

            async with uow_factory() as uow:
                return (
                    await uow.stock.get_by_product_id(kite.id),
                    await uow.products.get_by_id(kite.id, include=("stock",)),
                )

        stock, product = _run(tmp_path, scenario)
        assert stock is None
        assert product.name == "Kite"
        assert product.stock is None

    def test_category_delete(self, tmp_path):
        async def scenario(uow_factory):
            empty = Category.create("Garden")
            async with uow_factory() as uow:
                await uow.categories.add(empty)
                await uow.commit()

            async with uow_factory() as uow:
                await uow.categories.delete(empty)
                await uow.commit()

            async with uow_factory() as uow:
                return (
                    await uow.categories.get_by_id(empty.id),
                    await uow.categories.get_by_name("Garden"),
                )

        assert _run(tmp_path, scenario) == (None, None)


class TestStockReservation:

    def test_reserve_is_all_or_nothing(self, tmp_path):
        async def scenario(uow_factory):
            products = await _seed_catalog(uow_factory)
            atlas_id = products["Atlas"].id
            async with uow_factory() as uow:
                await uow.stock.reserve_stock(atlas_id, 1)
                with pytest.raises(InsufficientStockError, match="need 2, have 1"):
                    await uow.stock.reserve_stock(atlas_id, 2)
                await uow.commit()
            async with uow_factory() as uow:
                return (await uow.stock.get_by_product_id(atlas_id)).quantity

        assert _run(tmp_path, scenario) == 1

    def test_reserve_unknown_product(self, tmp_path):
        async def scenario(uow_factory):
            async with uow_factory() as uow:
                await uow.stock.reserve_stock(uuid4(), 1)

        with pytest.raises(EntityNotFoundError, match="No stock record"):
            _run(tmp_path, scenario)

    def test_release_and_set_quantity(self, tmp_path):
        async def scenario(uow_factory):
            products = await _seed_catalog(uow_factory)
            kite_id = products["Kite"].id
            async with uow_factory() as uow:
                await uow.stock.release_stock(kite_id, 3)
                after_release = (await uow.stock.get_by_product_id(kite_id)).quantity
                await uow.stock.set_quantity(kite_id, 1)
                after_set = (await uow.stock.get_by_product_id(kite_id)).quantity
                await uow.commit()
            return after_release, after_set

        assert _run(tmp_path, scenario) == (10, 1)

    def test_uncommitted_reservation_is_rolled_back(self, tmp_path):
        async def scenario(uow_factory):
            products = await _seed_catalog(uow_factory)
            kite_id = products["Kite"].id
            async with uow_factory() as uow:
                await uow.stock.reserve_stock(kite_id, 5)
            async with uow_factory() as uow:
                return (await uow.stock.get_by_product_id(kite_id)).quantity

        assert _run(tmp_path, scenario) == 7

    def test_last_unit_goes_to_exactly_one_buyer(self, tmp_path):
        async def scenario(uow_factory):
            products = await _seed_catalog(uow_factory)
            atlas_id = products["Atlas"].id
            async with uow_factory() as uow:
                await uow.stock.set_quantity(atlas_id, 1)
                await uow.commit()

            first_reserved = asyncio.Event()

            async def first_buyer():
                async with uow_factory() as uow:
                    await uow.stock.reserve_stock(atlas_id, 1)
                    first_reserved.set()
                    # Hold the write lock while the second buyer tries.
                    await asyncio.sleep(0.2)
                    await uow.commit()
                return "reserved"

            async def second_buyer():
                await first_reserved.wait()
                async with uow_factory() as uow:
                    await uow.stock.reserve_stock(atlas_id, 1)
                    await uow.commit()
                return "reserved"

            outcomes = await asyncio.gather(
                first_buyer(), second_buyer(), return_exceptions=True
            )
            async with uow_factory() as uow:
                remaining = (await uow.stock.get_by_product_id(atlas_id)).quantity
            return outcomes, remaining

        outcomes, remaining = _run(tmp_path, scenario)
        assert outcomes.count("reserved") == 1
        assert [type(o) for o in outcomes if o != "reserved"] == [InsufficientStockError]
        assert remaining == 0


class TestCartPersistence:

    def test_round_trip_and_version_conflict(self, tmp_path):
        user_id = uuid4()

        async def scenario(uow_factory):
            products = await _seed_catalog(uow_factory)
            async with uow_factory() as uow:
                cart = Cart.create(user_id)
                cart.add_item(products["Kite"].id, Money.of("18.00"), 2)
                cart.add_item(products["Atlas"].id, Money.of("30.00"), 1)
                await uow.carts.add(cart)
                await uow.commit()

            async with uow_factory() as uow:
                stale = await uow.carts.get_by_user_id_with_items(user_id)

            async with uow_factory() as uow:
                fresh = await uow.carts.get_by_user_id_with_items(user_id)
                fresh.update_item_quantity(products["Kite"].id, 3)
                await uow.carts.update(fresh)
                await uow.commit()

            async with uow_factory() as uow:
                stale.clear()
                with pytest.raises(ConcurrencyConflictError):
                    await uow.carts.update(stale)

            async with uow_factory() as uow:
                return (
                    await uow.carts.get_by_user_id_with_items(user_id),
                    await uow.carts.get_by_user_id(user_id),
                )

        with_items, header = _run(tmp_path, scenario)
        assert [i.quantity for i in with_items.items] == [3, 1]
        assert with_items.total_amount == Money.of("84.00")
        assert with_items.version == 1
        assert header.items == []

    def test_delete_removes_cart_and_lines(self, tmp_path):
        user_id = uuid4()

        async def scenario(uow_factory):
            products = await _seed_catalog(uow_factory)
            kite, novel = products["Kite"].id, products["Novel"].id
            async with uow_factory() as uow:
                cart = Cart.create(user_id)
                cart.add_item(kite, Money.of("18.00"), 2)
                await uow.carts.add(cart)
                await uow.commit()

            async with uow_factory() as uow:
                before = (
                    await uow.carts.contains_product(kite),
                    await uow.carts.contains_product(novel),
                )
                await uow.carts.delete(await uow.carts.get_by_user_id(user_id))
                await uow.commit()

            async with uow_factory() as uow:
                return (
                    before,
                    await uow.carts.get_by_user_id_with_items(user_id),
                    await uow.carts.contains_product(kite),
                )

        before, cart, still_referenced = _run(tmp_path, scenario)
        assert before == (True, False)
        assert cart is None
        assert not still_referenced


class TestOrderPersistence:

    def test_round_trip_and_status_update(self, tmp_path):
        async def scenario(uow_factory):
            products = await _seed_catalog(uow_factory)
            order = Order.create(uuid4(), HOME, HOME)
            order.add_item(products["Kite"].id, Money.of("18.00"), 2)
            order.add_item(products["Yo-yo"].id, Money.of("3.00"), 5)
            async with uow_factory() as uow:
                await uow.orders.add(order)
                await uow.commit()

            async with uow_factory() as uow:
                loaded = await uow.orders.get_by_id(order.id, include=("items",))
                loaded.transition_to(OrderStatus.PROCESSING)
                await uow.orders.update(loaded)
                await uow.commit()

            async with uow_factory() as uow:
                return await uow.orders.get_by_id(order.id, include=("items",))

        order = _run(tmp_path, scenario)
        assert order.status is OrderStatus.PROCESSING
        assert order.total_amount == Money.of("51.00")
        assert order.shipping_address == HOME
        assert order.version == 1

    def test_delete_removes_order_and_lines(self, tmp_path):
        async def scenario(uow_factory):
            products = await _seed_catalog(uow_factory)
            kite = products["Kite"].id
            order = Order.create(uuid4(), HOME, HOME)
            order.add_item(kite, Money.of("18.00"), 1)
            async with uow_factory() as uow:
                await uow.orders.add(order)
                await uow.commit()

            async with uow_factory() as uow:
                referenced = await uow.orders.contains_product(kite)
                await uow.orders.delete(order)
                await uow.commit()

            async with uow_factory() as uow:
                return (
                    referenced,
                    await uow.orders.get_by_id(order.id),
                    await uow.orders.contains_product(kite),
                )

        referenced, loaded, still_referenced = _run(tmp_path, scenario)
        assert referenced
        assert loaded is None
        assert not still_referenced


class TestUserAddressPersistence:

    def test_single_default_per_user(self, tmp_path):
        user_id = uuid4()

        async def scenario(uow_factory):
            home = UserAddress.create(user_id, "Home", HOME)
            office = UserAddress.create(
                user_id, "Office", Address("9 Market Rd", "Shelbyville", "54321", "US")
            )
            async with uow_factory() as uow:
                await uow.addresses.add(home)
                await uow.addresses.add(office)
                await uow.addresses.set_default_address(user_id, home.id)
                await uow.addresses.set_default_address(user_id, office.id)
                await uow.commit()

            async with uow_factory() as uow:
                return (
                    await uow.addresses.get_default_address(user_id),
                    await uow.addresses.list_for_user(user_id),
                )

        default, listed = _run(tmp_path, scenario)
        assert default.label == "Office"
        assert [a.label for a in listed] == ["Office", "Home"]

    def test_delete_and_archive(self, tmp_path):
        user_id = uuid4()

        async def scenario(uow_factory):
            home = UserAddress.create(user_id, "Home", HOME)
            cabin = UserAddress.create(user_id, "Cabin", HOME)
            async with uow_factory() as uow:
                await uow.addresses.add(home)
                await uow.addresses.add(cabin)
                await uow.commit()

            async with uow_factory() as uow:
                await uow.addresses.delete(home)
                cabin.deactivate()
                await uow.addresses.update(cabin)
                await uow.commit()

            async with uow_factory() as uow:
                return (
                    await uow.addresses.get_by_id(home.id),
                    await uow.addresses.get_by_id(cabin.id),
                    await uow.addresses.list_for_user(user_id),
                )

        deleted, archived, listed = _run(tmp_path, scenario)
        assert deleted is None
        assert not archived.is_active
        assert listed == []
