"""Integration tests for stored user addresses."""

import asyncio
from uuid import uuid4

from storefront.application.addresses.add_user_address import AddUserAddress
from storefront.application.addresses.delete_user_address import DeleteUserAddress
from storefront.application.addresses.list_user_addresses import GetUserAddresses
from storefront.application.addresses.set_default_user_address import SetDefaultUserAddress
from storefront.application.addresses.update_user_address import UpdateUserAddress
from storefront.application.dto import AddressInput, OrderItemSpec
from storefront.application.orders.place_order import PlaceOrder
from storefront.application.result import ResultStatus
from storefront.domain.messages import AddressMessages, OrderMessages
from storefront.infrastructure.bootstrap import build_mediator
from tests.fakes import FakeUnitOfWork, RecordingCache, seed_category, seed_product

USER = str(uuid4())
HOME = AddressInput("1 Main St", "Springfield", "12345", "US")
OFFICE = AddressInput("9 Market Rd", "Shelbyville", "54321", "US")


def _setup():
    uow = FakeUnitOfWork()
    cache = RecordingCache()
    return build_mediator(lambda: uow, cache=cache), uow, cache


def _send(mediator, request):
    return asyncio.run(mediator.send(request))


def _defaults(uow):
    return {a.label: a.is_default for a in uow.addresses.all()}


class TestAddUserAddress:

    def test_first_address_becomes_default(self):
        mediator, uow, cache = _setup()
        result = _send(mediator, AddUserAddress(USER, "Home", HOME))

        assert result.value.is_default
        assert result.value.address == "1 Main St, 12345 Springfield, US"
        assert cache.removed_keys == [f"addresses:{USER}"]

    def test_second_address_is_not_default(self):
        mediator, uow, _ = _setup()
        _send(mediator, AddUserAddress(USER, "Home", HOME))
        result = _send(mediator, AddUserAddress(USER, "Office", OFFICE))

        assert not result.value.is_default
        assert _defaults(uow) == {"Home": True, "Office": False}

    def test_make_default_moves_the_flag(self):
        mediator, uow, _ = _setup()
        _send(mediator, AddUserAddress(USER, "Home", HOME))
        _send(mediator, AddUserAddress(USER, "Office", OFFICE, make_default=True))
        assert _defaults(uow) == {"Home": False, "Office": True}

    def test_short_label_is_invalid(self):
        mediator, uow, _ = _setup()
        result = _send(mediator, AddUserAddress(USER, "H", HOME))
        assert result.status is ResultStatus.INVALID
        assert result.keys == [AddressMessages.LABEL_LENGTH]
        assert uow.addresses.all() == []

    def test_requires_user(self):
        mediator, _, _ = _setup()
        assert _send(mediator, AddUserAddress(None, "Home", HOME)).status is (
            ResultStatus.UNAUTHORIZED
        )


class TestSetDefaultUserAddress:

    def test_switch_default(self):
        mediator, uow, _ = _setup()
        _send(mediator, AddUserAddress(USER, "Home", HOME))
        office = _send(mediator, AddUserAddress(USER, "Office", OFFICE)).value

        result = _send(mediator, SetDefaultUserAddress(USER, office.id))

        assert result.value.is_default
        assert _defaults(uow) == {"Home": False, "Office": True}

    def test_other_users_address_is_not_found(self):
        mediator, uow, _ = _setup()
        theirs = _send(mediator, AddUserAddress(str(uuid4()), "Home", HOME)).value

        result = _send(mediator, SetDefaultUserAddress(USER, theirs.id))

        assert result.status is ResultStatus.NOT_FOUND
        assert result.keys == [AddressMessages.NOT_FOUND]
        assert _defaults(uow) == {"Home": True}

    def test_unknown_address(self):
        mediator, _, _ = _setup()
        result = _send(mediator, SetDefaultUserAddress(USER, uuid4()))
        assert result.status is ResultStatus.NOT_FOUND


class TestUpdateUserAddress:

    def test_update_label_and_address(self):
        mediator, uow, cache = _setup()
        home = _send(mediator, AddUserAddress(USER, "Home", HOME)).value

        result = _send(mediator, UpdateUserAddress(USER, home.id, "Old home", OFFICE))

        assert result.value.label == "Old home"
        assert result.value.address == "9 Market Rd, 54321 Shelbyville, US"
        assert result.value.is_default
        assert str(uow.addresses.all()[0].address) == result.value.address
        assert cache.removed_keys == [f"addresses:{USER}", f"addresses:{USER}"]

    def test_short_label_is_invalid(self):
        mediator, uow, _ = _setup()
        home = _send(mediator, AddUserAddress(USER, "Home", HOME)).value
        result = _send(mediator, UpdateUserAddress(USER, home.id, "H", OFFICE))
        assert result.keys == [AddressMessages.LABEL_LENGTH]
        assert uow.addresses.all()[0].label == "Home"

    def test_other_users_address_is_not_found(self):
        mediator, _, _ = _setup()
        theirs = _send(mediator, AddUserAddress(str(uuid4()), "Home", HOME)).value
        result = _send(mediator, UpdateUserAddress(USER, theirs.id, "Mine", OFFICE))
        assert result.status is ResultStatus.NOT_FOUND


class TestDeleteUserAddress:

    def test_delete_archives_the_address(self):
        mediator, uow, _ = _setup()
        _send(mediator, AddUserAddress(USER, "Home", HOME))
        office = _send(mediator, AddUserAddress(USER, "Office", OFFICE)).value

        assert _send(mediator, DeleteUserAddress(USER, office.id)).is_success

        stored = {a.label: a.is_active for a in uow.addresses.all()}
        assert stored == {"Home": True, "Office": False}
        listed = _send(mediator, GetUserAddresses(USER)).value
        assert [a.label for a in listed] == ["Home"]

    def test_default_address_is_kept(self):
        mediator, uow, _ = _setup()
        home = _send(mediator, AddUserAddress(USER, "Home", HOME)).value

        result = _send(mediator, DeleteUserAddress(USER, home.id))

        assert result.status is ResultStatus.ERROR
        assert result.keys == [AddressMessages.DEFAULT_CANNOT_BE_DELETED]
        assert uow.addresses.all()[0].is_active

    def test_deleted_address_cannot_be_deleted_again(self):
        mediator, _, _ = _setup()
        _send(mediator, AddUserAddress(USER, "Home", HOME))
        office = _send(mediator, AddUserAddress(USER, "Office", OFFICE)).value
        _send(mediator, DeleteUserAddress(USER, office.id))

        result = _send(mediator, DeleteUserAddress(USER, office.id))

        assert result.keys == [AddressMessages.NOT_FOUND]

    def test_deleted_address_cannot_ship_an_order(self):
        mediator, uow, _ = _setup()
        widget = seed_product(uow, seed_category(uow))
        _send(mediator, AddUserAddress(USER, "Home", HOME))
        office = _send(mediator, AddUserAddress(USER, "Office", OFFICE)).value
        _send(mediator, DeleteUserAddress(USER, office.id))

        result = _send(
            mediator,
            PlaceOrder(USER, (OrderItemSpec(widget.id, 1),), shipping_address_id=office.id),
        )

        assert result.keys == [OrderMessages.SHIPPING_ADDRESS_NOT_FOUND]

    def test_other_users_address_is_not_found(self):
        mediator, _, _ = _setup()
        theirs = _send(mediator, AddUserAddress(str(uuid4()), "Office", OFFICE)).value
        result = _send(mediator, DeleteUserAddress(USER, theirs.id))
        assert result.status is ResultStatus.NOT_FOUND


class TestGetUserAddresses:

    def test_default_first_then_by_label(self):
        mediator, _, _ = _setup()
        _send(mediator, AddUserAddress(USER, "Office", OFFICE))
        _send(mediator, AddUserAddress(USER, "Cabin", HOME))
        _send(mediator, AddUserAddress(USER, "Beach", HOME))
        _send(mediator, AddUserAddress(str(uuid4()), "Theirs", HOME))

        listed = _send(mediator, GetUserAddresses(USER)).value

        assert [(a.label, a.is_default) for a in listed] == [
            ("Office", True),
            ("Beach", False),
            ("Cabin", False),
        ]

    def test_requires_user(self):
        mediator, _, _ = _setup()
        assert _send(mediator, GetUserAddresses("not-a-uuid")).status is ResultStatus.UNAUTHORIZED
