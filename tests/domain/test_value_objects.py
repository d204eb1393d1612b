"""Unit tests for Money, Quantity and Address."""

from decimal import Decimal

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.messages import AddressMessages
from storefront.domain.model.value_objects import Address, Money, Quantity


class TestMoney:

    def test_of_coerces_to_decimal(self):
        assert Money.of("19.99").amount == Decimal("19.99")
        assert Money.of(5).amount == Decimal("5")

    def test_of_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("abc")

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(1.5)

    def test_addition_and_multiplication(self):
        total = Money.of("10.00") * 3 + Money.of("0.50")
        assert total == Money.of("30.50")

    def test_subtraction_below_zero_rejected(self):
        with pytest.raises(ValidationError, match="negative amount"):
            Money.of("1.00") - Money.of("2.00")

    def test_multiply_by_bool_rejected(self):
        with pytest.raises(TypeError):
            Money.of("1.00") * True

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine USD with EUR"):
            Money.of("1.00") + Money.of("1.00", "EUR")

    def test_str_shows_two_decimals(self):
        assert str(Money.of("7")) == "$7.00"

    def test_rounded_half_up(self):
        assert Money.of("0.125").rounded().amount == Decimal("0.13")

    def test_whole_cents(self):
        assert Money.of("10.50").has_whole_cents()
        assert Money.of("10.500").has_whole_cents()
        assert not Money.of("10.005").has_whole_cents()


class TestQuantity:

    def test_positive_quantity(self):
        assert Quantity(3).value == 3

    @pytest.mark.parametrize("value", [0, -2])
    def test_non_positive_rejected(self, value):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(value)

    def test_non_integer_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(1.5)


class TestAddress:

    def test_strips_whitespace(self):
        address = Address("  1 Main St ", " Springfield", "12345 ", " US ")
        assert address == Address("1 Main St", "Springfield", "12345", "US")

    def test_missing_field_names_the_field(self):
        with pytest.raises(ValidationError, match="city is required") as excinfo:
            Address("1 Main St", "   ", "12345", "US")
        assert excinfo.value.field == "city"
        assert excinfo.value.key == AddressMessages.FIELD_REQUIRED

    def test_too_long_field_rejected(self):
        with pytest.raises(ValidationError, match="zip_code cannot be longer than 20"):
            Address("1 Main St", "Springfield", "9" * 21, "US")

    def test_str(self):
        assert str(Address("1 Main St", "Springfield", "12345", "US")) == (
            "1 Main St, 12345 Springfield, US"
        )
