"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from storefront.domain.exceptions import ValidationError
from storefront.domain.messages import AddressMessages, CartMessages

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        result = self.amount - other.amount
        if result < Decimal("0"):
            raise ValidationError("Money subtraction would result in a negative amount")
        return Money(result, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int) or isinstance(factor, bool):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def has_whole_cents(self) -> bool:
        """True when the amount needs no more than two decimal places."""
        try:
            return self.amount == self.amount.quantize(CENTS)
        except InvalidOperation:
            return False

    def rounded(self) -> Money:
        return Money(self.amount.quantize(CENTS, rounding=ROUND_HALF_UP), self.currency)

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = "USD") -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)), currency)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(Decimal("0.00"), currency)


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot order zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}",
                key=CartMessages.QUANTITY_MUST_BE_POSITIVE,
            )
        if self.value <= 0:
            raise ValidationError(
                "Quantity must be positive", key=CartMessages.QUANTITY_MUST_BE_POSITIVE
            )

    def __str__(self) -> str:
        return str(self.value)


# Column widths mirror the persistence schema.
ADDRESS_FIELD_LIMITS = {
    "street": 200,
    "city": 100,
    "zip_code": 20,
    "country": 100,
}


@dataclass(frozen=True)
class Address:
    """Postal address used for shipping and billing.

    Every field is required; surrounding whitespace is stripped before the
    length check so ``Address(" Main St ", ...)`` equals ``Address("Main St", ...)``.
    """

    street: str
    city: str
    zip_code: str
    country: str

    def __post_init__(self) -> None:
        for name, limit in ADDRESS_FIELD_LIMITS.items():
            raw = getattr(self, name)
            value = raw.strip() if isinstance(raw, str) else ""
            if not value:
                raise ValidationError(
                    f"Address {name} is required",
                    key=AddressMessages.FIELD_REQUIRED,
                    params=(name,),
                    field=name,
                )
            if len(value) > limit:
                raise ValidationError(
                    f"Address {name} cannot be longer than {limit} characters",
                    key=AddressMessages.FIELD_TOO_LONG,
                    params=(name, limit),
                    field=name,
                )
            object.__setattr__(self, name, value)

    def __str__(self) -> str:
        return f"{self.street}, {self.zip_code} {self.city}, {self.country}"
