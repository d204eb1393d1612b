"""Shared input checks for catalog commands.

Prices are stored in whole cents, so a finer amount is refused rather than
rounded on the way to the database.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from storefront.application.result import FieldError
from storefront.domain.messages import ProductMessages
from storefront.domain.model.value_objects import Money


def _amount(raw: Decimal | str | int | float) -> Decimal | None:
    try:
        amount = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount


def parse_price(raw: Decimal | str | int | float) -> Money | None:
    """Return the price as Money, or None unless it is a positive whole-cent amount."""
    amount = _amount(raw)
    if amount is None:
        return None
    price = Money(amount)
    return price if price.has_whole_cents() else None


def price_errors(raw: Decimal | str | int | float) -> list[FieldError]:
    amount = _amount(raw)
    if amount is None:
        return [FieldError("price", ProductMessages.PRICE_MUST_BE_POSITIVE)]
    if not Money(amount).has_whole_cents():
        return [FieldError("price", ProductMessages.PRICE_PRECISION)]
    return []
