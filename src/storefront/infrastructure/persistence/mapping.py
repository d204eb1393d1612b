"""Row <-> domain value helpers shared by the SQL repositories."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from storefront.domain.model.value_objects import Address, Money


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_money(amount: Decimal | float | str, currency: str | None) -> Money:
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return Money(amount, currency or "USD")


def address_columns(prefix: str, address: Address) -> dict[str, str]:
    return {
        f"{prefix}street": address.street,
        f"{prefix}city": address.city,
        f"{prefix}zip_code": address.zip_code,
        f"{prefix}country": address.country,
    }


def address_from(row: object, prefix: str = "") -> Address:
    return Address(
        street=getattr(row, f"{prefix}street"),
        city=getattr(row, f"{prefix}city"),
        zip_code=getattr(row, f"{prefix}zip_code"),
        country=getattr(row, f"{prefix}country"),
    )
