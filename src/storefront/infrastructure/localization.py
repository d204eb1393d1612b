"""Message catalogue: renders symbolic error keys as English text."""

from __future__ import annotations

import logging
from typing import Any

from storefront.application.ports import Localizer
from storefront.domain.messages import (
    AddressMessages,
    CartMessages,
    CategoryMessages,
    IdentityMessages,
    OrderMessages,
    ProductMessages,
    QueryMessages,
)

logger = logging.getLogger(__name__)

ENGLISH: dict[str, str] = {
    # Cart
    CartMessages.CART_NOT_FOUND: "Cart not found.",
    CartMessages.CART_ITEM_NOT_FOUND: "This product is not in the cart.",
    CartMessages.PRODUCT_NOT_FOUND: "Product not found.",
    CartMessages.PRODUCT_NOT_ACTIVE: "This product is not available for sale.",
    CartMessages.INSUFFICIENT_STOCK: "Not enough stock for the requested quantity.",
    CartMessages.MAX_ITEMS_EXCEEDED: "A cart can hold at most {0} different products.",
    CartMessages.MAX_QUANTITY_EXCEEDED: "At most {0} units of a product can be in the cart.",
    CartMessages.MAX_TOTAL_AMOUNT_EXCEEDED: "The cart total cannot exceed {0}.",
    CartMessages.QUANTITY_MUST_BE_POSITIVE: "Quantity must be greater than zero.",
    CartMessages.PRODUCT_ID_REQUIRED: "A product id is required.",
    # Order
    OrderMessages.NOT_FOUND: "Order not found.",
    OrderMessages.PRODUCT_NOT_FOUND: "Product {0} not found.",
    OrderMessages.PRODUCT_NOT_ACTIVE: "Product {0} is not available for sale.",
    OrderMessages.INSUFFICIENT_STOCK: "Not enough stock for {0}.",
    OrderMessages.QUANTITY_MUST_BE_POSITIVE: "Quantity must be greater than zero.",
    OrderMessages.EMPTY_ORDER: "An order needs at least one item.",
    OrderMessages.CANNOT_BE_MODIFIED: "The order can no longer be modified.",
    OrderMessages.CANNOT_BE_CANCELLED: "An order in status {0} cannot be cancelled.",
    OrderMessages.INVALID_STATUS_TRANSITION: "Cannot move an order from {0} to {1}.",
    OrderMessages.STATUS_INVALID: "Unknown order status '{0}'.",
    OrderMessages.SHIPPING_ADDRESS_REQUIRED: "A shipping address is required.",
    OrderMessages.SHIPPING_ADDRESS_NOT_FOUND: "Shipping address not found.",
    OrderMessages.BILLING_ADDRESS_REQUIRED: "A billing address is required.",
    OrderMessages.BILLING_ADDRESS_NOT_FOUND: "Billing address not found.",
    OrderMessages.ADDRESS_AMBIGUOUS: "Give either an address or an address id for {0}, not both.",
    # Product / stock
    ProductMessages.NOT_FOUND: "Product not found.",
    ProductMessages.NAME_REQUIRED: "Product name is required.",
    ProductMessages.NAME_LENGTH: "Product name must be between {0} and {1} characters.",
    ProductMessages.DESCRIPTION_TOO_LONG: "Description cannot be longer than {0} characters.",
    ProductMessages.PRICE_MUST_BE_POSITIVE: "Price must be greater than zero.",
    ProductMessages.PRICE_PRECISION: "Price cannot have more than two decimal places.",
    ProductMessages.CATEGORY_NOT_FOUND: "Category not found.",
    ProductMessages.STOCK_NOT_FOUND: "No stock record for this product.",
    ProductMessages.STOCK_QUANTITY_NEGATIVE: "Stock quantity cannot be negative.",
    ProductMessages.STOCK_QUANTITY_MUST_BE_POSITIVE: "Stock quantity must be greater than zero.",
    ProductMessages.INSUFFICIENT_STOCK: "Insufficient stock (need {0}, have {1}).",
    ProductMessages.IN_USE: "The product is in a cart or an order and cannot be deleted.",
    # Category
    CategoryMessages.NOT_FOUND: "Category not found.",
    CategoryMessages.NAME_REQUIRED: "Category name is required.",
    CategoryMessages.NAME_LENGTH: "Category name must be between {0} and {1} characters.",
    CategoryMessages.NAME_EXISTS: "A category named '{0}' already exists.",
    CategoryMessages.HAS_PRODUCTS: "A category with products cannot be deleted.",
    # Address
    AddressMessages.NOT_FOUND: "Address not found.",
    AddressMessages.FIELD_REQUIRED: "Address {0} is required.",
    AddressMessages.FIELD_TOO_LONG: "Address {0} cannot be longer than {1} characters.",
    AddressMessages.LABEL_LENGTH: "Address label must be between {0} and {1} characters.",
    AddressMessages.DEFAULT_CANNOT_BE_DELETED: "The default address cannot be deleted.",
    # Querying
    QueryMessages.PAGE_MUST_BE_POSITIVE: "Page must be a positive number.",
    QueryMessages.PAGE_SIZE_MUST_BE_POSITIVE: "Page size must be a positive number.",
    QueryMessages.INVALID_SORT_KEY: "Cannot sort or filter by '{0}'.",
    QueryMessages.INVALID_SORT_DIRECTION: "Sort direction '{0}' must be 'asc' or 'desc'.",
    # Identity
    IdentityMessages.USER_ID_REQUIRED: "A valid user id is required.",
}

CATALOGUES: dict[str, dict[str, str]] = {"en": ENGLISH}


class CatalogLocalizer(Localizer):
    """Looks keys up in one catalogue; unknown keys render as themselves."""

    def __init__(self, locale: str = "en") -> None:
        if locale not in CATALOGUES:
            logger.warning("No message catalogue for locale %r, using English", locale)
        self._messages = CATALOGUES.get(locale, ENGLISH)

    def translate(self, key: str, params: tuple[Any, ...] = ()) -> str:
        template = self._messages.get(key)
        if template is None:
            return key
        try:
            return template.format(*params)
        except IndexError:
            return template
