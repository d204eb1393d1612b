"""Symbolic error keys.

The core never produces user-facing prose. Handlers return these keys
(plus format params) and the presentation layer renders them through a
localizer.
"""


class CartMessages:
    CART_NOT_FOUND = "Cart:NotFound"
    CART_ITEM_NOT_FOUND = "Cart:ItemNotFound"
    PRODUCT_NOT_FOUND = "Product:NotFound"
    PRODUCT_NOT_ACTIVE = "Product:NotActive"
    INSUFFICIENT_STOCK = "Cart:InsufficientStock"
    MAX_ITEMS_EXCEEDED = "Cart:MaxItemsExceeded"
    MAX_QUANTITY_EXCEEDED = "Cart:MaxQuantityExceeded"
    MAX_TOTAL_AMOUNT_EXCEEDED = "Cart:MaxTotalAmountExceeded"
    QUANTITY_MUST_BE_POSITIVE = "Cart:Validation:QuantityMustBePositive"
    PRODUCT_ID_REQUIRED = "Cart:Validation:ProductIdRequired"


class OrderMessages:
    NOT_FOUND = "Order:NotFound"
    PRODUCT_NOT_FOUND = "Order:ProductNotFound"
    PRODUCT_NOT_ACTIVE = "Order:ProductNotActive"
    INSUFFICIENT_STOCK = "Order:InsufficientStock"
    QUANTITY_MUST_BE_POSITIVE = "Order:QuantityMustBeGreaterThanZero"
    EMPTY_ORDER = "Order:EmptyOrder"
    CANNOT_BE_MODIFIED = "Order:CannotBeModified"
    CANNOT_BE_CANCELLED = "Order:CannotBeCancelled"
    INVALID_STATUS_TRANSITION = "Order:InvalidStatusTransition"
    STATUS_INVALID = "Order:OrderStatusInvalid"
    SHIPPING_ADDRESS_REQUIRED = "Order:ShippingAddressRequired"
    SHIPPING_ADDRESS_NOT_FOUND = "Order:ShippingAddressNotFound"
    BILLING_ADDRESS_REQUIRED = "Order:BillingAddressRequired"
    BILLING_ADDRESS_NOT_FOUND = "Order:BillingAddressNotFound"
    ADDRESS_AMBIGUOUS = "Order:AddressAmbiguous"


class ProductMessages:
    NOT_FOUND = "Product:NotFound"
    NAME_REQUIRED = "Product:NameRequired"
    NAME_LENGTH = "Product:NameLength"
    DESCRIPTION_TOO_LONG = "Product:DescriptionTooLong"
    PRICE_MUST_BE_POSITIVE = "Product:PriceMustBePositive"
    PRICE_PRECISION = "Product:PricePrecision"
    CATEGORY_NOT_FOUND = "Product:CategoryNotFound"
    STOCK_NOT_FOUND = "Stock:NotFound"
    STOCK_QUANTITY_NEGATIVE = "Stock:QuantityCannotBeNegative"
    STOCK_QUANTITY_MUST_BE_POSITIVE = "Stock:QuantityMustBePositive"
    INSUFFICIENT_STOCK = "Stock:Insufficient"
    IN_USE = "Product:InUse"


class CategoryMessages:
    NOT_FOUND = "Category:NotFound"
    NAME_REQUIRED = "Category:NameRequired"
    NAME_LENGTH = "Category:NameLength"
    NAME_EXISTS = "Category:NameExists"
    HAS_PRODUCTS = "Category:CannotDeleteWithProducts"


class AddressMessages:
    NOT_FOUND = "Address:NotFound"
    FIELD_REQUIRED = "Address:FieldRequired"
    FIELD_TOO_LONG = "Address:FieldTooLong"
    LABEL_LENGTH = "Address:LabelLength"
    DEFAULT_CANNOT_BE_DELETED = "Address:DefaultCannotBeDeleted"


class QueryMessages:
    PAGE_MUST_BE_POSITIVE = "Paging:PageMustBePositive"
    PAGE_SIZE_MUST_BE_POSITIVE = "Paging:PageSizeMustBePositive"
    INVALID_SORT_KEY = "Query:InvalidSortKey"
    INVALID_SORT_DIRECTION = "Query:InvalidSortDirection"


class IdentityMessages:
    USER_ID_REQUIRED = "User:IdRequired"
