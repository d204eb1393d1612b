"""CartBusinessRules - the guard checks run before a cart is mutated.

Every check raises the matching domain exception; the pipeline turns it
into a NotFound or Error result. The three cart ceilings delegate to the
Cart aggregate's own limits so both layers agree on the numbers.
"""

from __future__ import annotations

from uuid import UUID

from storefront.domain.exceptions import (
    BusinessRuleViolation,
    EntityNotFoundError,
    InsufficientStockError,
)
from storefront.domain.messages import CartMessages
from storefront.domain.model.cart import (
    Cart,
    ensure_item_count,
    ensure_line_quantity,
    ensure_total_amount,
)
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.unit_of_work import UnitOfWork


class CartBusinessRules:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    # --- Existence ------------------------------------------------------------

    async def check_cart_exists(self, user_id: UUID) -> Cart:
        cart = await self._uow.carts.get_by_user_id_with_items(user_id)
        if cart is None:
            raise EntityNotFoundError(
                f"User {user_id} has no cart", key=CartMessages.CART_NOT_FOUND
            )
        return cart

    async def check_product_exists(self, product_id: UUID) -> Product:
        product = await self._uow.products.get_by_id(product_id, include=("stock",))
        if product is None:
            raise EntityNotFoundError(
                f"Product '{product_id}' not found", key=CartMessages.PRODUCT_NOT_FOUND
            )
        return product

    # --- Product state --------------------------------------------------------

    @staticmethod
    def check_product_is_active(product: Product) -> None:
        if not product.is_active:
            raise BusinessRuleViolation(
                f"Product '{product.name}' is not active",
                key=CartMessages.PRODUCT_NOT_ACTIVE,
            )

    @staticmethod
    def check_sufficient_stock(product: Product, quantity: int) -> None:
        if not product.has_sufficient_stock(quantity):
            raise InsufficientStockError(
                f"Insufficient stock for '{product.name}' (need {quantity})",
                key=CartMessages.INSUFFICIENT_STOCK,
            )

    # --- Cart ceilings --------------------------------------------------------

    @staticmethod
    def check_max_items_in_cart(cart: Cart, product_id: UUID) -> None:
        if not cart.has_item(product_id):
            ensure_item_count(cart.total_items + 1)

    @staticmethod
    def check_max_quantity_per_item(quantity: int) -> None:
        ensure_line_quantity(quantity)

    @staticmethod
    def check_max_total_amount(total: Money) -> None:
        ensure_total_amount(total)
