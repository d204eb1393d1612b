"""SQL repository for the Cart aggregate.

The cart row carries an optimistic ``version``. ``update`` only succeeds
against the version the cart was loaded with, then rewrites the cart's
lines as a whole.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, select, update

from storefront.domain.exceptions import ConcurrencyConflictError
from storefront.domain.model.cart import Cart, CartItem
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.specification import eq
from storefront.infrastructure.persistence.base_repository import SqlRepository
from storefront.infrastructure.persistence.mapping import as_utc, to_money
from storefront.infrastructure.persistence.tables import CartItemRow, CartRow


class SqlCartRepository(SqlRepository[Cart], CartRepository):

    columns = {
        "id": CartRow.id,
        "user_id": CartRow.user_id,
        "created_at": CartRow.created_at,
        "updated_at": CartRow.updated_at,
    }

    def _from_clause(self) -> Any:
        return CartRow.__table__

    def _entities(self) -> tuple[Any, ...]:
        return (CartRow,)

    async def _hydrate(self, rows: Sequence[Any], include: frozenset[str]) -> list[Cart]:
        carts = [self._to_domain(row) for (row,) in rows]
        if "items" in include and carts:
            items_by_cart = await self._load_items([cart.id for cart in carts])
            for cart in carts:
                cart.items = items_by_cart.get(cart.id, [])
        return carts

    async def get_by_user_id(self, user_id: UUID) -> Cart | None:
        found = await self.query(eq("user_id", user_id))
        return found[0] if found else None

    async def get_by_user_id_with_items(self, user_id: UUID) -> Cart | None:
        found = await self.query(eq("user_id", user_id), include=("items",))
        return found[0] if found else None

    async def contains_product(self, product_id: UUID) -> bool:
        stmt = select(CartItemRow.id).where(CartItemRow.product_id == product_id).limit(1)
        return (await self._session.execute(stmt)).first() is not None

    # --- Writes ---------------------------------------------------------------

    async def add(self, cart: Cart) -> None:
        self._session.add(
            CartRow(
                id=cart.id,
                user_id=cart.user_id,
                created_at=cart.created_at,
                updated_at=cart.updated_at,
                version=cart.version,
            )
        )
        await self._flush()
        await self._insert_rows(CartItemRow, self._item_rows(cart))

    async def update(self, cart: Cart) -> None:
        result = await self._session.execute(
            update(CartRow)
            .where(CartRow.id == cart.id, CartRow.version == cart.version)
            .values(updated_at=cart.updated_at, version=CartRow.version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise ConcurrencyConflictError(
                f"Cart {cart.id} was modified concurrently (expected version {cart.version})"
            )
        await self._session.execute(
            delete(CartItemRow)
            .where(CartItemRow.cart_id == cart.id)
            .execution_options(synchronize_session=False)
        )
        await self._insert_rows(CartItemRow, self._item_rows(cart))
        cart.version += 1

    async def delete(self, cart: Cart) -> None:
        await self._session.execute(
            delete(CartItemRow)
            .where(CartItemRow.cart_id == cart.id)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(
            delete(CartRow)
            .where(CartRow.id == cart.id)
            .execution_options(synchronize_session=False)
        )

    # --- Mapping --------------------------------------------------------------

    async def _load_items(self, cart_ids: list[UUID]) -> dict[UUID, list[CartItem]]:
        stmt = (
            select(CartItemRow)
            .where(CartItemRow.cart_id.in_(cart_ids))
            .order_by(CartItemRow.cart_id, CartItemRow.position)
            .execution_options(populate_existing=True)
        )
        items: dict[UUID, list[CartItem]] = defaultdict(list)
        for row in (await self._session.execute(stmt)).scalars():
            items[row.cart_id].append(
                CartItem(
                    cart_id=row.cart_id,
                    product_id=row.product_id,
                    unit_price=to_money(row.unit_price, row.currency),
                    quantity=row.quantity,
                    id=row.id,
                )
            )
        return items

    @staticmethod
    def _to_domain(row: CartRow) -> Cart:
        return Cart(
            id=row.id,
            user_id=row.user_id,
            created_at=as_utc(row.created_at),
            updated_at=as_utc(row.updated_at),
            version=row.version,
        )

    @staticmethod
    def _item_rows(cart: Cart) -> list[dict[str, Any]]:
        return [
            dict(
                id=item.id,
                cart_id=cart.id,
                product_id=item.product_id,
                position=position,
                unit_price=item.unit_price.amount,
                currency=item.unit_price.currency,
                quantity=item.quantity,
            )
            for position, item in enumerate(cart.items)
        ]
