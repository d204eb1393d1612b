"""SQL repository for the Order aggregate.

Order lines are written once, on ``add``. ``update`` persists only the
status and timestamps, guarded by the optimistic ``version``.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, select, update

from storefront.domain.exceptions import ConcurrencyConflictError
from storefront.domain.model.order import Order, OrderItem, OrderStatus
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.base_repository import SqlRepository
from storefront.infrastructure.persistence.mapping import (
    address_columns,
    address_from,
    as_utc,
    to_money,
)
from storefront.infrastructure.persistence.tables import OrderItemRow, OrderRow


class SqlOrderRepository(SqlRepository[Order], OrderRepository):

    columns = {
        "id": OrderRow.id,
        "user_id": OrderRow.user_id,
        "status": OrderRow.status,
        "order_date": OrderRow.order_date,
        "updated_at": OrderRow.updated_at,
    }

    def _from_clause(self) -> Any:
        return OrderRow.__table__

    def _entities(self) -> tuple[Any, ...]:
        return (OrderRow,)

    async def _hydrate(self, rows: Sequence[Any], include: frozenset[str]) -> list[Order]:
        orders = [self._to_domain(row) for (row,) in rows]
        if "items" in include and orders:
            items_by_order = await self._load_items([order.id for order in orders])
            for order in orders:
                order.items = items_by_order.get(order.id, [])
        return orders

    async def contains_product(self, product_id: UUID) -> bool:
        stmt = select(OrderItemRow.id).where(OrderItemRow.product_id == product_id).limit(1)
        return (await self._session.execute(stmt)).first() is not None

    # --- Writes ---------------------------------------------------------------

    async def add(self, order: Order) -> None:
        self._session.add(
            OrderRow(
                id=order.id,
                user_id=order.user_id,
                status=order.status.value,
                order_date=order.order_date,
                updated_at=order.updated_at,
                version=order.version,
                **address_columns("shipping_", order.shipping_address),
                **address_columns("billing_", order.billing_address),
            )
        )
        await self._flush()
        await self._insert_rows(
            OrderItemRow,
            [
                dict(
                    id=item.id,
                    order_id=order.id,
                    product_id=item.product_id,
                    position=position,
                    unit_price=item.unit_price.amount,
                    currency=item.unit_price.currency,
                    quantity=item.quantity.value,
                )
                for position, item in enumerate(order.items)
            ],
        )

    async def update(self, order: Order) -> None:
        result = await self._session.execute(
            update(OrderRow)
            .where(OrderRow.id == order.id, OrderRow.version == order.version)
            .values(
                status=order.status.value,
                updated_at=order.updated_at,
                version=OrderRow.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise ConcurrencyConflictError(
                f"Order {order.id} was modified concurrently (expected version {order.version})"
            )
        order.version += 1

    async def delete(self, order: Order) -> None:
        await self._session.execute(
            delete(OrderItemRow)
            .where(OrderItemRow.order_id == order.id)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(
            delete(OrderRow)
            .where(OrderRow.id == order.id)
            .execution_options(synchronize_session=False)
        )

    # --- Mapping --------------------------------------------------------------

    async def _load_items(self, order_ids: list[UUID]) -> dict[UUID, list[OrderItem]]:
        stmt = (
            select(OrderItemRow)
            .where(OrderItemRow.order_id.in_(order_ids))
            .order_by(OrderItemRow.order_id, OrderItemRow.position)
        )
        items: dict[UUID, list[OrderItem]] = defaultdict(list)
        for row in (await self._session.execute(stmt)).scalars():
            items[row.order_id].append(
                OrderItem(
                    product_id=row.product_id,
                    unit_price=to_money(row.unit_price, row.currency),
                    quantity=Quantity(row.quantity),
                    id=row.id,
                )
            )
        return items

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        return Order(
            id=row.id,
            user_id=row.user_id,
            shipping_address=address_from(row, "shipping_"),
            billing_address=address_from(row, "billing_"),
            status=OrderStatus(row.status),
            order_date=as_utc(row.order_date),
            updated_at=as_utc(row.updated_at),
            version=row.version,
        )
