"""SQLAlchemy unit of work: one AsyncSession per request."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.persistence.sql_cart_repository import SqlCartRepository
from storefront.infrastructure.persistence.sql_order_repository import SqlOrderRepository
from storefront.infrastructure.persistence.sql_product_repository import (
    SqlCategoryRepository,
    SqlProductRepository,
)
from storefront.infrastructure.persistence.sql_stock_repository import SqlStockRepository
from storefront.infrastructure.persistence.sql_user_address_repository import (
    SqlUserAddressRepository,
)


class SqlAlchemyUnitOfWork(UnitOfWork):

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self._session_factory()
        self.carts = SqlCartRepository(self._session)
        self.products = SqlProductRepository(self._session)
        self.categories = SqlCategoryRepository(self._session)
        self.stock = SqlStockRepository(self._session)
        self.orders = SqlOrderRepository(self._session)
        self.addresses = SqlUserAddressRepository(self._session)
        await super().__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await super().__aexit__(exc_type, exc, tb)
        finally:
            await self._session.close()

    async def _commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()
