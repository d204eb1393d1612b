"""Composition root - wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncEngine

from storefront.application.addresses.add_user_address import (
    AddUserAddress,
    AddUserAddressHandler,
)
from storefront.application.addresses.delete_user_address import (
    DeleteUserAddress,
    DeleteUserAddressHandler,
)
from storefront.application.addresses.list_user_addresses import (
    GetUserAddresses,
    GetUserAddressesHandler,
)
from storefront.application.addresses.set_default_user_address import (
    SetDefaultUserAddress,
    SetDefaultUserAddressHandler,
)
from storefront.application.addresses.update_user_address import (
    UpdateUserAddress,
    UpdateUserAddressHandler,
)
from storefront.application.carts.add_to_cart import (
    AddToCart,
    AddToCartHandler,
    AddToCartValidator,
)
from storefront.application.carts.clear_cart import ClearCart, ClearCartHandler
from storefront.application.carts.get_cart import GetCart, GetCartHandler
from storefront.application.carts.remove_from_cart import (
    RemoveFromCart,
    RemoveFromCartHandler,
    RemoveFromCartValidator,
)
from storefront.application.carts.update_cart_item_quantity import (
    UpdateCartItemQuantity,
    UpdateCartItemQuantityHandler,
    UpdateCartItemQuantityValidator,
)
from storefront.application.orders.cancel_order import CancelOrder, CancelOrderHandler
from storefront.application.orders.get_order import GetOrderById, GetOrderByIdHandler
from storefront.application.orders.list_orders import (
    GetOrders,
    GetOrdersHandler,
    GetOrdersValidator,
)
from storefront.application.orders.list_user_orders import GetUserOrders, GetUserOrdersHandler
from storefront.application.orders.place_order import (
    PlaceOrder,
    PlaceOrderHandler,
    PlaceOrderValidator,
)
from storefront.application.orders.update_order_status import (
    UpdateOrderStatus,
    UpdateOrderStatusHandler,
    UpdateOrderStatusValidator,
)
from storefront.application.pipeline import Mediator
from storefront.application.ports import CacheInvalidator, Localizer, MetricsSink
from storefront.application.products.create_category import (
    CreateCategory,
    CreateCategoryHandler,
    CreateCategoryValidator,
)
from storefront.application.products.create_product import (
    CreateProduct,
    CreateProductHandler,
    CreateProductValidator,
)
from storefront.application.products.delete_category import (
    DeleteCategory,
    DeleteCategoryHandler,
)
from storefront.application.products.delete_product import DeleteProduct, DeleteProductHandler
from storefront.application.products.get_product import (
    GetProductById,
    GetProductByIdHandler,
)
from storefront.application.products.list_categories import (
    GetAllCategories,
    GetAllCategoriesHandler,
)
from storefront.application.products.list_products import (
    GetAllProducts,
    GetAllProductsHandler,
)
from storefront.application.products.set_product_active import (
    SetProductActive,
    SetProductActiveHandler,
)
from storefront.application.products.update_category import (
    UpdateCategory,
    UpdateCategoryHandler,
    UpdateCategoryValidator,
)
from storefront.application.products.update_product import (
    UpdateProduct,
    UpdateProductHandler,
    UpdateProductValidator,
)
from storefront.application.stock.get_stock_info import (
    GetProductStockInfo,
    GetProductStockInfoHandler,
)
from storefront.application.stock.update_product_stock import (
    UpdateProductStock,
    UpdateProductStockHandler,
    UpdateProductStockValidator,
)
from storefront.config import Settings
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.cache import LoggingCacheInvalidator
from storefront.infrastructure.localization import CatalogLocalizer
from storefront.infrastructure.metrics import PrometheusMetricsSink
from storefront.infrastructure.persistence.database import (
    create_engine,
    create_session_factory,
)
from storefront.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork

logger = logging.getLogger(__name__)


def register_handlers(mediator: Mediator) -> None:
    # Catalog
    mediator.register(CreateCategory, CreateCategoryHandler, CreateCategoryValidator())
    mediator.register(UpdateCategory, UpdateCategoryHandler, UpdateCategoryValidator())
    mediator.register(DeleteCategory, DeleteCategoryHandler)
    mediator.register(GetAllCategories, GetAllCategoriesHandler)
    mediator.register(CreateProduct, CreateProductHandler, CreateProductValidator())
    mediator.register(UpdateProduct, UpdateProductHandler, UpdateProductValidator())
    mediator.register(SetProductActive, SetProductActiveHandler)
    mediator.register(DeleteProduct, DeleteProductHandler)
    mediator.register(GetProductById, GetProductByIdHandler)
    mediator.register(GetAllProducts, GetAllProductsHandler)
    # Stock
    mediator.register(UpdateProductStock, UpdateProductStockHandler, UpdateProductStockValidator())
    mediator.register(GetProductStockInfo, GetProductStockInfoHandler)
    # Addresses
    mediator.register(AddUserAddress, AddUserAddressHandler)
    mediator.register(SetDefaultUserAddress, SetDefaultUserAddressHandler)
    mediator.register(UpdateUserAddress, UpdateUserAddressHandler)
    mediator.register(DeleteUserAddress, DeleteUserAddressHandler)
    mediator.register(GetUserAddresses, GetUserAddressesHandler)
    # Cart
    mediator.register(AddToCart, AddToCartHandler, AddToCartValidator())
    mediator.register(RemoveFromCart, RemoveFromCartHandler, RemoveFromCartValidator())
    mediator.register(
        UpdateCartItemQuantity, UpdateCartItemQuantityHandler, UpdateCartItemQuantityValidator()
    )
    mediator.register(ClearCart, ClearCartHandler)
    mediator.register(GetCart, GetCartHandler)
    # Orders
    mediator.register(PlaceOrder, PlaceOrderHandler, PlaceOrderValidator())
    mediator.register(CancelOrder, CancelOrderHandler)
    mediator.register(UpdateOrderStatus, UpdateOrderStatusHandler, UpdateOrderStatusValidator())
    mediator.register(GetOrderById, GetOrderByIdHandler)
    mediator.register(GetOrders, GetOrdersHandler, GetOrdersValidator())
    mediator.register(GetUserOrders, GetUserOrdersHandler)


def build_mediator(
    uow_factory: Callable[[], UnitOfWork],
    cache: CacheInvalidator | None = None,
    metrics: MetricsSink | None = None,
) -> Mediator:
    mediator = Mediator(uow_factory, cache or LoggingCacheInvalidator(), metrics)
    register_handlers(mediator)
    return mediator


@dataclass
class Application:
    """Everything one process needs, owned by whoever called ``create_app``."""

    settings: Settings
    engine: AsyncEngine
    mediator: Mediator
    localizer: Localizer
    metrics: PrometheusMetricsSink

    async def close(self) -> None:
        logger.debug("Metrics at shutdown:\n%s", self.metrics.exposition())
        await self.engine.dispose()


def create_app(settings: Settings) -> Application:
    engine = create_engine(settings)
    session_factory = create_session_factory(engine)
    metrics = PrometheusMetricsSink()
    mediator = build_mediator(
        lambda: SqlAlchemyUnitOfWork(session_factory),
        cache=LoggingCacheInvalidator(),
        metrics=metrics,
    )
    return Application(
        settings=settings,
        engine=engine,
        mediator=mediator,
        localizer=CatalogLocalizer(settings.locale),
        metrics=metrics,
    )
