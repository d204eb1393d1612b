"""CLI entry point for the storefront."""

from __future__ import annotations

import click

from storefront.config import get_settings
from storefront.infrastructure.cli.address_commands import (
    address_add,
    address_delete,
    address_list,
    address_set_default,
    address_update,
)
from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_set_quantity,
    cart_show,
)
from storefront.infrastructure.cli.catalog_commands import (
    category_add,
    category_delete,
    category_list,
    category_update,
    product_activate,
    product_add,
    product_deactivate,
    product_delete,
    product_list,
    product_set_stock,
    product_show,
    product_stock,
    product_update,
)
from storefront.infrastructure.cli.db_commands import db_init
from storefront.infrastructure.cli.order_commands import (
    order_cancel,
    order_list,
    order_mine,
    order_place,
    order_set_status,
    order_show,
)
from storefront.logging_config import configure_logging


@click.group()
@click.option("--log-level", default=None, help="Override STOREFRONT_LOG_LEVEL.")
def cli(log_level: str | None) -> None:
    """Storefront - catalog, carts, orders and inventory."""
    configure_logging(log_level or get_settings().log_level)


@cli.group()
def db() -> None:
    """Database management."""


@cli.group()
def category() -> None:
    """Catalog categories."""


@cli.group()
def product() -> None:
    """Catalog products and stock."""


@cli.group()
def cart() -> None:
    """The acting user's cart."""


@cli.group()
def order() -> None:
    """Order placement and lifecycle."""


@cli.group()
def address() -> None:
    """Saved addresses."""


db.add_command(db_init)

category.add_command(category_add)
category.add_command(category_update)
category.add_command(category_delete)
category.add_command(category_list)

product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_show)
product.add_command(product_update)
product.add_command(product_activate)
product.add_command(product_deactivate)
product.add_command(product_delete)
product.add_command(product_stock)
product.add_command(product_set_stock)

cart.add_command(cart_add)
cart.add_command(cart_remove)
cart.add_command(cart_set_quantity)
cart.add_command(cart_clear)
cart.add_command(cart_show)

order.add_command(order_place)
order.add_command(order_show)
order.add_command(order_list)
order.add_command(order_mine)
order.add_command(order_cancel)
order.add_command(order_set_status)

address.add_command(address_add)
address.add_command(address_set_default)
address.add_command(address_update)
address.add_command(address_delete)
address.add_command(address_list)


if __name__ == "__main__":
    cli()
