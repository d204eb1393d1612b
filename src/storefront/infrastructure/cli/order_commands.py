"""CLI commands for placing and managing orders."""

from __future__ import annotations

from uuid import UUID

import click

from storefront.application.dto import AddressInput, OrderItemSpec
from storefront.application.orders.cancel_order import CancelOrder
from storefront.application.orders.get_order import GetOrderById
from storefront.application.orders.list_orders import GetOrders
from storefront.application.orders.list_user_orders import GetUserOrders
from storefront.application.orders.place_order import PlaceOrder
from storefront.application.orders.update_order_status import UpdateOrderStatus
from storefront.infrastructure.cli.runtime import resolve_page_size, send, user_option


def _parse_item(raw: str) -> OrderItemSpec:
    """Parse ``PRODUCT_ID:QTY`` (quantity defaults to 1)."""
    product, _, qty = raw.partition(":")
    try:
        return OrderItemSpec(product_id=UUID(product.strip()), quantity=int(qty or 1))
    except ValueError:
        raise click.BadParameter(f"expected PRODUCT_ID:QTY, got '{raw}'", param_hint="--item")


def _address(prefix: str, street, city, zip_code, country) -> AddressInput | None:
    parts = (street, city, zip_code, country)
    if not any(parts):
        return None
    if not all(parts):
        raise click.UsageError(
            f"--{prefix}street, --{prefix}city, --{prefix}zip-code and --{prefix}country "
            "must be given together"
        )
    return AddressInput(street=street, city=city, zip_code=zip_code, country=country)


@click.command("place")
@user_option
@click.option("--item", "items", multiple=True, help="PRODUCT_ID:QTY; omit to order the cart.")
@click.option("--street", default=None, help="Shipping street.")
@click.option("--city", default=None, help="Shipping city.")
@click.option("--zip-code", default=None, help="Shipping zip code.")
@click.option("--country", default=None, help="Shipping country.")
@click.option("--shipping-address-id", type=click.UUID, default=None, help="Saved shipping address.")
@click.option("--billing-street", default=None)
@click.option("--billing-city", default=None)
@click.option("--billing-zip-code", default=None)
@click.option("--billing-country", default=None)
@click.option("--billing-address-id", type=click.UUID, default=None, help="Saved billing address.")
@click.option(
    "--same-billing/--separate-billing",
    "use_same_for_billing",
    default=True,
    help="Bill to the shipping address (default).",
)
def order_place(
    user_id,
    items,
    street,
    city,
    zip_code,
    country,
    shipping_address_id,
    billing_street,
    billing_city,
    billing_zip_code,
    billing_country,
    billing_address_id,
    use_same_for_billing: bool,
) -> None:
    """Place an order from explicit items or from the cart."""
    order_id = send(
        PlaceOrder(
            user_id=user_id,
            items=tuple(_parse_item(raw) for raw in items),
            shipping_address=_address("", street, city, zip_code, country),
            shipping_address_id=shipping_address_id,
            billing_address=_address(
                "billing-", billing_street, billing_city, billing_zip_code, billing_country
            ),
            billing_address_id=billing_address_id,
            use_same_for_billing=use_same_for_billing,
        )
    )
    click.echo(f"Order {order_id} placed.")


@click.command("show")
@click.option("--id", "order_id", required=True, type=click.UUID, help="Order id.")
def order_show(order_id) -> None:
    """Show an order with its lines."""
    order = send(GetOrderById(order_id=order_id))
    click.echo(f"Order {order.id}")
    click.echo(f"  User:     {order.user_id}")
    click.echo(f"  Status:   {order.status}")
    click.echo(f"  Placed:   {order.order_date}")
    click.echo(f"  Ship to:  {order.shipping_address}")
    click.echo(f"  Bill to:  {order.billing_address}")
    click.echo(f"  Total:    {order.total}")
    click.echo()
    click.echo(f"  {'Product':<36} {'Qty':>5} {'Unit':>10} {'Line':>12}")
    click.echo(f"  {'-'*66}")
    for item in order.items:
        click.echo(
            f"  {str(item.product_id):<36} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>12}"
        )


@click.command("list")
@click.option("--user", "user_id", default=None, help="Only this user's orders.")
@click.option("--status", default=None, help="Only orders in this status.")
@click.option("--order-by", default=None, help="e.g. 'order_date desc'.")
@click.option("--page", default=1, type=int)
@click.option("--page-size", default=None, type=int)
def order_list(user_id, status, order_by, page: int, page_size) -> None:
    """List orders, newest first."""
    size = resolve_page_size(page_size)
    paged = send(
        GetOrders(page=page, page_size=size, user_id=user_id, status=status, order_by=order_by)
    )
    if not paged.items:
        click.echo("No orders found.")
        return

    click.echo(f"  {'Id':<36} {'Status':<12} {'Total':>12}  Placed")
    click.echo(f"  {'-'*90}")
    for o in paged.items:
        click.echo(f"  {str(o.id):<36} {o.status:<12} {o.total:>12}  {o.order_date}")
    click.echo(f"  Page {paged.page}/{max(paged.total_pages, 1)} ({paged.total_count} orders)")


@click.command("mine")
@user_option
def order_mine(user_id) -> None:
    """List the acting user's orders, newest first."""
    orders = send(GetUserOrders(user_id=user_id))
    if not orders:
        click.echo("No orders found.")
        return
    for o in orders:
        units = sum(item.quantity for item in o.items)
        click.echo(f"  {o.id}  {o.status:<12} {o.total:>12}  {units:>4} units  {o.order_date}")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=click.UUID, help="Order id.")
def order_cancel(order_id) -> None:
    """Cancel an order and return its stock."""
    send(CancelOrder(order_id=order_id))
    click.echo(f"Order {order_id} cancelled.")


@click.command("status")
@click.option("--id", "order_id", required=True, type=click.UUID, help="Order id.")
@click.option("--status", required=True, help="Pending, Processing, Shipped, Delivered or Cancelled.")
def order_set_status(order_id, status: str) -> None:
    """Move an order along its lifecycle."""
    new_status = send(UpdateOrderStatus(order_id=order_id, status=status))
    click.echo(f"Order {order_id} is now {new_status}.")
