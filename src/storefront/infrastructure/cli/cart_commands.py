"""CLI commands for the acting user's cart."""

from __future__ import annotations

import click

from storefront.application.carts.add_to_cart import AddToCart
from storefront.application.carts.clear_cart import ClearCart
from storefront.application.carts.get_cart import GetCart
from storefront.application.carts.remove_from_cart import RemoveFromCart
from storefront.application.carts.update_cart_item_quantity import UpdateCartItemQuantity
from storefront.application.dto import CartSummaryDTO
from storefront.infrastructure.cli.runtime import send, user_option


def _echo_summary(summary: CartSummaryDTO) -> None:
    click.echo(f"Cart {summary.cart_id}: {summary.total_items} line(s), total {summary.total_amount}")


@click.command("add")
@user_option
@click.option("--product", "product_id", required=True, type=click.UUID, help="Product id.")
@click.option("--quantity", default=1, type=int, help="Units to add.")
def cart_add(user_id, product_id, quantity: int) -> None:
    """Add a product to the cart, growing an existing line."""
    _echo_summary(send(AddToCart(user_id=user_id, product_id=product_id, quantity=quantity)))


@click.command("remove")
@user_option
@click.option("--product", "product_id", required=True, type=click.UUID, help="Product id.")
def cart_remove(user_id, product_id) -> None:
    """Remove a product's line from the cart."""
    _echo_summary(send(RemoveFromCart(user_id=user_id, product_id=product_id)))


@click.command("update")
@user_option
@click.option("--product", "product_id", required=True, type=click.UUID, help="Product id.")
@click.option("--quantity", required=True, type=int, help="New line quantity.")
def cart_set_quantity(user_id, product_id, quantity: int) -> None:
    """Replace the quantity of a cart line."""
    _echo_summary(
        send(UpdateCartItemQuantity(user_id=user_id, product_id=product_id, quantity=quantity))
    )


@click.command("clear")
@user_option
def cart_clear(user_id) -> None:
    """Empty the cart."""
    _echo_summary(send(ClearCart(user_id=user_id)))


@click.command("show")
@user_option
def cart_show(user_id) -> None:
    """Show the cart with its lines."""
    cart = send(GetCart(user_id=user_id))
    if not cart.items:
        click.echo("Cart is empty.")
        return

    click.echo(f"  {'Product':<36} {'Qty':>5} {'Unit':>10} {'Line':>12}")
    click.echo(f"  {'-'*66}")
    for item in cart.items:
        click.echo(
            f"  {str(item.product_id):<36} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>12}"
        )
    click.echo(f"  {cart.total_items} line(s), total {cart.total_amount}")
