"""CLI commands for categories, products and stock."""

from __future__ import annotations

import click

from storefront.application.dto import ProductDTO
from storefront.application.products.create_category import CreateCategory
from storefront.application.products.create_product import CreateProduct
from storefront.application.products.delete_category import DeleteCategory
from storefront.application.products.delete_product import DeleteProduct
from storefront.application.products.get_product import GetProductById
from storefront.application.products.list_categories import GetAllCategories
from storefront.application.products.list_products import GetAllProducts
from storefront.application.products.set_product_active import SetProductActive
from storefront.application.products.update_category import UpdateCategory
from storefront.application.products.update_product import UpdateProduct
from storefront.application.stock.get_stock_info import GetProductStockInfo
from storefront.application.stock.update_product_stock import UpdateProductStock
from storefront.infrastructure.cli.runtime import resolve_page_size, send


@click.command("add")
@click.option("--name", required=True, help="Category name.")
@click.option("--description", default=None, help="Optional description.")
def category_add(name: str, description: str | None) -> None:
    """Create a category."""
    dto = send(CreateCategory(name=name, description=description))
    click.echo(f"Category {dto.id} created ({dto.name})")


@click.command("update")
@click.option("--id", "category_id", required=True, type=click.UUID, help="Category id.")
@click.option("--name", required=True, help="Category name.")
@click.option("--description", default=None, help="Optional description.")
def category_update(category_id, name: str, description: str | None) -> None:
    """Rename a category or change its description."""
    dto = send(UpdateCategory(category_id=category_id, name=name, description=description))
    click.echo(f"Category {dto.id} updated ({dto.name})")


@click.command("delete")
@click.option("--id", "category_id", required=True, type=click.UUID, help="Category id.")
def category_delete(category_id) -> None:
    """Delete a category that has no products."""
    send(DeleteCategory(category_id=category_id))
    click.echo(f"Category {category_id} deleted.")


@click.command("list")
@click.option("--page", default=1, type=int, help="Page number (1-based).")
@click.option("--page-size", default=None, type=int, help="Categories per page.")
@click.option("--search", default=None, help="Case-insensitive name search.")
@click.option("--order-by", default=None, help="e.g. 'name desc'.")
def category_list(page, page_size, search, order_by) -> None:
    """List categories by name."""
    size = resolve_page_size(page_size)
    paged = send(GetAllCategories(page=page, page_size=size, search=search, order_by=order_by))

    click.echo(f"  {'Id':<36} {'Name':<24} Description")
    click.echo(f"  {'-'*80}")
    for c in paged.items:
        click.echo(f"  {str(c.id):<36} {c.name:<24} {c.description or ''}")
    click.echo(f"  Page {paged.page}/{max(paged.total_pages, 1)} ({paged.total_count} categories)")


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Unit price, e.g. 19.99.")
@click.option("--category", "category_id", required=True, type=click.UUID, help="Category id.")
@click.option("--description", default=None, help="Optional description.")
@click.option("--stock", "initial_stock", default=0, type=int, help="Initial stock on hand.")
def product_add(name, price, category_id, description, initial_stock) -> None:
    """Add a product to the catalog."""
    dto = send(
        CreateProduct(
            name=name,
            price=price,
            category_id=category_id,
            description=description,
            initial_stock=initial_stock,
        )
    )
    click.echo(f"Product {dto.id} created")
    _display_product(dto)


@click.command("list")
@click.option("--page", default=1, type=int, help="Page number (1-based).")
@click.option("--page-size", default=None, type=int, help="Products per page.")
@click.option("--category", "category_id", default=None, type=click.UUID, help="Only this category.")
@click.option("--search", default=None, help="Case-insensitive name search.")
@click.option("--order-by", default=None, help="e.g. 'category.name desc, price'.")
@click.option("--active-only", is_flag=True, default=False, help="Hide inactive products.")
def product_list(page, page_size, category_id, search, order_by, active_only) -> None:
    """List catalog products."""
    size = resolve_page_size(page_size)
    paged = send(
        GetAllProducts(
            page=page,
            page_size=size,
            category_id=category_id,
            search=search,
            order_by=order_by,
            active_only=active_only,
        )
    )

    click.echo(f"  {'Id':<36} {'Name':<24} {'Category':<16} {'Price':>10} {'Stock':>6}  Active")
    click.echo(f"  {'-'*104}")
    for p in paged.items:
        click.echo(
            f"  {str(p.id):<36} {p.name:<24} {(p.category_name or '-'):<16} "
            f"{p.price:>10} {p.stock_quantity if p.stock_quantity is not None else '-':>6}  "
            f"{'yes' if p.is_active else 'no'}"
        )
    click.echo(f"  Page {paged.page}/{max(paged.total_pages, 1)} ({paged.total_count} products)")


def _display_product(dto: ProductDTO) -> None:
    click.echo(f"  Name:        {dto.name}")
    click.echo(f"  Category:    {dto.category_name or dto.category_id}")
    click.echo(f"  Price:       {dto.price}")
    click.echo(f"  Stock:       {dto.stock_quantity if dto.stock_quantity is not None else '-'}")
    click.echo(f"  Active:      {'yes' if dto.is_active else 'no'}")
    if dto.description:
        click.echo(f"  Description: {dto.description}")


@click.command("show")
@click.option("--id", "product_id", required=True, type=click.UUID, help="Product id.")
def product_show(product_id) -> None:
    """Show one product."""
    dto = send(GetProductById(product_id=product_id))
    click.echo(f"Product {dto.id}")
    _display_product(dto)


@click.command("update")
@click.option("--id", "product_id", required=True, type=click.UUID, help="Product id.")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Unit price, e.g. 19.99.")
@click.option("--category", "category_id", required=True, type=click.UUID, help="Category id.")
@click.option("--description", default=None, help="Optional description.")
def product_update(product_id, name, price, category_id, description) -> None:
    """Update a product's details. Existing carts and orders keep their prices."""
    dto = send(
        UpdateProduct(
            product_id=product_id,
            name=name,
            price=price,
            category_id=category_id,
            description=description,
        )
    )
    click.echo(f"Product {dto.id} updated")
    _display_product(dto)


@click.command("activate")
@click.option("--id", "product_id", required=True, type=click.UUID, help="Product id.")
def product_activate(product_id) -> None:
    """Make a product available for sale."""
    send(SetProductActive(product_id=product_id, is_active=True))
    click.echo(f"Product {product_id} activated.")


@click.command("deactivate")
@click.option("--id", "product_id", required=True, type=click.UUID, help="Product id.")
def product_deactivate(product_id) -> None:
    """Withdraw a product from sale."""
    send(SetProductActive(product_id=product_id, is_active=False))
    click.echo(f"Product {product_id} deactivated.")


@click.command("delete")
@click.option("--id", "product_id", required=True, type=click.UUID, help="Product id.")
def product_delete(product_id) -> None:
    """Delete a product no cart or order refers to."""
    send(DeleteProduct(product_id=product_id))
    click.echo(f"Product {product_id} deleted.")


@click.command("stock")
@click.option("--id", "product_id", required=True, type=click.UUID, help="Product id.")
def product_stock(product_id) -> None:
    """Show stock on hand for a product."""
    info = send(GetProductStockInfo(product_id=product_id))
    state = "in stock" if info.in_stock else "out of stock"
    click.echo(f"Product {info.product_id}: {info.quantity} on hand ({state})")


@click.command("set-stock")
@click.option("--id", "product_id", required=True, type=click.UUID, help="Product id.")
@click.option("--quantity", required=True, type=int, help="New on-hand quantity.")
def product_set_stock(product_id, quantity: int) -> None:
    """Set the on-hand quantity of a product."""
    info = send(UpdateProductStock(product_id=product_id, quantity=quantity))
    click.echo(f"Product {info.product_id}: stock set to {info.quantity}")
