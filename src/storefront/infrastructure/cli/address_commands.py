"""CLI commands for a user's saved addresses."""

from __future__ import annotations

import click

from storefront.application.addresses.add_user_address import AddUserAddress
from storefront.application.addresses.delete_user_address import DeleteUserAddress
from storefront.application.addresses.list_user_addresses import GetUserAddresses
from storefront.application.addresses.set_default_user_address import SetDefaultUserAddress
from storefront.application.addresses.update_user_address import UpdateUserAddress
from storefront.application.dto import AddressInput
from storefront.infrastructure.cli.runtime import send, user_option


@click.command("add")
@user_option
@click.option("--label", required=True, help="Short name, e.g. 'Home'.")
@click.option("--street", required=True)
@click.option("--city", required=True)
@click.option("--zip-code", required=True)
@click.option("--country", required=True)
@click.option("--default", "make_default", is_flag=True, default=False, help="Make it the default.")
def address_add(user_id, label, street, city, zip_code, country, make_default: bool) -> None:
    """Save an address for later orders."""
    dto = send(
        AddUserAddress(
            user_id=user_id,
            label=label,
            address=AddressInput(street=street, city=city, zip_code=zip_code, country=country),
            make_default=make_default,
        )
    )
    marker = " (default)" if dto.is_default else ""
    click.echo(f"Address {dto.id} saved: {dto.label}{marker}")


@click.command("default")
@user_option
@click.option("--id", "address_id", required=True, type=click.UUID, help="Saved address id.")
def address_set_default(user_id, address_id) -> None:
    """Make a saved address the default one."""
    dto = send(SetDefaultUserAddress(user_id=user_id, address_id=address_id))
    click.echo(f"Default address is now {dto.label} ({dto.address})")


@click.command("list")
@user_option
def address_list(user_id) -> None:
    """List saved addresses, the default first."""
    addresses = send(GetUserAddresses(user_id=user_id))
    if not addresses:
        click.echo("No saved addresses.")
        return
    for a in addresses:
        marker = " (default)" if a.is_default else ""
        click.echo(f"  {a.id}  {a.label}{marker}: {a.address}")


@click.command("update")
@user_option
@click.option("--id", "address_id", required=True, type=click.UUID, help="Saved address id.")
@click.option("--label", required=True, help="Short name, e.g. 'Home'.")
@click.option("--street", required=True)
@click.option("--city", required=True)
@click.option("--zip-code", required=True)
@click.option("--country", required=True)
def address_update(user_id, address_id, label, street, city, zip_code, country) -> None:
    """Change a saved address."""
    dto = send(
        UpdateUserAddress(
            user_id=user_id,
            address_id=address_id,
            label=label,
            address=AddressInput(street=street, city=city, zip_code=zip_code, country=country),
        )
    )
    click.echo(f"Address {dto.id} updated: {dto.label}")


@click.command("delete")
@user_option
@click.option("--id", "address_id", required=True, type=click.UUID, help="Saved address id.")
def address_delete(user_id, address_id) -> None:
    """Delete a saved address other than the default one."""
    send(DeleteUserAddress(user_id=user_id, address_id=address_id))
    click.echo(f"Address {address_id} deleted.")
