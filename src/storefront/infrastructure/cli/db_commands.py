"""CLI commands for the database schema."""

from __future__ import annotations

import asyncio

import click

from storefront.config import get_settings
from storefront.infrastructure.persistence.database import create_engine, init_db


async def _init() -> None:
    engine = create_engine(get_settings())
    try:
        await init_db(engine)
    finally:
        await engine.dispose()


@click.command("init")
def db_init() -> None:
    """Create the database tables."""
    asyncio.run(_init())
    click.echo(f"Database ready at {get_settings().database_url}")
