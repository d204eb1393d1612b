"""Glue between click commands and the async request pipeline."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import click

from storefront.application.contracts import Request
from storefront.application.ports import Localizer
from storefront.application.result import Result, ResultStatus
from storefront.config import get_settings
from storefront.domain.messages import IdentityMessages
from storefront.infrastructure.bootstrap import create_app

logger = logging.getLogger(__name__)

user_option = click.option(
    "--user",
    "user_id",
    envvar="STOREFRONT_USER",
    default=None,
    help="Acting user id (UUID). Defaults to $STOREFRONT_USER.",
)


def send(request: Request) -> Any:
    """Run one request to completion and return its value.

    A failed Result becomes a ``click.ClickException`` carrying the
    localized messages; anything unexpected is logged and reported
    generically.
    """
    try:
        result, localizer = asyncio.run(_send(request))
    except Exception as exc:
        logger.error("Unexpected error while running %s: %s", type(request).__name__, exc)
        raise click.ClickException("Unexpected error; see the log for details.") from exc

    if not result.is_success:
        raise click.ClickException(describe_failure(result, localizer))
    return result.value


def resolve_page_size(page_size: int | None) -> int:
    """Default a missing page size and clamp an oversized one. Zero passes through."""
    settings = get_settings()
    if page_size is None:
        return settings.default_page_size
    return min(page_size, settings.max_page_size)


async def _send(request: Request) -> tuple[Result, Localizer]:
    app = create_app(get_settings())
    try:
        return await app.mediator.send(request), app.localizer
    finally:
        await app.close()


def describe_failure(result: Result, localizer: Localizer) -> str:
    if result.status is ResultStatus.UNAUTHORIZED:
        return localizer.translate(IdentityMessages.USER_ID_REQUIRED)

    lines = [localizer.translate(m.key, m.params) for m in result.errors]
    for error in result.field_errors:
        text = localizer.translate(error.key, error.params)
        lines.append(f"{error.field}: {text}" if error.field else text)
    return "\n".join(lines) or result.status.value
