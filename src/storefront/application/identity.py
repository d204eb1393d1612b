"""Caller identity.

Requests carry the caller's user id as the raw string the outer layer
received. A missing or unparseable id means the caller is unauthorized.
"""

from __future__ import annotations

from uuid import UUID

from storefront.domain.messages import IdentityMessages


class UnauthorizedError(Exception):

    key = IdentityMessages.USER_ID_REQUIRED


def parse_user_id(raw: str | UUID | None) -> UUID:
    if isinstance(raw, UUID):
        return raw
    if not raw:
        raise UnauthorizedError("No user id supplied")
    try:
        return UUID(str(raw).strip())
    except ValueError:
        raise UnauthorizedError(f"Invalid user id '{raw}'") from None
