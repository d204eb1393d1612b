"""Request markers understood by the pipeline.

Commands change state; queries only read. A transactional command commits
its unit of work when its handler succeeds and names the cache entries it
makes stale.
"""

from __future__ import annotations

from typing import ClassVar, Iterable


class Request:
    pass


class Query(Request):
    pass


class Command(Request):
    transactional: ClassVar[bool] = True

    def cache_keys(self) -> Iterable[str]:
        return ()

    def cache_patterns(self) -> Iterable[str]:
        return ()


# --- Cache key conventions ----------------------------------------------------

PRODUCTS_PATTERN = "products:*"
ORDERS_PATTERN = "orders:*"
CATEGORIES_PATTERN = "categories:*"
STOCK_PATTERN = "stock:*"


def cart_key(user_id: object) -> str:
    return f"cart:{user_id}"


def product_key(product_id: object) -> str:
    return f"product:{product_id}"


def stock_key(product_id: object) -> str:
    return f"stock:{product_id}"


def order_key(order_id: object) -> str:
    return f"order:{order_id}"


def addresses_key(user_id: object) -> str:
    return f"addresses:{user_id}"
