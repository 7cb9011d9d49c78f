"""Local search and category filtering over the cached catalog.

The upstream API is only ever asked for the full collection; every query is
answered in memory and its result cached under a key derived from the query.
Empty results are cached too, so a query known to match nothing does not
trigger another full fetch and scan within the TTL.
"""

from __future__ import annotations

import logging
from typing import Callable

from catalog_gateway.schemas.product import Product
from catalog_gateway.services.catalog_service import CatalogService
from catalog_gateway.utils.ttl_cache import TTLCache

logger = logging.getLogger(__name__)


def search_cache_key(query: str) -> str:
    return f"search_{query.lower()}"


def category_cache_key(category: str) -> str:
    return f"category_{category.lower()}"


def name_contains(query: str) -> Callable[[Product], bool]:
    needle = query.lower()
    return lambda product: needle in product.name.lower()


def category_equals(category: str) -> Callable[[Product], bool]:
    wanted = category.lower()
    return lambda product: product.category.lower() == wanted


class ProductQueryService:
    """Answers name searches and category filters.

    Attributes:
        catalog: Source of the full product collection.
        cache: TTL cache holding per-query results.
    """

    def __init__(self, catalog: CatalogService, cache: TTLCache) -> None:
        self.catalog = catalog
        self.cache = cache

    async def _cached_filter(
        self,
        cache_key: str,
        predicate: Callable[[Product], bool],
    ) -> tuple[Product, ...]:
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info("query.served_from_cache", extra={"cache_key": cache_key})
            return cached  # type: ignore[return-value]

        products = await self.catalog.fetch_all_products()
        matches = tuple(product for product in products if predicate(product))
        self.cache.set(cache_key, matches)

        logger.info(
            "query.computed",
            extra={"cache_key": cache_key, "scanned": len(products), "matched": len(matches)},
        )
        return matches

    async def search_by_name(self, query: str) -> tuple[Product, ...]:
        """Products whose name contains ``query``, case-insensitively."""
        return await self._cached_filter(search_cache_key(query), name_contains(query))

    async def filter_by_category(self, category: str) -> tuple[Product, ...]:
        """Products whose category equals ``category``, case-insensitively."""
        return await self._cached_filter(category_cache_key(category), category_equals(category))
