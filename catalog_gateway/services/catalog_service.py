"""Catalog access with caching and graceful degradation.

The catalog client raises ``UpstreamAppError`` for every upstream failure.
This service is where that error stops: it is logged and turned into an empty
collection or an absent product, so clients always get a well-formed
200/404 instead of a 5xx.
"""

from __future__ import annotations

import logging

from catalog_gateway.adapters.catalog.base import AbstractCatalogClient
from catalog_gateway.core.errors import UpstreamAppError
from catalog_gateway.schemas.product import Product
from catalog_gateway.utils.ttl_cache import TTLCache
from catalog_gateway.utils.validators import parse_product_id

logger = logging.getLogger(__name__)

ALL_PRODUCTS_KEY = "allProducts"


class CatalogService:
    """Fetches products from the upstream catalog.

    Attributes:
        client: Upstream catalog client.
        cache: Shared TTL cache; only the full collection is stored here.
    """

    def __init__(self, client: AbstractCatalogClient, cache: TTLCache) -> None:
        self.client = client
        self.cache = cache

    async def load_all_products(self) -> tuple[Product, ...]:
        """Return the full collection from cache or upstream.

        Raises:
            UpstreamAppError: If the collection is not cached and the upstream
                fetch fails. Failures are not cached.
        """
        cached = self.cache.get(ALL_PRODUCTS_KEY)
        if cached is not None:
            logger.info("catalog.served_from_cache", extra={"cache_key": ALL_PRODUCTS_KEY})
            return cached  # type: ignore[return-value]

        products = await self.client.list_products()
        self.cache.set(ALL_PRODUCTS_KEY, products)
        return products

    async def fetch_all_products(self) -> tuple[Product, ...]:
        """Return the full collection, or an empty tuple if upstream fails."""
        try:
            return await self.load_all_products()
        except UpstreamAppError as exc:
            logger.error(
                "catalog.fetch_failed",
                extra={"error_code": exc.code, "error_message": exc.message, "details": exc.details},
            )
            return ()

    async def fetch_product_by_id(self, raw_id: str | int) -> Product | None:
        """Return one product straight from upstream.

        Single-record lookups are never cached.

        Args:
            raw_id: Product id as received in the request path.

        Returns:
            The product, or None if the id is invalid or the fetch fails.
        """
        product_id = parse_product_id(raw_id)
        if product_id is None:
            return None

        try:
            return await self.client.get_product(product_id)
        except UpstreamAppError as exc:
            logger.error(
                "catalog.fetch_by_id_failed",
                extra={
                    "product_id": product_id,
                    "error_code": exc.code,
                    "error_message": exc.message,
                    "details": exc.details,
                },
            )
            return None
