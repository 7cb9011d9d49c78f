"""HTTP adapter for the remote product catalog."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from catalog_gateway.adapters.catalog.base import AbstractCatalogClient
from catalog_gateway.core.errors import UpstreamAppError
from catalog_gateway.schemas.product import Product
from catalog_gateway.utils.validators import validate_product, validate_product_list

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS: dict[str, str] = {
    "Accept": "application/json",
    "User-Agent": "catalog-gateway/0.1",
}


class HttpCatalogClient(AbstractCatalogClient):
    """Catalog client over ``httpx``.

    Collection endpoint is ``GET <base_url>``, single records are
    ``GET <base_url>/<id>``. One attempt per call, no retries.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 5.0,
        products_field: str = "products",
        http: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the catalog client.

        Args:
            base_url: Catalog collection URL.
            timeout_seconds: Transport timeout for an owned client.
            products_field: Envelope key of the product array.
            http: Optional shared ``httpx.AsyncClient``; when omitted one is
                created and owned (closed by ``aclose``).
        """
        self.base_url = base_url.rstrip("/")
        self.products_field = products_field
        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(
            timeout=timeout_seconds,
            headers=_DEFAULT_HEADERS.copy(),
        )

    async def _get_json(self, url: str) -> Any:
        """Issue one GET and decode the JSON body.

        Any failure to obtain or decode a response is reported as an
        upstream error, including invalid URLs, a closed client and bodies
        nested too deeply to decode.

        Raises:
            UpstreamAppError: On transport error, non-2xx status or invalid JSON.
        """
        try:
            response = await self._client.get(url)
        except Exception as exc:
            raise UpstreamAppError(
                code="upstream_unreachable",
                message=f"Catalog request failed: {type(exc).__name__}",
                details={"url": url},
            ) from exc

        if response.is_error:
            raise UpstreamAppError(
                code="upstream_http_error",
                message=f"Catalog responded with HTTP {response.status_code}",
                details={"url": url, "http_status": response.status_code},
            )

        try:
            return response.json()
        except (ValueError, RecursionError) as exc:
            raise UpstreamAppError(
                code="upstream_invalid_json",
                message="Catalog response body is not valid JSON",
                details={"url": url, "http_status": response.status_code},
            ) from exc

    async def list_products(self) -> tuple[Product, ...]:
        payload = await self._get_json(self.base_url)
        products = validate_product_list(payload, products_field=self.products_field)
        logger.info("catalog.list_fetched", extra={"count": len(products)})
        return products

    async def get_product(self, product_id: int) -> Product:
        payload = await self._get_json(f"{self.base_url}/{product_id}")
        return validate_product(payload)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
