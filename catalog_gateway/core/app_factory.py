"""Application factory for the catalog gateway.

Builds the FastAPI app and owns the lifecycle of its stateful services: the
TTL cache (and its sweeper), the upstream catalog client, the query services
and the rate limiter all live on ``app.state`` from startup to shutdown.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from catalog_gateway.adapters.catalog.base import AbstractCatalogClient
from catalog_gateway.adapters.catalog.http_client import HttpCatalogClient
from catalog_gateway.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from catalog_gateway.api.routes import health_router, products_router
from catalog_gateway.core.config import Settings
from catalog_gateway.core.config import settings as default_settings
from catalog_gateway.core.exception_handlers import setup_exception_handlers
from catalog_gateway.core.logging import configure_logging
from catalog_gateway.core.middleware import request_id_middleware
from catalog_gateway.core.openapi import apply_openapi_customizations
from catalog_gateway.core.rate_limit import rate_limit_middleware
from catalog_gateway.services.catalog_service import CatalogService
from catalog_gateway.services.query_service import ProductQueryService
from catalog_gateway.utils.ttl_cache import TTLCache

logger = logging.getLogger(__name__)


def _build_lifespan(settings: Settings, catalog_client: AbstractCatalogClient | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        cache = TTLCache(
            ttl_seconds=settings.cache.ttl_seconds,
            check_period_seconds=settings.cache.check_period_seconds,
        )
        client = catalog_client or HttpCatalogClient(
            settings.upstream.base_url,
            timeout_seconds=settings.upstream.timeout_seconds,
            products_field=settings.upstream.products_field,
        )
        catalog = CatalogService(client=client, cache=cache)

        app.state.cache = cache
        app.state.catalog_client = client
        app.state.catalog_service = catalog
        app.state.query_service = ProductQueryService(catalog=catalog, cache=cache)
        app.state.rate_limiter = InMemoryFixedWindowRateLimiter(
            limit=settings.app.rate_limit_requests,
            window_seconds=settings.app.rate_limit_window_seconds,
        )

        cache.start()
        logger.info(
            "app.started",
            extra={
                "upstream_url": settings.upstream.base_url,
                "cache_ttl_s": settings.cache.ttl_seconds,
                "rate_limit": settings.app.rate_limit_requests,
                "rate_window_s": settings.app.rate_limit_window_seconds,
            },
        )
        try:
            yield
        finally:
            await cache.stop()
            await client.aclose()
            logger.info("app.stopped")

    return lifespan


def create_app(
    settings: Settings | None = None,
    *,
    catalog_client: AbstractCatalogClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        settings: Settings to build from; the process-wide settings by default.
        catalog_client: Optional upstream client to use instead of the HTTP one.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    settings = settings or default_settings

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Catalog Gateway",
        description=(
            "Read-only gateway over a remote product catalog: cached listings, "
            "name search and category filters, with input/payload validation "
            "and per-client rate limiting."
        ),
        version="0.1.0",
        debug=settings.app.debug,
        lifespan=_build_lifespan(settings, catalog_client),
    )
    app.state.settings = settings

    # Registered first so it runs inside the request-id middleware
    app.middleware("http")(rate_limit_middleware)
    app.middleware("http")(request_id_middleware)
    setup_exception_handlers(app)

    app.include_router(products_router)
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
