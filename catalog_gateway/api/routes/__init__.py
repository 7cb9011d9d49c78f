from __future__ import annotations

from catalog_gateway.api.routes.health import router as health_router
from catalog_gateway.api.routes.products import router as products_router

__all__ = ["health_router", "products_router"]
