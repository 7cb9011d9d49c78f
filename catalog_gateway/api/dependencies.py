"""Request-scoped accessors for the services owned by the application."""

from __future__ import annotations

from fastapi import Request

from catalog_gateway.services.catalog_service import CatalogService
from catalog_gateway.services.query_service import ProductQueryService


def get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog_service


def get_query_service(request: Request) -> ProductQueryService:
    return request.app.state.query_service
