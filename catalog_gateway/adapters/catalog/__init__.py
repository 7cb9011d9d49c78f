from catalog_gateway.adapters.catalog.base import AbstractCatalogClient
from catalog_gateway.adapters.catalog.http_client import HttpCatalogClient

__all__ = ["AbstractCatalogClient", "HttpCatalogClient"]
