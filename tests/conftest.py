"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any ``catalog_gateway`` import so the
module-level settings never pick up a developer's .env file.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("UPSTREAM_BASE_URL", "https://catalog.test/products")

from typing import Iterable, Iterator

import pytest
from fastapi.testclient import TestClient

from catalog_gateway.adapters.catalog.base import AbstractCatalogClient
from catalog_gateway.core.app_factory import create_app
from catalog_gateway.core.config import Settings
from catalog_gateway.core.errors import UpstreamAppError
from catalog_gateway.schemas.product import Product

PHONE_RECORD = {
    "id": 1,
    "name": "Phone",
    "price": 100,
    "category": "electronics",
    "description": "x",
}


class FakeClock:
    """Deterministic clock used to test expiration logic."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class FakeCatalogClient(AbstractCatalogClient):
    """In-memory upstream with call counters."""

    def __init__(self, products: Iterable[Product] = (), *, fail: bool = False) -> None:
        self.products = tuple(products)
        self.fail = fail
        self.list_calls = 0
        self.get_calls = 0

    async def list_products(self) -> tuple[Product, ...]:
        self.list_calls += 1
        if self.fail:
            raise UpstreamAppError(code="upstream_unreachable", message="Catalog request failed: ConnectTimeout")
        return self.products

    async def get_product(self, product_id: int) -> Product:
        self.get_calls += 1
        if self.fail:
            raise UpstreamAppError(code="upstream_unreachable", message="Catalog request failed: ConnectTimeout")
        for product in self.products:
            if product.id == product_id:
                return product
        raise UpstreamAppError(
            code="upstream_http_error",
            message="Catalog responded with HTTP 404",
            details={"http_status": 404},
        )


@pytest.fixture
def phone() -> Product:
    return Product.model_validate(PHONE_RECORD)


@pytest.fixture
def catalog_products(phone: Product) -> list[Product]:
    return [
        phone,
        Product(id=2, name="Laptop Pro", price=1299.99, category="electronics", description="Fast laptop"),
        Product(id=3, name="Red Lipstick", price=12.5, category="beauty", description="Matte finish"),
        Product(id=4, name="Phone Case", price=9, category="accessories", description="Silicone"),
    ]


@pytest.fixture
def fake_catalog(catalog_products: list[Product]) -> FakeCatalogClient:
    return FakeCatalogClient(catalog_products)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client(fake_catalog: FakeCatalogClient) -> Iterator[TestClient]:
    """Test client over an app wired to the fake upstream (lifespan enabled)."""
    app = create_app(Settings(), catalog_client=fake_catalog)
    with TestClient(app) as test_client:
        yield test_client
