from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from catalog_gateway.api.dependencies import get_catalog_service, get_query_service
from catalog_gateway.core.errors import NotFoundAppError
from catalog_gateway.schemas.product import ErrorResponse, Product
from catalog_gateway.services.catalog_service import CatalogService
from catalog_gateway.services.query_service import ProductQueryService
from catalog_gateway.utils.validators import validate_category, validate_search_query

router = APIRouter(prefix="/products", tags=["Products"])

CatalogDep = Annotated[CatalogService, Depends(get_catalog_service)]
QueryDep = Annotated[ProductQueryService, Depends(get_query_service)]


@router.get("", response_model=list[Product])
async def list_products(catalog: CatalogDep) -> list[Product]:
    """Return every product in the catalog.

    Served from cache within the TTL. An upstream failure yields an empty
    list rather than an error.
    """
    return list(await catalog.fetch_all_products())


# Declared before "/{product_id}" so "search" and "category" are not taken as ids.
@router.get(
    "/search",
    response_model=list[Product],
    responses={400: {"model": ErrorResponse}},
)
async def search_products(
    service: QueryDep,
    query: Annotated[str | None, Query(description="Name fragment, at least 3 characters.")] = None,
) -> list[Product]:
    """Search products by name (case-insensitive substring match).

    Raises:
        ValidationAppError: 400 when ``query`` is missing or shorter than 3 characters.
    """
    params = validate_search_query({"query": query})
    return list(await service.search_by_name(params.query))


@router.get(
    "/category/{category}",
    response_model=list[Product],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def products_by_category(category: str, service: QueryDep) -> list[Product]:
    """List products of a category (case-insensitive exact match).

    Raises:
        ValidationAppError: 400 when ``category`` is shorter than 3 characters.
        NotFoundAppError: 404 when the category has no products.
    """
    params = validate_category({"category": category})
    products = await service.filter_by_category(params.category)
    if not products:
        raise NotFoundAppError(
            code="category_empty",
            message="No products found for this category",
        )
    return list(products)


@router.get(
    "/{product_id}",
    response_model=Product,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(product_id: str, catalog: CatalogDep) -> Product:
    """Fetch a single product directly from the upstream catalog.

    Raises:
        NotFoundAppError: 404 for an invalid id, an unknown product or an
            upstream failure.
    """
    product = await catalog.fetch_product_by_id(product_id)
    if product is None:
        raise NotFoundAppError(code="product_not_found", message="Product not found")
    return product
