from __future__ import annotations

import httpx
import pytest
import respx

from catalog_gateway.adapters.catalog.http_client import HttpCatalogClient
from catalog_gateway.core.errors import UpstreamAppError
from conftest import PHONE_RECORD

BASE_URL = "https://catalog.test/products"


@pytest.mark.asyncio
async def test_list_products_unwraps_envelope() -> None:
    async with httpx.AsyncClient() as http:
        client = HttpCatalogClient(BASE_URL, http=http)
        with respx.mock:
            route = respx.get(BASE_URL).mock(
                return_value=httpx.Response(200, json={"products": [PHONE_RECORD], "total": 1})
            )
            products = await client.list_products()

            assert route.call_count == 1
            assert [p.name for p in products] == ["Phone"]


@pytest.mark.asyncio
async def test_get_product_hits_id_path() -> None:
    async with httpx.AsyncClient() as http:
        client = HttpCatalogClient(f"{BASE_URL}/", http=http)
        with respx.mock:
            route = respx.get(f"{BASE_URL}/1").mock(return_value=httpx.Response(200, json=PHONE_RECORD))
            product = await client.get_product(1)

            assert route.called
            assert product.id == 1


@pytest.mark.asyncio
async def test_transport_failure_raises_upstream_error() -> None:
    async with httpx.AsyncClient() as http:
        client = HttpCatalogClient(BASE_URL, http=http)
        with respx.mock:
            respx.get(BASE_URL).mock(side_effect=httpx.ConnectTimeout("timed out"))

            with pytest.raises(UpstreamAppError) as exc_info:
                await client.list_products()

    assert exc_info.value.code == "upstream_unreachable"
    assert exc_info.value.details == {"url": BASE_URL}


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [404, 500, 503])
async def test_error_status_raises_upstream_error(status_code: int) -> None:
    async with httpx.AsyncClient() as http:
        client = HttpCatalogClient(BASE_URL, http=http)
        with respx.mock:
            respx.get(f"{BASE_URL}/99").mock(return_value=httpx.Response(status_code, json={"message": "nope"}))

            with pytest.raises(UpstreamAppError) as exc_info:
                await client.get_product(99)

    assert exc_info.value.code == "upstream_http_error"
    assert exc_info.value.details["http_status"] == status_code


@pytest.mark.asyncio
async def test_non_json_body_raises_upstream_error() -> None:
    async with httpx.AsyncClient() as http:
        client = HttpCatalogClient(BASE_URL, http=http)
        with respx.mock:
            respx.get(BASE_URL).mock(return_value=httpx.Response(200, text="<html>maintenance</html>"))

            with pytest.raises(UpstreamAppError) as exc_info:
                await client.list_products()

    assert exc_info.value.code == "upstream_invalid_json"


@pytest.mark.asyncio
async def test_deeply_nested_body_raises_upstream_error() -> None:
    async with httpx.AsyncClient() as http:
        client = HttpCatalogClient(BASE_URL, http=http)
        with respx.mock:
            respx.get(BASE_URL).mock(return_value=httpx.Response(200, content=b"[" * 200_000))

            with pytest.raises(UpstreamAppError) as exc_info:
                await client.list_products()

    assert exc_info.value.code == "upstream_invalid_json"


@pytest.mark.asyncio
async def test_unexpected_transport_exception_raises_upstream_error() -> None:
    async with httpx.AsyncClient() as http:
        client = HttpCatalogClient(BASE_URL, http=http)
        with respx.mock:
            respx.get(BASE_URL).mock(side_effect=RuntimeError("boom"))

            with pytest.raises(UpstreamAppError) as exc_info:
                await client.list_products()

    assert exc_info.value.code == "upstream_unreachable"
    assert "RuntimeError" in exc_info.value.message


@pytest.mark.asyncio
async def test_closed_client_raises_upstream_error() -> None:
    http = httpx.AsyncClient()
    await http.aclose()
    client = HttpCatalogClient(BASE_URL, http=http)

    with pytest.raises(UpstreamAppError) as exc_info:
        await client.get_product(1)

    assert exc_info.value.code == "upstream_unreachable"


@pytest.mark.asyncio
async def test_schema_drift_raises_upstream_error() -> None:
    async with httpx.AsyncClient() as http:
        client = HttpCatalogClient(BASE_URL, http=http)
        with respx.mock:
            respx.get(BASE_URL).mock(
                return_value=httpx.Response(200, json={"products": [{"id": 1, "name": "Phone"}]})
            )

            with pytest.raises(UpstreamAppError) as exc_info:
                await client.list_products()

    assert exc_info.value.code == "invalid_product_payload"


@pytest.mark.asyncio
async def test_owned_client_is_closed_but_shared_client_is_not() -> None:
    owned = HttpCatalogClient(BASE_URL)
    await owned.aclose()
    assert owned._client.is_closed

    async with httpx.AsyncClient() as http:
        shared = HttpCatalogClient(BASE_URL, http=http)
        await shared.aclose()
        assert not http.is_closed
