"""Tests for HTTP-based adapters."""

import asyncio

import httpx
import pytest

from fruit_catalog.adapters.fruityvice_client import HttpxFruitCatalogClient


def test_fruit_catalog_client_fetches_all() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/api/fruit/all"
        return httpx.Response(200, json=[{"name": "Apple"}])

    transport = httpx.MockTransport(handler)
    async_client = httpx.AsyncClient(transport=transport)
    client = HttpxFruitCatalogClient(
        url="https://fruits.test/api/fruit/all", http_client=async_client
    )

    result = asyncio.run(client.fetch_all())

    assert result == [{"name": "Apple"}]


def test_fruit_catalog_client_raises_on_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "down"})

    transport = httpx.MockTransport(handler)
    async_client = httpx.AsyncClient(transport=transport)
    client = HttpxFruitCatalogClient(
        url="https://fruits.test/api/fruit/all", http_client=async_client
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.fetch_all())
