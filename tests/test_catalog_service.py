"""Tests for the catalog service."""

import asyncio

import httpx

from fruit_catalog.services.catalog import CatalogService


def test_fetch_decodes_fruits(catalog_client) -> None:
    service = CatalogService(catalog_client)

    fruits = asyncio.run(service.fetch())

    assert [fruit.name for fruit in fruits] == ["Apple", "Banana", "Cherry"]
    assert fruits[0].genus == "Malus"
    assert fruits[0].nutritions.calories == 52
    assert catalog_client.calls == 1


def test_fetch_network_failure_returns_empty(catalog_client) -> None:
    catalog_client.error = httpx.ConnectError("offline")
    service = CatalogService(catalog_client)

    assert asyncio.run(service.fetch()) == []


def test_fetch_invalid_payload_returns_empty(catalog_client) -> None:
    catalog_client.payload = [{"name": "Apple"}]
    service = CatalogService(catalog_client)

    assert asyncio.run(service.fetch()) == []


def test_fetch_rejects_negative_nutrition(catalog_client) -> None:
    catalog_client.payload[0]["nutritions"] = {
        "calories": -1,
        "fat": 0,
        "sugar": 0,
        "carbohydrates": 0,
        "protein": 0,
    }
    service = CatalogService(catalog_client)

    assert asyncio.run(service.fetch()) == []


def test_fetch_keeps_first_duplicate(catalog_client) -> None:
    duplicate = dict(catalog_client.payload[0], genus="Other")
    catalog_client.payload.append(duplicate)
    service = CatalogService(catalog_client)

    fruits = asyncio.run(service.fetch())

    assert [fruit.name for fruit in fruits] == ["Apple", "Banana", "Cherry"]
    assert fruits[0].genus == "Malus"
