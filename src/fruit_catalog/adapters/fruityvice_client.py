"""Fruityvice catalog API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class FruitCatalogClient(Protocol):
    """Interface for fetching the raw fruit catalog."""

    async def fetch_all(self) -> list[dict[str, object]]:
        """Return every fruit as raw API data."""


@dataclass
class HttpxFruitCatalogClient(FruitCatalogClient):
    """HTTPX-backed Fruityvice client."""

    url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(cls, url: str, timeout: float = 15) -> "HttpxFruitCatalogClient":
        """Create a catalog client with a managed httpx session."""
        return cls(url=url, http_client=httpx.AsyncClient(), timeout=timeout)

    async def fetch_all(self) -> list[dict[str, object]]:
        """Fetch the full fruit list."""
        response = await self.http_client.get(self.url, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
