"""Catalog service that loads fruit records from the remote API."""

import logging
from dataclasses import dataclass

from pydantic import TypeAdapter, ValidationError

from fruit_catalog.adapters.fruityvice_client import FruitCatalogClient
from fruit_catalog.domain.fruits import FruitRecord

_FRUITS_ADAPTER: TypeAdapter[list[FruitRecord]] = TypeAdapter(list[FruitRecord])

_logger = logging.getLogger(__name__)


@dataclass
class CatalogService:
    """Fetches and decodes the fruit catalog."""

    client: FruitCatalogClient

    async def fetch(self) -> list[FruitRecord]:
        """Return the decoded catalog, or an empty list when loading fails."""
        try:
            payload = await self.client.fetch_all()
        except Exception:
            _logger.exception("Error loading fruits")
            return []
        try:
            fruits = _FRUITS_ADAPTER.validate_python(payload)
        except ValidationError as exc:
            _logger.error("Error decoding fruits: %s", exc)
            return []
        return _unique_by_name(fruits)


def _unique_by_name(fruits: list[FruitRecord]) -> list[FruitRecord]:
    """Keep the first record for each fruit name."""
    seen: set[str] = set()
    unique: list[FruitRecord] = []
    for fruit in fruits:
        if fruit.name in seen:
            _logger.warning("Ignoring duplicate fruit %s", fruit.name)
            continue
        seen.add(fruit.name)
        unique.append(fruit)
    return unique
