"""Pydantic response models for the catalog API."""

from datetime import datetime

from pydantic import BaseModel

from fruit_catalog.domain.fruits import NutritionInfo


class FruitView(BaseModel):
    """Fruit with its photo status."""

    name: str
    genus: str
    family: str
    order: str
    nutritions: NutritionInfo
    has_image: bool
    photo_date: datetime | None = None


class AttachmentView(BaseModel):
    """Metadata of a stored photo."""

    fruit_name: str
    captured_at: datetime
    size_bytes: int
