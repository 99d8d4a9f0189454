"""Fruit catalog models decoded from the Fruityvice API."""

from pydantic import BaseModel, ConfigDict, Field


class NutritionInfo(BaseModel):
    """Nutrition amounts per 100 g of fruit."""

    model_config = ConfigDict(frozen=True)

    carbohydrates: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    fat: float = Field(ge=0.0)
    calories: float = Field(ge=0.0)
    sugar: float = Field(ge=0.0)


class FruitRecord(BaseModel):
    """Single fruit from the catalog, keyed by its name."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    genus: str
    family: str
    order: str
    nutritions: NutritionInfo
