"""Application configuration."""

import os
import tempfile
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_REPORT_FIELDS: tuple[str, ...] = ("name", "family", "genus", "order")
REPORT_FIELD_CHOICES: frozenset[str] = frozenset(
    {
        "name",
        "family",
        "genus",
        "order",
        "calories",
        "carbohydrates",
        "protein",
        "fat",
        "sugar",
    }
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    fruit_api_url: str = "https://www.fruityvice.com/api/fruit/all"
    http_timeout_seconds: float = 15
    storage_dir: Path = Path("data")
    manifest_filename: str = "FruitImageInfo.json"
    jpeg_quality: int = Field(default=80, ge=1, le=95)
    report_dir: Path = Path(tempfile.gettempdir())
    report_filename: str = "FruitReport.pdf"
    report_fields: str | None = None
    report_timezone: str | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="FRUIT_CATALOG_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_report_fields(raw: str | None) -> tuple[str, ...]:
    """Parse the comma-separated list of fruit fields drawn into reports."""
    if raw is None:
        return DEFAULT_REPORT_FIELDS
    fields: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip().lower()
        if value in REPORT_FIELD_CHOICES and value not in fields:
            fields.append(value)
    return tuple(fields) or DEFAULT_REPORT_FIELDS
