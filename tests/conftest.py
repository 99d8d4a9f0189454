"""Shared test fixtures."""

import io
import struct
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import pytest
from PIL import Image

from fruit_catalog.adapters.filesystem_attachment_storage import (
    FileSystemAttachmentStorage,
)
from fruit_catalog.adapters.fruityvice_client import FruitCatalogClient
from fruit_catalog.config import Settings
from fruit_catalog.containers import AppContainer
from fruit_catalog.domain.attachments import AttachmentManifest
from fruit_catalog.domain.fruits import FruitRecord
from fruit_catalog.services.attachments import AttachmentStorage, AttachmentStore
from fruit_catalog.services.catalog import CatalogService
from fruit_catalog.services.reports import ReportService
from fruit_catalog.services.session import CatalogSession

FRUITS_PAYLOAD: list[dict[str, object]] = [
    {
        "name": "Apple",
        "id": 6,
        "family": "Rosaceae",
        "order": "Rosales",
        "genus": "Malus",
        "nutritions": {
            "calories": 52,
            "fat": 0.4,
            "sugar": 10.3,
            "carbohydrates": 11.4,
            "protein": 0.3,
        },
    },
    {
        "name": "Banana",
        "id": 1,
        "family": "Musaceae",
        "order": "Zingiberales",
        "genus": "Musa",
        "nutritions": {
            "calories": 96,
            "fat": 0.2,
            "sugar": 17.2,
            "carbohydrates": 22,
            "protein": 1,
        },
    },
    {
        "name": "Cherry",
        "id": 9,
        "family": "Rosaceae",
        "order": "Rosales",
        "genus": "Prunus",
        "nutritions": {
            "calories": 50,
            "fat": 0.3,
            "sugar": 8,
            "carbohydrates": 12,
            "protein": 1,
        },
    },
]


@dataclass
class FakeCatalogClient(FruitCatalogClient):
    """Fake catalog client returning a fixed payload or raising."""

    payload: list[dict[str, object]] = field(
        default_factory=lambda: [dict(item) for item in FRUITS_PAYLOAD]
    )
    error: Exception | None = None
    calls: int = 0

    async def fetch_all(self) -> list[dict[str, object]]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class InMemoryAttachmentStorage(AttachmentStorage):
    """In-memory attachment storage for tests."""

    manifest: AttachmentManifest = field(default_factory=dict)
    files: dict[str, bytes] = field(default_factory=dict)
    manifest_writes: int = 0
    fail_manifest_writes: bool = False

    def read_manifest(self) -> AttachmentManifest:
        return dict(self.manifest)

    def write_manifest(self, manifest: AttachmentManifest) -> None:
        if self.fail_manifest_writes:
            raise OSError("disk full")
        self.manifest = dict(manifest)
        self.manifest_writes += 1

    def read_image(self, filename: str) -> bytes:
        if filename not in self.files:
            raise FileNotFoundError(filename)
        return self.files[filename]

    def write_image(self, filename: str, data: bytes) -> None:
        self.files[filename] = data

    def delete_image(self, filename: str) -> None:
        self.files.pop(filename, None)


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    def _make(
        width: int = 200,
        height: int = 100,
        color: tuple[int, int, int] = (200, 30, 30),
        image_format: str = "PNG",
    ) -> bytes:
        buffer = io.BytesIO()
        Image.new("RGB", (width, height), color).save(buffer, format=image_format)
        return buffer.getvalue()

    return _make


@pytest.fixture
def corrupt_png() -> bytes:
    """PNG whose IHDR chunk is too short for Pillow to parse."""
    return (
        b"\x89PNG\r\n\x1a\n"
        + struct.pack(">I", 4)
        + b"IHDR"
        + b"\x00\x00\x00\x01"
        + b"\x00\x00\x00\x00"
    )


@pytest.fixture
def fruits() -> list[FruitRecord]:
    return [FruitRecord.model_validate(item) for item in FRUITS_PAYLOAD]


@pytest.fixture
def captured_at() -> datetime:
    return datetime(2026, 10, 18, 15, 4, tzinfo=UTC)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        fruit_api_url="https://fruits.test/api/fruit/all",
        storage_dir=tmp_path / "data",
        report_dir=tmp_path / "reports",
        report_timezone="UTC",
    )


@pytest.fixture
def catalog_client() -> FakeCatalogClient:
    return FakeCatalogClient()


@pytest.fixture
def storage(settings: Settings) -> FileSystemAttachmentStorage:
    return FileSystemAttachmentStorage(
        root=settings.storage_dir, manifest_filename=settings.manifest_filename
    )


@pytest.fixture
def memory_storage() -> InMemoryAttachmentStorage:
    return InMemoryAttachmentStorage()


@pytest.fixture
def store(storage: FileSystemAttachmentStorage) -> AttachmentStore:
    return AttachmentStore(storage)


@pytest.fixture
def report_service(settings: Settings) -> ReportService:
    return ReportService(timezone=UTC, report_dir=settings.report_dir)


@pytest.fixture
def container(
    settings: Settings,
    catalog_client: FakeCatalogClient,
    store: AttachmentStore,
    report_service: ReportService,
) -> AppContainer:
    session = CatalogSession(
        catalog_service=CatalogService(catalog_client),
        attachment_store=store,
        report_service=report_service,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        session=session,
        close_resources=close_resources,
    )
