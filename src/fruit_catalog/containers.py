"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from fruit_catalog.adapters.filesystem_attachment_storage import (
    FileSystemAttachmentStorage,
)
from fruit_catalog.adapters.fruityvice_client import HttpxFruitCatalogClient
from fruit_catalog.config import Settings, parse_report_fields
from fruit_catalog.services.attachments import AttachmentStore
from fruit_catalog.services.catalog import CatalogService
from fruit_catalog.services.reports import ReportService
from fruit_catalog.services.session import CatalogSession


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session: CatalogSession
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    catalog_client = HttpxFruitCatalogClient.create(
        resolved_settings.fruit_api_url,
        timeout=resolved_settings.http_timeout_seconds,
    )
    storage = FileSystemAttachmentStorage(
        root=resolved_settings.storage_dir,
        manifest_filename=resolved_settings.manifest_filename,
    )
    report_service = ReportService(
        fields=parse_report_fields(resolved_settings.report_fields),
        timezone=(
            ZoneInfo(resolved_settings.report_timezone)
            if resolved_settings.report_timezone
            else None
        ),
        report_dir=resolved_settings.report_dir,
        report_filename=resolved_settings.report_filename,
    )
    session = CatalogSession(
        catalog_service=CatalogService(catalog_client),
        attachment_store=AttachmentStore(
            storage, jpeg_quality=resolved_settings.jpeg_quality
        ),
        report_service=report_service,
    )

    async def close_resources() -> None:
        await catalog_client.close()

    return AppContainer(
        settings=resolved_settings,
        session=session,
        close_resources=close_resources,
    )
