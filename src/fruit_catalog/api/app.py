"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, HTTPException, Request, Response, status

from fruit_catalog.api.models import AttachmentView, FruitView
from fruit_catalog.app_logging import configure_logging
from fruit_catalog.containers import AppContainer
from fruit_catalog.domain.fruits import FruitRecord
from fruit_catalog.services.session import CatalogSession, StateChange


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    def log_change(change: StateChange) -> None:
        logger.info("State changed: %s %s", change.kind, change.fruit_name or "")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        session: CatalogSession = app.state.container.session
        unsubscribe = session.subscribe(log_change)
        await session.start()
        logger.info("Loaded %s fruits", len(session.fruits))
        yield
        unsubscribe()
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/fruits")
    async def list_fruits(request: Request) -> list[FruitView]:
        """Return the catalog with photo status."""
        session = _session(request)
        return [_fruit_view(session, fruit) for fruit in session.fruits]

    @app.post("/fruits/reload")
    async def reload_fruits(request: Request) -> dict[str, int]:
        """Refetch the catalog from the remote API."""
        session = _session(request)
        session.catalog_loaded(await session.catalog_service.fetch())
        return {"count": len(session.fruits)}

    @app.get("/fruits/{name}")
    async def fruit_detail(name: str, request: Request) -> FruitView:
        """Select a fruit and return it."""
        session = _session(request)
        fruit = session.select(name)
        if fruit is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _fruit_view(session, fruit)

    @app.put("/fruits/{name}/image")
    async def put_image(
        name: str, request: Request, captured_at: datetime | None = None
    ) -> AttachmentView:
        """Attach the request body as the fruit's photo."""
        session = _session(request)
        if session.find(name) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        body = await request.body()
        attachment = session.attachment_changed(name, body, captured_at)
        if attachment is None:
            raise HTTPException(
                status_code=422,
                detail="Invalid image format or corrupted file",
            )
        return AttachmentView(
            fruit_name=attachment.fruit_name,
            captured_at=attachment.captured_at,
            size_bytes=len(attachment.image_bytes),
        )

    @app.get("/fruits/{name}/image")
    async def get_image(name: str, request: Request) -> Response:
        """Return the stored photo as JPEG."""
        attachment = _session(request).attachment_store.get(name)
        if attachment is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return Response(content=attachment.image_bytes, media_type="image/jpeg")

    @app.delete("/fruits/{name}/image", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_image(name: str, request: Request) -> Response:
        """Clear the fruit's photo."""
        _session(request).attachment_changed(name, None)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/report")
    async def export_report(request: Request) -> Response:
        """Export the PDF report; empty response when nothing was exported."""
        container: AppContainer = request.app.state.container
        document = container.session.export_requested()
        if document is None:
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return Response(
            content=document,
            media_type="application/pdf",
            headers={
                "Content-Disposition": (
                    f'attachment; filename="{container.settings.report_filename}"'
                )
            },
        )

    return app


def _session(request: Request) -> CatalogSession:
    container: AppContainer = request.app.state.container
    return container.session


def _fruit_view(session: CatalogSession, fruit: FruitRecord) -> FruitView:
    attachment = session.attachment_store.get(fruit.name)
    return FruitView(
        name=fruit.name,
        genus=fruit.genus,
        family=fruit.family,
        order=fruit.order,
        nutritions=fruit.nutritions,
        has_image=attachment is not None,
        photo_date=attachment.captured_at if attachment else None,
    )
