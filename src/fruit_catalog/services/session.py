"""Observable catalog session shared by the presentation layer."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal

from fruit_catalog.domain.attachments import ImageAttachment
from fruit_catalog.domain.fruits import FruitRecord
from fruit_catalog.services.attachments import AttachmentStore
from fruit_catalog.services.catalog import CatalogService
from fruit_catalog.services.reports import ReportService

ChangeKind = Literal["catalog", "selection", "attachment"]

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateChange:
    """Notification published after every session mutation."""

    kind: ChangeKind
    fruit_name: str | None = None


Subscriber = Callable[[StateChange], None]


@dataclass
class CatalogSession:
    """Holds the catalog, photo store and selection, notifying subscribers."""

    catalog_service: CatalogService
    attachment_store: AttachmentStore
    report_service: ReportService
    fruits: list[FruitRecord] = field(default_factory=list)
    selected: FruitRecord | None = None
    _subscribers: list[Subscriber] = field(default_factory=list, repr=False)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a subscriber and return a callable that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def start(self) -> None:
        """Fetch the catalog, then load persisted photos."""
        self.catalog_loaded(await self.catalog_service.fetch())
        self.attachment_store.load_all()
        self._publish(StateChange("attachment"))

    def catalog_loaded(self, fruits: list[FruitRecord]) -> None:
        """Swap in a freshly fetched catalog."""
        self.fruits = list(fruits)
        if self.selected is not None:
            self.selected = self.find(self.selected.name)
        self._publish(StateChange("catalog"))

    def find(self, name: str) -> FruitRecord | None:
        """Return the catalog fruit with the given name."""
        for fruit in self.fruits:
            if fruit.name == name:
                return fruit
        return None

    def select(self, name: str | None) -> FruitRecord | None:
        """Select a fruit by name; unknown names clear the selection."""
        self.selected = self.find(name) if name is not None else None
        self._publish(
            StateChange("selection", self.selected.name if self.selected else None)
        )
        return self.selected

    def attachment_changed(
        self,
        fruit_name: str,
        image_bytes: bytes | None,
        timestamp: datetime | None = None,
    ) -> ImageAttachment | None:
        """Store or clear a fruit's photo and notify subscribers."""
        attachment: ImageAttachment | None = None
        if image_bytes is None:
            self.attachment_store.remove(fruit_name)
        else:
            attachment = self.attachment_store.put(
                fruit_name, image_bytes, timestamp or datetime.now(tz=UTC)
            )
        self._publish(StateChange("attachment", fruit_name))
        return attachment

    def export_requested(self) -> bytes | None:
        """Export a report for the current catalog and photos."""
        path = self.report_service.export(
            self.fruits, self.attachment_store.snapshot()
        )
        if path is None:
            return None
        try:
            return path.read_bytes()
        except OSError:
            _logger.exception("Could not read exported report at %s", path)
            return None

    def _publish(self, change: StateChange) -> None:
        for callback in list(self._subscribers):
            try:
                callback(change)
            except Exception:
                _logger.exception("Subscriber failed handling %s", change.kind)
