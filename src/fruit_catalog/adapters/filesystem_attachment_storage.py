"""File-system backed storage for attachment images and the manifest."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from fruit_catalog.domain.attachments import MANIFEST_ADAPTER, AttachmentManifest
from fruit_catalog.files import write_atomic
from fruit_catalog.services.attachments import AttachmentStorage

_logger = logging.getLogger(__name__)


@dataclass
class FileSystemAttachmentStorage(AttachmentStorage):
    """Stores image files and a JSON manifest side by side in one directory."""

    root: Path
    manifest_filename: str = "FruitImageInfo.json"

    @property
    def manifest_path(self) -> Path:
        """Location of the manifest document."""
        return self.root / self.manifest_filename

    def read_manifest(self) -> AttachmentManifest:
        """Return the persisted manifest, or an empty one if absent or corrupt."""
        try:
            raw = self.manifest_path.read_bytes()
        except FileNotFoundError:
            return {}
        try:
            return MANIFEST_ADAPTER.validate_json(raw)
        except ValidationError:
            _logger.warning("Ignoring unreadable manifest at %s", self.manifest_path)
            return {}

    def write_manifest(self, manifest: AttachmentManifest) -> None:
        """Replace the manifest atomically with deterministic JSON."""
        payload = MANIFEST_ADAPTER.dump_python(manifest, mode="json")
        data = json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False)
        write_atomic(self.manifest_path, data.encode("utf-8"))

    def read_image(self, filename: str) -> bytes:
        """Read a stored image file."""
        return (self.root / filename).read_bytes()

    def write_image(self, filename: str, data: bytes) -> None:
        """Write an image file, replacing any previous content."""
        write_atomic(self.root / filename, data)

    def delete_image(self, filename: str) -> None:
        """Delete a stored image file if it exists."""
        (self.root / filename).unlink(missing_ok=True)
