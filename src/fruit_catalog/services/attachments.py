"""Image attachment store keyed by fruit name."""

import hashlib
import logging
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from fruit_catalog.domain.attachments import (
    AttachmentManifest,
    ImageAttachment,
    ManifestEntry,
)
from fruit_catalog.services.images import ImageDecodeError, decode_image, encode_jpeg

IMAGE_EXTENSION = ".jpg"

_SLUG_PATTERN = re.compile(r"[^a-z0-9_-]+")

_logger = logging.getLogger(__name__)


class AttachmentStorage(Protocol):
    """Persistence interface for attachment images and their manifest."""

    def read_manifest(self) -> AttachmentManifest:
        """Return the persisted manifest."""

    def write_manifest(self, manifest: AttachmentManifest) -> None:
        """Replace the persisted manifest."""

    def read_image(self, filename: str) -> bytes:
        """Return stored image bytes."""

    def write_image(self, filename: str, data: bytes) -> None:
        """Store image bytes under a file name."""

    def delete_image(self, filename: str) -> None:
        """Delete a stored image, ignoring missing files."""


@dataclass
class AttachmentStore:
    """Keeps at most one photo per fruit, mirrored to durable storage."""

    storage: AttachmentStorage
    jpeg_quality: int = 80
    _entries: dict[str, ManifestEntry] = field(default_factory=dict, repr=False)
    _images: dict[str, bytes] = field(default_factory=dict, repr=False)

    def put(
        self, fruit_name: str, image_bytes: bytes, timestamp: datetime
    ) -> ImageAttachment | None:
        """Encode and store a photo for a fruit, replacing any previous one."""
        try:
            encoded = encode_jpeg(image_bytes, quality=self.jpeg_quality)
        except ImageDecodeError:
            _logger.warning("Skipping undecodable image for %s", fruit_name)
            return None

        captured_at = _as_aware(timestamp)
        filename = self._filename_for(fruit_name)
        try:
            self.storage.write_image(filename, encoded)
        except OSError:
            _logger.exception("Failed to save image for %s", fruit_name)
            return None

        previous = self._entries.get(fruit_name)
        self._entries[fruit_name] = ManifestEntry(
            filename=filename, timestamp=captured_at
        )
        self._images[fruit_name] = encoded
        persisted = self.persist()
        if persisted and previous is not None and previous.filename != filename:
            self._delete_file(previous.filename)
        return ImageAttachment(
            fruit_name=fruit_name, image_bytes=encoded, captured_at=captured_at
        )

    def remove(self, fruit_name: str) -> None:
        """Forget a fruit's photo and delete its backing file."""
        entry = self._entries.pop(fruit_name, None)
        self._images.pop(fruit_name, None)
        if entry is None:
            return
        self.persist()
        self._delete_file(entry.filename)

    def get(self, fruit_name: str) -> ImageAttachment | None:
        """Return the photo attached to a fruit, if any."""
        entry = self._entries.get(fruit_name)
        image_bytes = self._images.get(fruit_name)
        if entry is None or image_bytes is None:
            return None
        return ImageAttachment(
            fruit_name=fruit_name,
            image_bytes=image_bytes,
            captured_at=entry.timestamp,
        )

    def snapshot(self) -> dict[str, ImageAttachment]:
        """Return a copy of every live attachment keyed by fruit name."""
        attachments: dict[str, ImageAttachment] = {}
        for name in self._entries:
            attachment = self.get(name)
            if attachment is not None:
                attachments[name] = attachment
        return attachments

    def load_all(self) -> int:
        """Load the manifest and every readable image; return the count loaded."""
        try:
            manifest = self.storage.read_manifest()
        except OSError:
            _logger.exception("Failed to read attachment manifest")
            return 0

        entries: dict[str, ManifestEntry] = {}
        images: dict[str, bytes] = {}
        for fruit_name, entry in manifest.items():
            try:
                data = self.storage.read_image(entry.filename)
                decode_image(data)
            except (OSError, ImageDecodeError):
                _logger.warning(
                    "Dropping attachment for %s: %s is unreadable",
                    fruit_name,
                    entry.filename,
                )
                continue
            entries[fruit_name] = entry
            images[fruit_name] = data

        self._entries = entries
        self._images = images
        _logger.info("Loaded %s attachments", len(entries))
        return len(entries)

    def persist(self) -> bool:
        """Write the current manifest; return whether the write succeeded."""
        manifest: AttachmentManifest = dict(self._entries)
        try:
            self.storage.write_manifest(manifest)
        except OSError:
            _logger.exception("Failed to save attachment manifest")
            return False
        return True

    def __contains__(self, fruit_name: object) -> bool:
        return fruit_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def _filename_for(self, fruit_name: str) -> str:
        """Derive a stable file name, disambiguating names that slug alike."""
        stem = _SLUG_PATTERN.sub("-", fruit_name.strip().lower()).strip("-") or "fruit"
        candidate = f"{stem}{IMAGE_EXTENSION}"
        taken = {
            entry.filename
            for name, entry in self._entries.items()
            if name != fruit_name
        }
        if candidate not in taken:
            return candidate
        digest = hashlib.sha1(fruit_name.encode("utf-8")).hexdigest()[:8]
        return f"{stem}-{digest}{IMAGE_EXTENSION}"

    def _delete_file(self, filename: str) -> None:
        if filename in {entry.filename for entry in self._entries.values()}:
            return
        try:
            self.storage.delete_image(filename)
        except OSError:
            _logger.warning("Failed to delete orphaned image %s", filename)


def _as_aware(timestamp: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=UTC)
    return timestamp
