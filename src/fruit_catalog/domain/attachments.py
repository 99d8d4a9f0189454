"""Domain models for fruit photo attachments."""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, TypeAdapter


@dataclass(frozen=True)
class ImageAttachment:
    """Stored photo for a fruit with its capture time."""

    fruit_name: str
    image_bytes: bytes
    captured_at: datetime


class ManifestEntry(BaseModel):
    """Manifest row pointing at a stored image file."""

    model_config = ConfigDict(frozen=True)

    filename: str
    timestamp: datetime


AttachmentManifest = dict[str, ManifestEntry]

MANIFEST_ADAPTER: TypeAdapter[AttachmentManifest] = TypeAdapter(AttachmentManifest)
