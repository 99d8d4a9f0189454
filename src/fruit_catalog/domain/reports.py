"""Layout models for generated reports."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    """Rectangle in page points, measured from the top-left corner."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class ReportPage:
    """Laid-out content of a single report page."""

    fruit_name: str
    lines: list[str]
    text_rect: Rect
    image_rect: Rect
    image_bytes: bytes
