"""PDF report generation for fruits with attached photos."""

import io
import logging
import tempfile
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path

from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from fruit_catalog.config import DEFAULT_REPORT_FIELDS, REPORT_FIELD_CHOICES
from fruit_catalog.domain.attachments import ImageAttachment
from fruit_catalog.domain.fruits import FruitRecord
from fruit_catalog.domain.reports import Rect, ReportPage
from fruit_catalog.files import write_atomic
from fruit_catalog.services.images import ImageDecodeError, image_size

PAGE_WIDTH = 612.0
PAGE_HEIGHT = 792.0
MARGIN = 20.0
TEXT_HEIGHT = 120.0
IMAGE_GAP = 10.0
BOTTOM_MARGIN = 50.0
FONT_NAME = "Helvetica"
FONT_SIZE = 16.0
LINE_HEIGHT = FONT_SIZE * 1.2

_FIELD_LABELS = {
    "name": "Name",
    "family": "Family",
    "genus": "Genus",
    "order": "Order",
    "calories": "Calories",
    "carbohydrates": "Carbohydrates",
    "protein": "Protein",
    "fat": "Fat",
    "sugar": "Sugar",
}

_logger = logging.getLogger(__name__)


@dataclass
class ReportService:
    """Lays out one page per photographed fruit and renders it as PDF."""

    fields: Sequence[str] = DEFAULT_REPORT_FIELDS
    timezone: tzinfo | None = None
    report_dir: Path | None = None
    report_filename: str = "FruitReport.pdf"
    page_width: float = PAGE_WIDTH
    page_height: float = PAGE_HEIGHT

    def __post_init__(self) -> None:
        unknown = [name for name in self.fields if name not in REPORT_FIELD_CHOICES]
        if unknown:
            _logger.warning("Ignoring unknown report fields: %s", ", ".join(unknown))
        self.fields = tuple(
            name for name in self.fields if name in REPORT_FIELD_CHOICES
        )

    def layout(
        self,
        fruits: Sequence[FruitRecord],
        attachments: Mapping[str, ImageAttachment],
    ) -> list[ReportPage]:
        """Return page layouts in catalog order, skipping fruits without photos."""
        pages: list[ReportPage] = []
        for fruit in fruits:
            attachment = attachments.get(fruit.name)
            if attachment is None:
                continue
            try:
                size = image_size(attachment.image_bytes)
            except ImageDecodeError:
                _logger.warning("Skipping report page for %s: bad image", fruit.name)
                continue
            pages.append(self._layout_page(fruit, attachment, size))
        return pages

    def render(self, pages: Sequence[ReportPage]) -> bytes:
        """Render laid-out pages into a single PDF document."""
        buffer = io.BytesIO()
        pdf = canvas.Canvas(
            buffer, pagesize=(self.page_width, self.page_height), invariant=1
        )
        pdf.setCreator("Fruit Catalog")
        pdf.setTitle("Fruit Report")
        for page in pages:
            pdf.setFont(FONT_NAME, FONT_SIZE)
            baseline = self.page_height - page.text_rect.y - FONT_SIZE
            for line in page.lines:
                pdf.drawString(page.text_rect.x, baseline, line)
                baseline -= LINE_HEIGHT
            rect = page.image_rect
            pdf.drawImage(
                ImageReader(io.BytesIO(page.image_bytes)),
                rect.x,
                self.page_height - rect.y - rect.height,
                width=rect.width,
                height=rect.height,
            )
            pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    def generate(
        self,
        fruits: Sequence[FruitRecord],
        attachments: Mapping[str, ImageAttachment],
    ) -> bytes | None:
        """Build the report document, or None when no fruit has a photo."""
        pages = self.layout(fruits, attachments)
        if not pages:
            _logger.info("No photographed fruits to export")
            return None
        return self.render(pages)

    def export(
        self,
        fruits: Sequence[FruitRecord],
        attachments: Mapping[str, ImageAttachment],
    ) -> Path | None:
        """Generate the report and write it to the export location."""
        document = self.generate(fruits, attachments)
        if document is None:
            return None
        path = self.export_path
        try:
            write_atomic(path, document)
        except OSError:
            _logger.exception("Could not save PDF report to %s", path)
            return None
        _logger.info("Exported report with %s bytes to %s", len(document), path)
        return path

    @property
    def export_path(self) -> Path:
        """Where exported reports are written."""
        if self.report_dir is None:
            return Path(tempfile.gettempdir()) / self.report_filename
        return self.report_dir / self.report_filename

    def _layout_page(
        self,
        fruit: FruitRecord,
        attachment: ImageAttachment,
        size: tuple[int, int],
    ) -> ReportPage:
        text_width = self.page_width - 2 * MARGIN
        lines = self._text_lines(fruit, attachment, text_width)
        text_rect = Rect(
            x=MARGIN,
            y=MARGIN,
            width=text_width,
            height=max(TEXT_HEIGHT, len(lines) * LINE_HEIGHT),
        )
        image_top = text_rect.y + text_rect.height + IMAGE_GAP
        width, height = fit_image_rect(
            size,
            max_width=text_width,
            max_height=self.page_height - image_top - BOTTOM_MARGIN,
        )
        image_rect = Rect(
            x=(self.page_width - width) / 2,
            y=image_top,
            width=width,
            height=height,
        )
        return ReportPage(
            fruit_name=fruit.name,
            lines=lines,
            text_rect=text_rect,
            image_rect=image_rect,
            image_bytes=attachment.image_bytes,
        )

    def _text_lines(
        self, fruit: FruitRecord, attachment: ImageAttachment, width: float
    ) -> list[str]:
        text = [
            f"{_FIELD_LABELS[name]}: {field_value(fruit, name)}" for name in self.fields
        ]
        photo_date = format_photo_date(attachment.captured_at, self.timezone)
        text.append(f"Photo Date: {photo_date}")
        lines: list[str] = []
        for entry in text:
            lines.extend(simpleSplit(entry, FONT_NAME, FONT_SIZE, width))
        return lines


def fit_image_rect(
    size: tuple[int, int], max_width: float, max_height: float
) -> tuple[float, float]:
    """Scale an image to max_width, shrinking to max_height if it overflows."""
    pixel_width, pixel_height = size
    aspect_ratio = pixel_width / pixel_height
    width = max_width
    height = width / aspect_ratio
    if height > max_height:
        height = max_height
        width = height * aspect_ratio
    return width, height


def field_value(fruit: FruitRecord, name: str) -> str:
    """Return the display text for a fruit field or nutrition amount."""
    if name in {"name", "family", "genus", "order"}:
        return getattr(fruit, name)
    return f"{getattr(fruit.nutritions, name):g}"


def format_photo_date(value: datetime, tz: tzinfo | None = None) -> str:
    """Format as a medium date with a short time, e.g. 'Oct 18, 2026 at 3:04 PM'."""
    local = value.astimezone(tz)
    hour = local.hour % 12 or 12
    return f"{local:%b} {local.day}, {local.year} at {hour}:{local:%M} {local:%p}"
