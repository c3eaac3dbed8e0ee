"""Slide-deck export.

Builds a PowerPoint deck with python-pptx: a title slide, data-table slides
for one designated dataset (source links rendered as clickable "View Post"
cells), then one slide per chart image.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from io import BytesIO
from pathlib import Path
from typing import Any

from pptx import Presentation
from pptx.util import Inches, Pt

from ..core.config import Settings
from ..core.enums import DatasetSlot
from ..core.logging_config import get_logger
from ..core.models import CellValue, ReportMetadata, Row
from ..core.store import DatasetStore, parse_slot
from ..visuals.registry import ChartViewRegistry
from .base import DocumentExporter

logger = get_logger(__name__)

TITLE_LAYOUT = 0
TITLE_ONLY_LAYOUT = 5

ROWS_PER_SLIDE = 12
LINK_TEXT = "View Post"
TABLE_FONT = Pt(10)

CONTENT_LEFT = Inches(0.5)
CONTENT_TOP = Inches(1.4)
CONTENT_WIDTH = Inches(9)
CONTENT_HEIGHT = Inches(5.6)


def is_link(value: CellValue) -> bool:
    return isinstance(value, str) and value.startswith(("http://", "https://"))


def chunk_rows(rows: Sequence[Row], size: int) -> list[list[Row]]:
    return [list(rows[i : i + size]) for i in range(0, len(rows), size)]


def write_deck(path: str | Path, content: bytes) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    try:
        p.write_bytes(content)
        logger.info(f"Slide deck written to {p}", extra={"size": len(content)})
    except OSError as e:
        logger.error(f"Failed to write slide deck to {p}", extra={"error": str(e)}, exc_info=True)
        p.unlink(missing_ok=True)
        raise


class SlideDeckExporter(DocumentExporter):
    """One slide per title, data table page and chart."""

    kind = "Slide deck"
    failure_message = "Failed to generate slide deck. Please try again."

    def __init__(
        self,
        registry: ChartViewRegistry,
        store: DatasetStore | None = None,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(registry, settings)
        self.store = store

    def output_name(self, report: ReportMetadata, **options: Any) -> str:
        return options.get("filename") or self.settings.slides_filename

    def build(self, report: ReportMetadata, **options: Any) -> bytes:
        prs = Presentation()

        self._add_title_slide(prs, report)

        slot = parse_slot(options.get("table_dataset") or self.settings.table_dataset)
        if slot is not None and self.store is not None:
            rows = self.store.get_dataset(slot)
            if rows:
                self._add_table_slides(prs, slot, rows)
            else:
                logger.debug("No rows for data table slide", extra={"slot": slot.value})

        delay = options.get("capture_delay", self.settings.capture_delay_seconds)
        for chart in report.charts:
            if delay:
                # Let a freshly drawn view settle before capturing it.
                time.sleep(delay)
            image = self.registry.rasterize(chart, dpi=self.settings.chart_dpi)
            self._add_chart_slide(prs, chart.title, image.png, image.width_px, image.height_px)

        buffer = BytesIO()
        prs.save(buffer)
        logger.debug("Slide deck assembled", extra={"slides": len(prs.slides)})
        return buffer.getvalue()

    def write(self, path: Path, content: bytes) -> None:
        write_deck(path, content)

    def _add_title_slide(self, prs: Any, report: ReportMetadata) -> None:
        slide = prs.slides.add_slide(prs.slide_layouts[TITLE_LAYOUT])
        slide.shapes.title.text = report.title
        subtitle = slide.placeholders[1]
        subtitle.text = f"Generated on {report.date}"

    def _add_table_slides(self, prs: Any, slot: DatasetSlot, rows: Sequence[Row]) -> None:
        headers = list(rows[0].keys())
        pages = chunk_rows(rows, ROWS_PER_SLIDE)

        for page_no, page_rows in enumerate(pages, start=1):
            slide = prs.slides.add_slide(prs.slide_layouts[TITLE_ONLY_LAYOUT])
            title = f"{slot.label} Data"
            if len(pages) > 1:
                title += f" ({page_no}/{len(pages)})"
            slide.shapes.title.text = title

            shape = slide.shapes.add_table(
                len(page_rows) + 1,
                len(headers),
                CONTENT_LEFT,
                CONTENT_TOP,
                CONTENT_WIDTH,
                CONTENT_HEIGHT,
            )
            table = shape.table

            for col, header in enumerate(headers):
                self._set_cell(table.cell(0, col), header)

            for r, row in enumerate(page_rows, start=1):
                for col, header in enumerate(headers):
                    value = row.get(header)
                    if header == self.settings.link_column or is_link(value):
                        self._set_link(table.cell(r, col), value)
                    else:
                        self._set_cell(table.cell(r, col), value)

        logger.debug(
            "Data table slides added",
            extra={"slot": slot.value, "rows": len(rows), "slides": len(pages)},
        )

    @staticmethod
    def _set_cell(cell: Any, value: CellValue) -> None:
        paragraph = cell.text_frame.paragraphs[0]
        run = paragraph.add_run()
        run.text = "" if value is None else str(value)
        run.font.size = TABLE_FONT

    @staticmethod
    def _set_link(cell: Any, url: CellValue) -> None:
        paragraph = cell.text_frame.paragraphs[0]
        run = paragraph.add_run()
        run.font.size = TABLE_FONT
        if url:
            run.text = LINK_TEXT
            run.hyperlink.address = str(url)
        else:
            run.text = ""

    def _add_chart_slide(
        self, prs: Any, caption: str, png: bytes, width_px: int, height_px: int
    ) -> None:
        slide = prs.slides.add_slide(prs.slide_layouts[TITLE_ONLY_LAYOUT])
        slide.shapes.title.text = caption

        width = CONTENT_WIDTH
        if width_px > 0 and height_px * CONTENT_WIDTH / width_px > CONTENT_HEIGHT:
            width = int(CONTENT_HEIGHT * width_px / height_px)
        left = CONTENT_LEFT + (CONTENT_WIDTH - width) // 2
        slide.shapes.add_picture(BytesIO(png), left, CONTENT_TOP, width=width)
