from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from ..core.config import Settings
from ..core.enums import Orientation, PageSize
from ..core.logging_config import get_logger
from ..core.models import ChartDefinition, ReportMetadata
from ..core.store import parse_slot
from ..visuals.charts import encode_base64
from ..visuals.registry import ChartViewRegistry
from .base import DocumentExporter, sanitize_filename
from .layout import PdfLayout
from .pdf import PDFExporter, write_pdf

logger = get_logger(__name__)


def group_by_dataset(charts: Sequence[ChartDefinition]) -> list[tuple[str, list[ChartDefinition]]]:
    """Group charts by source dataset, in order of first appearance."""
    groups: dict[str, list[ChartDefinition]] = {}
    for chart in charts:
        groups.setdefault(chart.dataset_name, []).append(chart)
    return list(groups.items())


def dataset_label(name: str) -> str:
    slot = parse_slot(name)
    return slot.label if slot else name


class ReportPdfExporter(DocumentExporter):
    """Paginated-image PDF export of the report's charts."""

    kind = "PDF"
    failure_message = "Failed to generate PDF. Please try again."

    def __init__(
        self,
        registry: ChartViewRegistry,
        settings: Settings | None = None,
        pdf_exporter: PDFExporter | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        super().__init__(registry, settings)
        self.pdf_exporter = pdf_exporter or PDFExporter()
        if templates_dir is None:
            templates_dir = Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=lambda name: name is not None and name.endswith(".html.j2"),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["b64"] = encode_base64

    def output_name(self, report: ReportMetadata, **options: Any) -> str:
        return sanitize_filename(report.title, ".pdf")

    def layout(
        self,
        report: ReportMetadata,
        page_size: PageSize | str | None = None,
        orientation: Orientation | str | None = None,
        group_by_dataset_name: bool = False,
    ) -> PdfLayout:
        """Rasterize every chart, in list order, and flow it onto pages."""
        layout = PdfLayout(
            page_size or self.settings.page_size,
            orientation or self.settings.orientation,
        )
        layout.add_title_block(report.title, report.date)

        if group_by_dataset_name:
            sections = group_by_dataset(report.charts)
        else:
            sections = [("", list(report.charts))]

        for name, charts in sections:
            if name:
                layout.add_section(
                    dataset_label(name), f"{len(charts)} chart(s) from {name}"
                )
            for chart in charts:
                image = self.registry.rasterize(chart, dpi=self.settings.chart_dpi)
                layout.add_chart(chart.title, image)

        logger.debug(
            "PDF layout complete",
            extra={"pages": len(layout.pages), "charts": len(report.charts)},
        )
        return layout

    def render_html(self, report: ReportMetadata, layout: PdfLayout) -> str:
        try:
            template = self.env.get_template("report.html.j2")
        except TemplateNotFound as e:
            raise RuntimeError(
                f"HTML template not found: {e}. "
                "Ensure sheetviz/render/templates/report.html.j2 exists."
            ) from e
        return template.render(
            title=report.title,
            width=layout.width,
            height=layout.height,
            pages=layout.pages,
        )

    def build(self, report: ReportMetadata, **options: Any) -> bytes:
        layout = self.layout(
            report,
            page_size=options.get("page_size"),
            orientation=options.get("orientation"),
            group_by_dataset_name=options.get("group_by_dataset", False),
        )
        html = self.render_html(report, layout)
        return self.pdf_exporter.html_to_pdf(html)

    def write(self, path: Path, content: bytes) -> None:
        write_pdf(path, content)
