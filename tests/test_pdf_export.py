"""Tests for PDF export functionality."""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from sheetviz.charts.builder import build_chart_definition
from sheetviz.core.config import Settings
from sheetviz.core.enums import ChartKind, ExportState, Orientation, PageSize
from sheetviz.core.models import ReportMetadata
from sheetviz.render.base import sanitize_filename
from sheetviz.render.layout import MARGIN, PdfLayout, page_dimensions
from sheetviz.render.pdf import PDFExporter, write_pdf
from sheetviz.render.report_pdf import ReportPdfExporter, group_by_dataset
from sheetviz.visuals.charts import RasterImage
from sheetviz.visuals.registry import ChartViewRegistry

FAKE_PDF = b"%PDF-1.7 fake"


@pytest.fixture
def sales_report(sales_rows: list[dict]) -> ReportMetadata:
    chart = build_chart_definition("combinedSources", sales_rows, 0, 1, ChartKind.BAR)
    return ReportMetadata(title="Quarterly Sales Review", date="2025-04-01", charts=[chart])


@pytest.fixture
def registry(sales_report: ReportMetadata):
    reg = ChartViewRegistry()
    reg.populate(sales_report.charts)
    yield reg
    reg.close()


@pytest.fixture
def mock_pdf_exporter() -> MagicMock:
    exporter = MagicMock(spec=PDFExporter)
    exporter.html_to_pdf.return_value = FAKE_PDF
    return exporter


class TestPDFExporter:
    """Test WeasyPrint conversion."""

    def test_html_to_pdf_success(self) -> None:
        """Test successful HTML to PDF conversion."""
        mock_weasyprint = MagicMock()
        mock_weasyprint.HTML.return_value.write_pdf.return_value = b"PDF content"

        with patch.dict(sys.modules, {"weasyprint": mock_weasyprint}):
            exporter = PDFExporter()
            html_content = "<html><body>Test</body></html>"
            pdf_bytes = exporter.html_to_pdf(html_content)

        assert pdf_bytes == b"PDF content"
        mock_weasyprint.HTML.assert_called_once_with(string=html_content, base_url=None)

    def test_html_to_pdf_conversion_error(self) -> None:
        """Test that WeasyPrint failures surface as RuntimeError."""
        mock_weasyprint = MagicMock()
        mock_weasyprint.HTML.return_value.write_pdf.side_effect = ValueError("bad css")

        with patch.dict(sys.modules, {"weasyprint": mock_weasyprint}):
            exporter = PDFExporter()
            with pytest.raises(RuntimeError, match="PDF conversion failed: bad css"):
                exporter.html_to_pdf("<html></html>")

    def test_html_to_pdf_weasyprint_unavailable(self) -> None:
        """Test PDF conversion when WeasyPrint is not available."""
        with patch("sheetviz.render.pdf.PDFExporter._check_weasyprint", return_value=False):
            exporter = PDFExporter()
            assert not exporter.is_available()

            with pytest.raises(RuntimeError, match="WeasyPrint is not available"):
                exporter.html_to_pdf("<html><body>Test</body></html>")


class TestWritePDF:
    """Test write_pdf utility function."""

    def test_write_pdf_creates_directories(self, tmp_path: Path) -> None:
        pdf_path = tmp_path / "nested" / "dir" / "report.pdf"

        write_pdf(pdf_path, FAKE_PDF)

        assert pdf_path.read_bytes() == FAKE_PDF

    def test_write_pdf_failure_removes_partial_file(self, tmp_path: Path) -> None:
        pdf_path = tmp_path / "report.pdf"

        with patch.object(Path, "write_bytes", side_effect=OSError("disk full")):
            with pytest.raises(OSError, match="disk full"):
                write_pdf(pdf_path, FAKE_PDF)

        assert not pdf_path.exists()


class TestPdfLayout:
    """Test page geometry and pagination."""

    @pytest.mark.parametrize(
        ("size", "orientation", "expected"),
        [
            (PageSize.A4, Orientation.PORTRAIT, (210.0, 297.0)),
            (PageSize.A4, Orientation.LANDSCAPE, (297.0, 210.0)),
            (PageSize.LETTER, Orientation.LANDSCAPE, (279.4, 215.9)),
            ("legal", "portrait", (215.9, 355.6)),
        ],
    )
    def test_page_dimensions(self, size, orientation, expected) -> None:
        assert page_dimensions(size, orientation) == expected

    def test_title_block(self) -> None:
        layout = PdfLayout(PageSize.A4, Orientation.PORTRAIT)
        layout.add_title_block("My Report", "2025-04-01")

        texts = [t.text for t in layout.current.texts]
        assert texts == ["My Report", "Generated on 2025-04-01"]
        assert len(layout.current.rules) == 1
        assert layout.cursor == 50

    def test_charts_flow_onto_new_pages(self) -> None:
        image = RasterImage(png=b"", width_px=800, height_px=500)
        layout = PdfLayout(PageSize.A4, Orientation.PORTRAIT)
        layout.add_title_block("My Report", "2025-04-01")

        blocks = [layout.add_chart(f"Chart {i}", image) for i in range(3)]

        # 170mm wide -> 106.25mm tall; second chart would end past 297mm
        assert [len(p.images) for p in layout.pages] == [1, 2]
        assert blocks[0].y == 60
        assert blocks[1].y == 30
        assert blocks[0].width == pytest.approx(170.0)
        assert blocks[0].height == pytest.approx(106.25)

    def test_tall_image_is_scaled_to_fit_page(self) -> None:
        square = RasterImage(png=b"", width_px=500, height_px=500)
        layout = PdfLayout(PageSize.LETTER, Orientation.LANDSCAPE)
        layout.add_title_block("My Report", "2025-04-01")

        block = layout.add_chart("Pie Chart - Likes by Caption", square)

        # 215.9mm page: 20mm margins plus the 10mm caption gap leave 165.9mm
        assert block.height == pytest.approx(165.9)
        assert block.width == pytest.approx(165.9)
        assert block.y + block.height <= layout.height - MARGIN
        assert block.x == pytest.approx(MARGIN + (layout.content_width - block.width) / 2)
        assert [len(p.images) for p in layout.pages] == [0, 1]

    def test_section_adds_divider_page(self) -> None:
        layout = PdfLayout(PageSize.A4, Orientation.PORTRAIT)
        layout.add_section("Combined Sources", "2 chart(s)")

        assert len(layout.pages) == 3
        assert layout.pages[1].texts[0].text == "Combined Sources"
        assert layout.current.texts == []


def test_group_by_dataset_keeps_first_appearance_order(sales_rows: list[dict]) -> None:
    a1 = build_chart_definition("keywords", sales_rows, 0, 1, ChartKind.BAR)
    b1 = build_chart_definition("combinedSources", sales_rows, 0, 1, ChartKind.BAR)
    a2 = build_chart_definition("keywords", sales_rows, 0, 1, ChartKind.PIE)

    groups = group_by_dataset([a1, b1, a2])

    assert [name for name, _ in groups] == ["keywords", "combinedSources"]
    assert groups[0][1] == [a1, a2]


def test_sanitize_filename() -> None:
    assert sanitize_filename("Quarterly  Sales\tReview", ".pdf") == "Quarterly_Sales_Review.pdf"


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Q1/Q2 Review", "Q1_Q2_Review.pdf"),
        ("Q1\\Q2: Review?", "Q1_Q2__Review_.pdf"),
        ("", "Data_Visualization_Report.pdf"),
        ("   ", "Data_Visualization_Report.pdf"),
        ("..", "Data_Visualization_Report.pdf"),
    ],
)
def test_sanitize_filename_stays_a_single_file(title: str, expected: str) -> None:
    name = sanitize_filename(title, ".pdf")
    assert name == expected
    assert Path(name).name == name


class TestReportPdfExporter:
    """Test the PDF export state machine and document content."""

    def test_export_writes_single_file(
        self,
        tmp_path: Path,
        settings: Settings,
        registry: ChartViewRegistry,
        sales_report: ReportMetadata,
        mock_pdf_exporter: MagicMock,
    ) -> None:
        out = tmp_path / "pdf"
        exporter = ReportPdfExporter(registry, settings, pdf_exporter=mock_pdf_exporter)

        path = exporter.export(
            sales_report, out, page_size=PageSize.LETTER, orientation=Orientation.LANDSCAPE
        )

        assert path == out / "Quarterly_Sales_Review.pdf"
        assert list(out.iterdir()) == [path]
        assert path.read_bytes() == FAKE_PDF
        assert exporter.status is ExportState.SUCCESS
        assert exporter.error is None

        html = mock_pdf_exporter.html_to_pdf.call_args[0][0]
        assert "size: 279.4mm 215.9mm" in html
        assert "Quarterly Sales Review" in html
        assert "Generated on 2025-04-01" in html
        assert "Bar Chart - Sales by Month" in html
        assert html.count('<img class="chart"') == 1
        assert "data:image/png;base64,iVBORw0KGgo" in html

    def test_export_defaults_to_settings_page(
        self,
        settings: Settings,
        registry: ChartViewRegistry,
        sales_report: ReportMetadata,
        mock_pdf_exporter: MagicMock,
    ) -> None:
        exporter = ReportPdfExporter(registry, settings, pdf_exporter=mock_pdf_exporter)

        exporter.export(sales_report)

        html = mock_pdf_exporter.html_to_pdf.call_args[0][0]
        assert "size: 210.0mm 297.0mm" in html
        assert (Path(settings.output_dir) / "Quarterly_Sales_Review.pdf").exists()

    def test_no_charts_sets_error_without_exporting(
        self, tmp_path: Path, settings: Settings, mock_pdf_exporter: MagicMock
    ) -> None:
        exporter = ReportPdfExporter(ChartViewRegistry(), settings, pdf_exporter=mock_pdf_exporter)

        path = exporter.export(ReportMetadata(), tmp_path)

        assert path is None
        assert exporter.error == "No charts available to export. Please create charts first."
        assert exporter.status is ExportState.ERROR
        mock_pdf_exporter.html_to_pdf.assert_not_called()
        assert list(tmp_path.iterdir()) == []

    def test_status_is_exporting_during_build(
        self,
        tmp_path: Path,
        settings: Settings,
        registry: ChartViewRegistry,
        sales_report: ReportMetadata,
        mock_pdf_exporter: MagicMock,
    ) -> None:
        exporter = ReportPdfExporter(registry, settings, pdf_exporter=mock_pdf_exporter)
        seen: list[ExportState] = []

        def convert(html: str) -> bytes:
            seen.append(exporter.status)
            return FAKE_PDF

        mock_pdf_exporter.html_to_pdf.side_effect = convert
        exporter.export(sales_report, tmp_path)

        assert seen == [ExportState.EXPORTING]
        assert exporter.is_exporting is False

    def test_conversion_failure_leaves_no_file(
        self,
        tmp_path: Path,
        settings: Settings,
        registry: ChartViewRegistry,
        sales_report: ReportMetadata,
        mock_pdf_exporter: MagicMock,
    ) -> None:
        mock_pdf_exporter.html_to_pdf.side_effect = RuntimeError("PDF conversion failed")
        exporter = ReportPdfExporter(registry, settings, pdf_exporter=mock_pdf_exporter)

        path = exporter.export(sales_report, tmp_path / "out")

        assert path is None
        assert exporter.error == "Failed to generate PDF. Please try again."
        assert exporter.status is ExportState.ERROR
        assert exporter.is_exporting is False
        assert not (tmp_path / "out").exists()

    def test_missing_view_fails_export(
        self,
        tmp_path: Path,
        settings: Settings,
        sales_report: ReportMetadata,
        mock_pdf_exporter: MagicMock,
    ) -> None:
        exporter = ReportPdfExporter(ChartViewRegistry(), settings, pdf_exporter=mock_pdf_exporter)

        assert exporter.export(sales_report, tmp_path) is None
        assert exporter.error == "Failed to generate PDF. Please try again."
        mock_pdf_exporter.html_to_pdf.assert_not_called()

    def test_group_by_dataset_emits_divider_pages(
        self,
        settings: Settings,
        sales_rows: list[dict],
        instagram_rows: list[dict],
        mock_pdf_exporter: MagicMock,
    ) -> None:
        charts = [
            build_chart_definition("combinedSources", sales_rows, 0, 1, ChartKind.BAR),
            build_chart_definition("officialInstagram", instagram_rows, 1, 2, ChartKind.PIE),
        ]
        report = ReportMetadata(title="Grouped", date="2025-04-01", charts=charts)
        registry = ChartViewRegistry()
        registry.populate(charts)
        exporter = ReportPdfExporter(registry, settings, pdf_exporter=mock_pdf_exporter)

        layout = exporter.layout(report, group_by_dataset_name=True)
        registry.close()

        headings = [p.texts[0].text for p in layout.pages if p.texts and not p.images]
        assert "Combined Sources" in headings
        assert "Official Instagram" in headings
        assert sum(len(p.images) for p in layout.pages) == 2

    def test_landscape_pie_stays_on_page(
        self,
        settings: Settings,
        instagram_rows: list[dict],
        mock_pdf_exporter: MagicMock,
    ) -> None:
        chart = build_chart_definition("officialInstagram", instagram_rows, 1, 2, ChartKind.PIE)
        report = ReportMetadata(title="Pies", date="2025-04-01", charts=[chart])
        registry = ChartViewRegistry()
        registry.populate([chart])
        exporter = ReportPdfExporter(registry, settings, pdf_exporter=mock_pdf_exporter)

        layout = exporter.layout(report, PageSize.LETTER, Orientation.LANDSCAPE)
        registry.close()

        images = [img for page in layout.pages for img in page.images]
        assert len(images) == 1
        assert images[0].y + images[0].height <= layout.height - MARGIN
        assert images[0].x + images[0].width <= layout.width - MARGIN

    def test_title_with_slash_writes_into_output_dir(
        self,
        tmp_path: Path,
        settings: Settings,
        registry: ChartViewRegistry,
        sales_report: ReportMetadata,
        mock_pdf_exporter: MagicMock,
    ) -> None:
        sales_report.title = "Q1/Q2 Review"
        exporter = ReportPdfExporter(registry, settings, pdf_exporter=mock_pdf_exporter)

        path = exporter.export(sales_report, tmp_path)

        assert path == tmp_path / "Q1_Q2_Review.pdf"
        assert list(tmp_path.iterdir()) == [path]
