"""Document export: paginated PDF reports and slide decks."""

from __future__ import annotations

from .base import DocumentExporter, sanitize_filename
from .layout import PAGE_SIZES, PdfLayout, page_dimensions
from .pdf import PDFExporter, write_pdf
from .report_pdf import ReportPdfExporter
from .slides import SlideDeckExporter

__all__ = [
    "PAGE_SIZES",
    "DocumentExporter",
    "PDFExporter",
    "PdfLayout",
    "ReportPdfExporter",
    "SlideDeckExporter",
    "page_dimensions",
    "sanitize_filename",
    "write_pdf",
]
