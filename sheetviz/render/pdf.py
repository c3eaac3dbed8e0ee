"""PDF conversion utilities.

Report pages are laid out in Python (see ``layout.py``), rendered to HTML
with absolutely positioned blocks, and converted to PDF with WeasyPrint. This
module owns the WeasyPrint side: availability checks, conversion and writing.

System Dependencies:
    WeasyPrint requires Pango:
    - macOS: brew install pango
    - Ubuntu: apt-get install libpango-1.0-0 libpangoft2-1.0-0
"""

from __future__ import annotations

from pathlib import Path

from ..core.logging_config import get_logger

logger = get_logger(__name__)


class PDFExporter:
    """Convert HTML documents to PDF bytes using WeasyPrint."""

    def __init__(self) -> None:
        self._weasyprint_available = self._check_weasyprint()

    def _check_weasyprint(self) -> bool:
        """Check if WeasyPrint can be imported with its system libraries."""
        try:
            import weasyprint  # type: ignore  # noqa: F401

            return True
        except ImportError as e:
            logger.error(
                "WeasyPrint not installed. Install with: pip install weasyprint",
                extra={"error": str(e)},
            )
            return False
        except OSError as e:
            logger.error(
                "WeasyPrint system dependencies missing. "
                "On macOS: brew install pango. "
                "On Ubuntu: apt-get install libpango-1.0-0 libpangoft2-1.0-0",
                extra={"error": str(e)},
            )
            return False

    def is_available(self) -> bool:
        return self._weasyprint_available

    def html_to_pdf(self, html_content: str, base_url: str | None = None) -> bytes:
        """Convert HTML content to PDF.

        Args:
            html_content: HTML string to convert to PDF
            base_url: Optional base URL for resolving relative paths in HTML

        Returns:
            PDF content as bytes

        Raises:
            RuntimeError: If WeasyPrint is not available or conversion fails
        """
        if not self._weasyprint_available:
            raise RuntimeError(
                "WeasyPrint is not available. Please install system dependencies and "
                "reinstall weasyprint."
            )

        try:
            from weasyprint import HTML

            logger.debug("Converting HTML to PDF", extra={"html_length": len(html_content)})
            pdf_bytes: bytes = HTML(string=html_content, base_url=base_url).write_pdf()
        except Exception as e:
            logger.error(
                "Failed to convert HTML to PDF",
                extra={"error": str(e), "error_type": type(e).__name__},
                exc_info=True,
            )
            raise RuntimeError(f"PDF conversion failed: {e}") from e

        logger.info(
            "PDF generated successfully",
            extra={"pdf_size": len(pdf_bytes), "html_size": len(html_content)},
        )
        return pdf_bytes


def write_pdf(path: str | Path, pdf_bytes: bytes) -> None:
    """Write PDF bytes to file, removing any partial file on failure.

    Raises:
        OSError: If file writing fails
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    try:
        p.write_bytes(pdf_bytes)
        logger.info(f"PDF written to {p}", extra={"size": len(pdf_bytes)})
    except OSError as e:
        logger.error(f"Failed to write PDF to {p}", extra={"error": str(e)}, exc_info=True)
        p.unlink(missing_ok=True)
        raise
