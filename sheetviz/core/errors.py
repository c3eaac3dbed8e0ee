"""Exception taxonomy for SheetViz.

Every error carries a ``user_message``: the short, generic text shown next to
the control that triggered it. The exception's own message (``str(error)``)
holds the diagnostic detail and is only ever logged.
"""

from __future__ import annotations


class SheetVizError(Exception):
    """Base exception for SheetViz errors."""

    user_message = "An unexpected error occurred. Please try again."

    def __init__(self, message: str = "", *, user_message: str | None = None) -> None:
        super().__init__(message or self.user_message)
        if user_message is not None:
            self.user_message = user_message


class ValidationError(SheetVizError):
    """Input failed validation before any state was touched."""

    user_message = "Invalid input."


class UnsupportedFileTypeError(ValidationError):
    """Uploaded file does not carry a spreadsheet extension."""

    user_message = "Please upload a valid Excel file (.xlsx, .xls, or .csv)"


class InsufficientDataError(ValidationError):
    """Decoded spreadsheet has fewer rows than a chart needs."""

    user_message = (
        "The Excel file contains insufficient data. "
        "Please ensure it has headers and at least one data row."
    )


class InvalidSelectionError(ValidationError):
    """Axis or chart-kind selection does not match the dataset."""

    user_message = "Please select X and Y axes for your chart"


class DecodeError(SheetVizError):
    """Spreadsheet bytes could not be read or parsed."""

    user_message = (
        "Failed to process the Excel file. Please check the file format and try again."
    )


class ExportError(SheetVizError):
    """Document assembly failed."""

    user_message = "Failed to generate document. Please try again."


class NoChartsError(ExportError):
    """Export requested while the report has no chart definitions."""

    user_message = "No charts available to export. Please create charts first."


class RasterizationError(ExportError):
    """A chart view could not be turned into an image."""
