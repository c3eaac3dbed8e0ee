"""SheetViz: spreadsheet upload, chart building and document export."""

__version__ = "0.1.0"
