"""Visualization package for chart rendering.

This package is the presentation layer of SheetViz. It turns chart
definitions into matplotlib figures and captures those figures as PNG
bitmaps for the document exporters.

Main Components:
    - ChartRenderer: bar, line and pie figures with an empty-data placeholder
    - ChartViewRegistry: chart id -> drawn view, consulted at export time
    - rasterize: figure -> PNG bytes with pixel dimensions

Usage:
    from sheetviz.visuals import ChartRenderer, ChartViewRegistry

    registry = ChartViewRegistry()
    registry.populate(store.charts, ChartRenderer())
    image = registry.rasterize(store.charts[0], dpi=150)

Architecture Notes:
    - Charts use the non-interactive 'Agg' backend
    - Figures stay open while registered; call ChartViewRegistry.close() when done
"""

from __future__ import annotations

from .charts import ChartRenderer, PieSlice, RasterImage, pie_slices, rasterize
from .registry import ChartView, ChartViewRegistry

__all__ = [
    "ChartRenderer",
    "ChartView",
    "ChartViewRegistry",
    "PieSlice",
    "RasterImage",
    "pie_slices",
    "rasterize",
]
