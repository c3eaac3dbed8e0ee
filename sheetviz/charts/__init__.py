from __future__ import annotations

from .builder import (
    ChartBuilder,
    available_columns,
    build_chart_definition,
    chart_title,
    project_rows,
)

__all__ = [
    "ChartBuilder",
    "available_columns",
    "build_chart_definition",
    "chart_title",
    "project_rows",
]
