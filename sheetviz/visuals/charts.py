"""Chart rendering for chart definitions."""

from __future__ import annotations

import base64
import math
from collections.abc import Sequence
from dataclasses import dataclass
from io import BytesIO
from typing import Any

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
from PIL import Image

from ..core.enums import ChartKind
from ..core.logging_config import get_logger
from ..core.models import ChartDefinition, Row

# Use non-interactive backend for server environments
matplotlib.use("Agg")

logger = get_logger(__name__)

NO_DATA_MESSAGE = "No data available for visualization"
SERIES_COLOR = "#8884d8"
PIE_COLORS = [
    "#0088FE",
    "#00C49F",
    "#FFBB28",
    "#FF8042",
    "#8884D8",
    "#82CA9D",
    "#A4DE6C",
    "#D0ED57",
]


@dataclass(frozen=True)
class PieSlice:
    name: str
    value: float
    percent: int
    color: str

    @property
    def label(self) -> str:
        return f"{self.name}: {self.percent}%"


@dataclass(frozen=True)
class RasterImage:
    png: bytes
    width_px: int
    height_px: int


def to_number(value: Any) -> float:
    """Coerce a cell to float; NaN when it is not numeric."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.replace(",", "").strip())
        except ValueError:
            return math.nan
    return math.nan


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def pie_slices(rows: Sequence[Row], name_key: str, value_key: str) -> list[PieSlice]:
    """Compute pie slices with palette colours and rounded percentage shares.

    Non-numeric and negative magnitudes count as zero. Returns an empty list
    when the total is zero.
    """
    values = []
    for row in rows:
        v = to_number(row.get(value_key))
        values.append(v if not math.isnan(v) and v > 0 else 0.0)

    total = sum(values)
    if total <= 0:
        return []

    return [
        PieSlice(
            name=str(row.get(name_key, "")),
            value=value,
            percent=round_half_up(value / total * 100),
            color=PIE_COLORS[i % len(PIE_COLORS)],
        )
        for i, (row, value) in enumerate(zip(rows, values, strict=True))
    ]


class ChartRenderer:
    """Render chart definitions as matplotlib figures.

    Every render method is a pure function of its inputs and falls back to a
    placeholder figure when there is nothing to draw.
    """

    def __init__(self, figsize: tuple[float, float] = (8, 5)):
        self.figsize = figsize

    def render(self, chart: ChartDefinition) -> plt.Figure:
        rows = chart.rows()
        if chart.type is ChartKind.BAR:
            return self.render_bar(rows, chart.x_axis_key, chart.y_axis_key, chart.title)
        if chart.type is ChartKind.LINE:
            return self.render_line(rows, chart.x_axis_key, chart.y_axis_key, chart.title)
        return self.render_pie(rows, chart.x_axis_key, chart.y_axis_key, chart.title)

    def render_placeholder(self, title: str | None = None) -> plt.Figure:
        fig, ax = plt.subplots(figsize=self.figsize)
        ax.axis("off")
        ax.text(
            0.5,
            0.5,
            NO_DATA_MESSAGE,
            ha="center",
            va="center",
            fontsize=12,
            color="#666666",
            transform=ax.transAxes,
        )
        if title:
            ax.set_title(title, fontsize=14, fontweight="bold")
        return fig

    def render_bar(
        self,
        rows: Sequence[Row] | None,
        x_key: str,
        y_key: str,
        title: str | None = None,
    ) -> plt.Figure:
        if not rows:
            return self.render_placeholder(title)

        categories = [str(r.get(x_key, "")) for r in rows]
        values = [to_number(r.get(y_key)) for r in rows]
        x = np.arange(len(categories))

        fig, ax = plt.subplots(figsize=self.figsize)
        ax.bar(x, values, color=SERIES_COLOR, label=y_key)
        self._decorate_axes(ax, x, categories, x_key, y_key, title)
        plt.tight_layout()
        return fig

    def render_line(
        self,
        rows: Sequence[Row] | None,
        x_key: str,
        y_key: str,
        title: str | None = None,
    ) -> plt.Figure:
        if not rows:
            return self.render_placeholder(title)

        categories = [str(r.get(x_key, "")) for r in rows]
        values = [to_number(r.get(y_key)) for r in rows]
        x = np.arange(len(categories))

        fig, ax = plt.subplots(figsize=self.figsize)
        ax.plot(x, values, color=SERIES_COLOR, marker="o", linewidth=2, label=y_key)
        self._decorate_axes(ax, x, categories, x_key, y_key, title)
        plt.tight_layout()
        return fig

    def render_pie(
        self,
        rows: Sequence[Row] | None,
        name_key: str,
        value_key: str,
        title: str | None = None,
    ) -> plt.Figure:
        if not rows:
            return self.render_placeholder(title)

        slices = pie_slices(rows, name_key, value_key)
        if not slices:
            logger.debug("Pie chart has no positive values", extra={"value_key": value_key})
            return self.render_placeholder(title)

        fig, ax = plt.subplots(figsize=(self.figsize[1] + 1, self.figsize[1] + 1))
        drawn = [s for s in slices if s.value > 0]
        ax.pie(
            [s.value for s in drawn],
            labels=[s.label for s in drawn],
            colors=[s.color for s in drawn],
            startangle=90,
        )
        ax.legend([s.name for s in drawn], loc="best", fontsize=8)
        if title:
            ax.set_title(title, fontsize=14, fontweight="bold")
        ax.axis("equal")
        plt.tight_layout()
        return fig

    @staticmethod
    def _decorate_axes(
        ax: Any,
        x: np.ndarray,
        categories: list[str],
        x_key: str,
        y_key: str,
        title: str | None,
    ) -> None:
        ax.set_xlabel(x_key, fontsize=11)
        ax.set_ylabel(y_key, fontsize=11)
        ax.set_xticks(x)
        ax.set_xticklabels(categories, rotation=45, ha="right")
        ax.grid(axis="y", alpha=0.3, linestyle="--")
        ax.legend()
        if title:
            ax.set_title(title, fontsize=14, fontweight="bold")


def rasterize(fig: plt.Figure, dpi: int = 100, close: bool = False) -> RasterImage:
    """Render a figure to PNG bytes and report its pixel size.

    Args:
        fig: Matplotlib figure to capture
        dpi: Resolution of the bitmap
        close: Close the figure afterwards to release its memory
    """
    buffer = BytesIO()
    try:
        fig.savefig(buffer, dpi=dpi, bbox_inches="tight", format="png", facecolor="white")
        png = buffer.getvalue()
    finally:
        buffer.close()
        if close:
            plt.close(fig)

    with Image.open(BytesIO(png)) as img:
        width, height = img.size
    return RasterImage(png=png, width_px=width, height_px=height)


def encode_base64(image: RasterImage) -> str:
    return base64.b64encode(image.png).decode("utf-8")
