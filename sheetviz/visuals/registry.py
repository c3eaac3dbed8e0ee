from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import matplotlib.pyplot as plt

from ..core.errors import RasterizationError
from ..core.logging_config import get_logger
from ..core.models import ChartDefinition
from .charts import ChartRenderer, RasterImage, rasterize

logger = get_logger(__name__)


@dataclass
class ChartView:
    chart: ChartDefinition
    figure: plt.Figure


class ChartViewRegistry:
    """Maps chart views by ``ChartDefinition.view_id``.

    Views are registered when the charts are drawn for preview; exporters
    look them up here to rasterize exactly what was drawn.
    """

    def __init__(self) -> None:
        self._views: dict[str, ChartView] = {}

    def __len__(self) -> int:
        return len(self._views)

    def __contains__(self, view_id: object) -> bool:
        return view_id in self._views

    def register(self, chart: ChartDefinition, figure: plt.Figure) -> ChartView:
        previous = self._views.get(chart.view_id)
        if previous is not None and previous.figure is not figure:
            plt.close(previous.figure)
        view = ChartView(chart=chart, figure=figure)
        self._views[chart.view_id] = view
        return view

    def populate(
        self, charts: Iterable[ChartDefinition], renderer: ChartRenderer | None = None
    ) -> int:
        """Draw and register a view for every chart definition.

        Returns the number of views registered.
        """
        renderer = renderer or ChartRenderer()
        count = 0
        for chart in charts:
            self.register(chart, renderer.render(chart))
            count += 1
        logger.debug("Chart views registered", extra={"count": count})
        return count

    def get(self, view_id: str) -> ChartView | None:
        return self._views.get(view_id)

    def rasterize(self, chart: ChartDefinition, dpi: int = 100) -> RasterImage:
        """Capture the registered view of ``chart`` as a PNG.

        Raises:
            RasterizationError: If no view is registered or capture fails
        """
        view = self._views.get(chart.view_id)
        if view is None:
            raise RasterizationError(f"No rendered view for chart {chart.view_id}")
        try:
            return rasterize(view.figure, dpi=dpi)
        except (OSError, ValueError, RuntimeError) as e:
            raise RasterizationError(f"Failed to rasterize {chart.view_id}: {e}") from e

    def close(self) -> None:
        for view in self._views.values():
            plt.close(view.figure)
        self._views.clear()
