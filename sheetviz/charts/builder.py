"""Chart definition building.

Turns a (dataset slot, x column, y column, chart kind) selection into an
immutable ChartDefinition whose data is projected from the dataset at
creation time, and submits it to the store's accumulated report.
"""

from __future__ import annotations

import itertools
import time
from collections.abc import Sequence

from ..core.enums import ChartKind, DatasetSlot
from ..core.errors import InvalidSelectionError
from ..core.logging_config import get_logger
from ..core.models import ChartDefinition, Row
from ..core.store import DatasetStore, parse_slot

logger = get_logger(__name__)

_id_counter = itertools.count(1)


def next_chart_id() -> str:
    """Timestamp-based id, made unique within the process by a counter."""
    return f"{int(time.time() * 1000)}-{next(_id_counter)}"


def available_columns(rows: Sequence[Row] | None) -> list[str]:
    """Column names of a dataset, read from its first row."""
    if not rows:
        return []
    return list(rows[0].keys())


def project_rows(rows: Sequence[Row], x_key: str, y_key: str) -> list[Row]:
    """Keep only the x and y fields of every row, in row order."""
    return [{x_key: row.get(x_key), y_key: row.get(y_key)} for row in rows]


def chart_title(kind: ChartKind, x_key: str, y_key: str) -> str:
    return f"{kind.value.capitalize()} Chart - {y_key} by {x_key}"


def _column_at(columns: Sequence[str], index: int, axis: str) -> str:
    if not 0 <= index < len(columns):
        raise InvalidSelectionError(
            f"{axis}-axis index {index} out of range for {len(columns)} column(s)"
        )
    return columns[index]


def build_chart_definition(
    dataset_name: str,
    rows: Sequence[Row],
    x_index: int,
    y_index: int,
    kind: ChartKind,
    columns: Sequence[str] | None = None,
) -> ChartDefinition:
    """Build a chart definition from column indices.

    Args:
        dataset_name: Slot the rows come from
        rows: Source dataset rows
        x_index: Index into ``columns`` for the horizontal axis / pie labels
        y_index: Index into ``columns`` for the value axis / pie magnitudes
        kind: Chart kind
        columns: Column list; derived from the first row when omitted

    Raises:
        InvalidSelectionError: If an index does not name a column
    """
    cols = list(columns) if columns is not None else available_columns(rows)
    x_key = _column_at(cols, x_index, "X")
    y_key = _column_at(cols, y_index, "Y")

    return ChartDefinition(
        id=next_chart_id(),
        type=ChartKind(kind),
        dataset_name=dataset_name,
        x_axis_key=x_key,
        y_axis_key=y_key,
        title=chart_title(ChartKind(kind), x_key, y_key),
        data=tuple(project_rows(rows, x_key, y_key)),
    )


class ChartBuilder:
    """Selection state behind the chart builder controls.

    Selections are transient; only ``create_chart`` writes to the store.
    """

    def __init__(self, store: DatasetStore) -> None:
        self.store = store
        self.dataset: DatasetSlot | None = None
        self.kind: ChartKind = ChartKind.BAR
        self.x_index: int | None = None
        self.y_index: int | None = None
        self.columns: list[str] = []

    def select_dataset(self, slot: str | DatasetSlot) -> list[str]:
        """Select a dataset and reset axes to its first columns.

        Returns the available columns (empty when the slot has no data).
        """
        key = parse_slot(slot)
        if key is None:
            logger.warning("Unknown dataset slot selected", extra={"slot": str(slot)})
            self.dataset = None
            self.columns = []
            self.x_index = self.y_index = None
            return []

        self.dataset = key
        self.columns = available_columns(self.store.get_dataset(key))
        if self.columns:
            self.x_index = 0
            self.y_index = 1 if len(self.columns) > 1 else 0
        else:
            self.x_index = self.y_index = None
        return list(self.columns)

    def select_kind(self, kind: str | ChartKind) -> None:
        self.kind = ChartKind(kind)

    def select_x(self, index: int) -> None:
        self.x_index = index

    def select_y(self, index: int) -> None:
        self.y_index = index

    def select_columns_by_name(self, x_key: str, y_key: str) -> None:
        try:
            self.x_index = self.columns.index(x_key)
            self.y_index = self.columns.index(y_key)
        except ValueError as e:
            raise InvalidSelectionError(
                f"Column not found in {self.dataset}: {e}",
                user_message=f"Unknown column. Available columns: {', '.join(self.columns)}",
            ) from e

    @property
    def columns_enabled(self) -> bool:
        return bool(self.columns)

    @property
    def can_create(self) -> bool:
        return (
            self.dataset is not None
            and self.x_index is not None
            and self.y_index is not None
            and self.columns_enabled
        )

    def preview(self) -> list[Row] | None:
        """Projected rows for the current selection, or None if incomplete."""
        if not self.can_create:
            return None
        x_key = _column_at(self.columns, self.x_index, "X")  # type: ignore[arg-type]
        y_key = _column_at(self.columns, self.y_index, "Y")  # type: ignore[arg-type]
        return project_rows(self.store.get_dataset(self.dataset) or [], x_key, y_key)  # type: ignore[arg-type]

    def create_chart(self) -> ChartDefinition | None:
        """Add a chart for the current selection to the report.

        No-op returning None while any selection is missing.
        """
        if not self.can_create:
            logger.debug("Chart creation skipped: incomplete selection")
            return None

        assert self.dataset is not None
        chart = build_chart_definition(
            self.dataset.value,
            self.store.get_dataset(self.dataset) or [],
            self.x_index,  # type: ignore[arg-type]
            self.y_index,  # type: ignore[arg-type]
            self.kind,
            columns=self.columns,
        )
        self.store.add_chart_definitions([*self.store.charts, chart])
        logger.info(
            "Chart created",
            extra={
                "chart_id": chart.id,
                "type": chart.type.value,
                "dataset": chart.dataset_name,
                "x": chart.x_axis_key,
                "y": chart.y_axis_key,
            },
        )
        return chart
