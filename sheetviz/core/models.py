from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Union

from .config import DEFAULT_REPORT_TITLE
from .enums import ChartKind, UploadState

# Scalar held in one spreadsheet cell. Dates arrive as ISO-8601 strings.
CellValue = Union[str, int, float, bool, None]
Row = dict[str, CellValue]


def today_iso() -> str:
    return date.today().isoformat()


@dataclass(frozen=True)
class ChartDefinition:
    """One chart in the report.

    ``data`` is a snapshot of the projected rows taken when the chart was
    created; later uploads to the same slot do not change it.
    """

    id: str
    type: ChartKind
    dataset_name: str
    x_axis_key: str
    y_axis_key: str
    title: str
    data: tuple[Row, ...] = ()

    @property
    def view_id(self) -> str:
        return f"chart-{self.id}"

    def rows(self) -> list[Row]:
        return [dict(r) for r in self.data]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "datasetName": self.dataset_name,
            "xAxisKey": self.x_axis_key,
            "yAxisKey": self.y_axis_key,
            "title": self.title,
            "data": self.rows(),
        }


@dataclass
class ReportMetadata:
    title: str = DEFAULT_REPORT_TITLE
    date: str = field(default_factory=today_iso)
    charts: list[ChartDefinition] = field(default_factory=list)


@dataclass
class UploadStatus:
    file_name: str = ""
    status: UploadState = UploadState.EMPTY
    error: str | None = None
    row_count: int = 0
