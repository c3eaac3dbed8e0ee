from __future__ import annotations

from dataclasses import dataclass, field

from ..core.enums import DatasetSlot, UploadState
from ..core.store import DatasetStore
from ..ingest.upload import UploadService


@dataclass
class SlotSummary:
    slot: DatasetSlot
    uploaded: bool
    rows: int
    file_name: str = ""
    error: str | None = None


@dataclass
class DashboardSummary:
    title: str
    date: str
    slots: list[SlotSummary] = field(default_factory=list)
    uploaded_slots: list[DatasetSlot] = field(default_factory=list)
    chart_count: int = 0

    @property
    def can_create_charts(self) -> bool:
        return bool(self.uploaded_slots)

    @property
    def ready_for_export(self) -> bool:
        return self.chart_count > 0


def summarize(store: DatasetStore, uploads: UploadService | None = None) -> DashboardSummary:
    """Snapshot of upload and chart status for the dashboard."""
    report = store.report
    slots = []
    for slot, rows in store.datasets.items():
        status = uploads.status(slot) if uploads else None
        slots.append(
            SlotSummary(
                slot=slot,
                uploaded=rows is not None,
                rows=len(rows) if rows else 0,
                file_name=status.file_name if status and status.status is UploadState.SUCCESS else "",
                error=status.error if status else None,
            )
        )
    return DashboardSummary(
        title=report.title,
        date=report.date,
        slots=slots,
        uploaded_slots=store.uploaded_slots,
        chart_count=len(report.charts),
    )
