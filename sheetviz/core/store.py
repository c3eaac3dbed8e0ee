"""In-memory dataset store shared by every SheetViz service.

The store is the single source of truth for one session: uploaded datasets
keyed by logical slot, the accumulated chart definitions, and the report
metadata consumed by the exporters. Each logical operation has exactly one
mutation method; readers get copies, so nothing outside this module writes
to the underlying state. Mutations apply synchronously and subscribers are
notified before the mutating call returns.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace
from typing import Any

from .enums import DatasetSlot
from .logging_config import get_logger
from .models import ChartDefinition, ReportMetadata, Row

logger = get_logger(__name__)

Listener = Callable[["DatasetStore"], None]

_METADATA_FIELDS = ("title", "date")


def parse_slot(slot: str | DatasetSlot) -> DatasetSlot | None:
    """Return the DatasetSlot for ``slot`` or None if it is not recognized."""
    if isinstance(slot, DatasetSlot):
        return slot
    try:
        return DatasetSlot(slot)
    except ValueError:
        return None


class DatasetStore:
    """Process-wide state for uploaded datasets and the report."""

    def __init__(self) -> None:
        self._datasets: dict[DatasetSlot, list[Row] | None] = {}
        self._report = ReportMetadata()
        self._uploaded: list[DatasetSlot] = []
        self._listeners: list[Listener] = []
        self._reset()

    def _reset(self) -> None:
        self._datasets = {slot: None for slot in DatasetSlot}
        self._report = ReportMetadata()
        self._uploaded = []

    # Readers

    def get_dataset(self, slot: str | DatasetSlot) -> list[Row] | None:
        key = parse_slot(slot)
        if key is None:
            logger.warning("Unknown dataset slot", extra={"slot": str(slot)})
            return None
        rows = self._datasets[key]
        return list(rows) if rows is not None else None

    @property
    def datasets(self) -> dict[DatasetSlot, list[Row] | None]:
        return {k: (list(v) if v is not None else None) for k, v in self._datasets.items()}

    @property
    def report(self) -> ReportMetadata:
        return replace(self._report, charts=list(self._report.charts))

    @property
    def charts(self) -> list[ChartDefinition]:
        return list(self._report.charts)

    @property
    def uploaded_slots(self) -> list[DatasetSlot]:
        return list(self._uploaded)

    # Mutations

    def set_dataset(self, slot: str | DatasetSlot, rows: Sequence[Row]) -> bool:
        """Replace the dataset stored under ``slot``.

        Returns False, leaving state untouched, when the slot is unknown.
        """
        key = parse_slot(slot)
        if key is None:
            logger.warning(f'Unknown dataset slot: "{slot}"', extra={"slot": str(slot)})
            return False

        self._datasets[key] = [dict(row) for row in rows]
        if key not in self._uploaded:
            self._uploaded.append(key)

        logger.debug("Dataset stored", extra={"slot": key.value, "rows": len(rows)})
        self._notify()
        return True

    def add_chart_definitions(self, charts: Iterable[ChartDefinition]) -> None:
        """Replace the report's chart list with ``charts``."""
        self._report.charts = list(charts)
        logger.debug("Chart definitions replaced", extra={"count": len(self._report.charts)})
        self._notify()

    def update_report_metadata(self, partial: dict[str, Any]) -> None:
        """Shallow-merge title/date into the report metadata."""
        for key, value in partial.items():
            if key not in _METADATA_FIELDS:
                logger.warning(
                    "Ignoring report metadata field", extra={"field": key}
                )
                continue
            setattr(self._report, key, value)
        self._notify()

    def clear_all(self) -> None:
        """Reset every slot, the report metadata and upload tracking."""
        self._reset()
        logger.debug("Store cleared")
        self._notify()

    # Subscriptions

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` to be called after every mutation.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
