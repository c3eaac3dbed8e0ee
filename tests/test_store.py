"""Tests for the dataset store."""
from __future__ import annotations

from datetime import date

from sheetviz.core.config import DEFAULT_REPORT_TITLE
from sheetviz.core.enums import ChartKind, DatasetSlot
from sheetviz.core.models import ChartDefinition
from sheetviz.core.store import DatasetStore, parse_slot


def _chart(chart_id: str = "1") -> ChartDefinition:
    return ChartDefinition(
        id=chart_id,
        type=ChartKind.BAR,
        dataset_name="keywords",
        x_axis_key="Month",
        y_axis_key="Sales",
        title="Bar Chart - Sales by Month",
        data=({"Month": "Jan", "Sales": 10},),
    )


class TestDatasetStore:
    """Test store mutations and readers."""

    def test_initial_state(self) -> None:
        store = DatasetStore()
        assert all(rows is None for rows in store.datasets.values())
        assert set(store.datasets) == set(DatasetSlot)
        assert store.report.title == DEFAULT_REPORT_TITLE
        assert store.report.date == date.today().isoformat()
        assert store.charts == []
        assert store.uploaded_slots == []

    def test_set_dataset_replaces_rows(self, sales_rows: list[dict]) -> None:
        store = DatasetStore()
        assert store.set_dataset("keywords", sales_rows) is True
        assert store.get_dataset(DatasetSlot.KEYWORDS) == sales_rows

        store.set_dataset("keywords", [{"Month": "Mar", "Sales": 5}])
        assert store.get_dataset("keywords") == [{"Month": "Mar", "Sales": 5}]
        assert store.uploaded_slots == [DatasetSlot.KEYWORDS]

    def test_set_dataset_unknown_slot_is_ignored(self, sales_rows: list[dict], caplog) -> None:
        store = DatasetStore()
        with caplog.at_level("WARNING", logger="sheetviz"):
            assert store.set_dataset("tiktok", sales_rows) is False
        assert "Unknown dataset slot" in caplog.text
        assert all(rows is None for rows in store.datasets.values())
        assert store.uploaded_slots == []

    def test_readers_return_copies(self, store: DatasetStore) -> None:
        rows = store.get_dataset("combinedSources")
        assert rows is not None
        rows.append({"Month": "Mar", "Sales": 30})
        assert len(store.get_dataset("combinedSources") or []) == 2

        store.report.charts.append(_chart())
        assert store.charts == []

    def test_add_chart_definitions_replaces_list(self) -> None:
        store = DatasetStore()
        store.add_chart_definitions([_chart("1"), _chart("2")])
        store.add_chart_definitions([_chart("3")])
        assert [c.id for c in store.charts] == ["3"]

    def test_update_report_metadata_merges_title_and_date(self) -> None:
        store = DatasetStore()
        store.add_chart_definitions([_chart()])
        store.update_report_metadata({"title": "Q1 Review"})
        assert store.report.title == "Q1 Review"
        assert store.report.date == date.today().isoformat()

        store.update_report_metadata({"date": "2025-03-31", "charts": []})
        assert store.report.date == "2025-03-31"
        assert len(store.charts) == 1

    def test_clear_all_restores_defaults(self, store: DatasetStore) -> None:
        store.add_chart_definitions([_chart()])
        store.update_report_metadata({"title": "Custom", "date": "2020-01-01"})

        store.clear_all()
        store.clear_all()

        assert all(rows is None for rows in store.datasets.values())
        assert store.report.title == DEFAULT_REPORT_TITLE
        assert store.report.date == date.today().isoformat()
        assert store.charts == []
        assert store.uploaded_slots == []

    def test_subscribers_see_committed_state(self, sales_rows: list[dict]) -> None:
        store = DatasetStore()
        seen: list[int] = []
        unsubscribe = store.subscribe(lambda s: seen.append(len(s.uploaded_slots)))

        store.set_dataset("keywords", sales_rows)
        store.set_dataset("officialFacebook", sales_rows)
        unsubscribe()
        store.clear_all()

        assert seen == [1, 2]


def test_parse_slot() -> None:
    assert parse_slot("officialInstagram") is DatasetSlot.OFFICIAL_INSTAGRAM
    assert parse_slot(DatasetSlot.KEYWORDS) is DatasetSlot.KEYWORDS
    assert parse_slot("unknown") is None
