"""Shared fixtures for the SheetViz test suite."""
from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import pytest

from sheetviz.core.config import Settings
from sheetviz.core.enums import DatasetSlot
from sheetviz.core.store import DatasetStore


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(output_dir=str(tmp_path / "out"), capture_delay_seconds=0)


@pytest.fixture
def sales_rows() -> list[dict]:
    return [{"Month": "Jan", "Sales": 10}, {"Month": "Feb", "Sales": 20}]


@pytest.fixture
def instagram_rows() -> list[dict]:
    return [
        {
            "Media URL": "https://www.instagram.com/p/abc123/",
            "Caption": "Spring launch",
            "Likes": 340,
            "Comments": 21,
        },
        {
            "Media URL": "https://www.instagram.com/p/def456/",
            "Caption": "Behind the scenes",
            "Likes": 215,
            "Comments": 9,
        },
    ]


@pytest.fixture
def store(sales_rows: list[dict]) -> DatasetStore:
    s = DatasetStore()
    s.set_dataset(DatasetSlot.COMBINED_SOURCES, sales_rows)
    return s


@pytest.fixture
def sales_csv(tmp_path: Path) -> Path:
    path = tmp_path / "sales.csv"
    path.write_text("Month,Sales\nJan,10\nFeb,20\n", encoding="utf-8")
    return path
