from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .enums import DatasetSlot, Orientation, PageSize

DEFAULT_REPORT_TITLE = "Data Visualization Report"
DEFAULT_SLIDES_FILENAME = "DataReport.pptx"


@dataclass
class Settings:
    report_title: str = DEFAULT_REPORT_TITLE
    page_size: PageSize = PageSize.A4
    orientation: Orientation = Orientation.PORTRAIT
    output_dir: str = "reports"
    slides_filename: str = DEFAULT_SLIDES_FILENAME
    table_dataset: DatasetSlot = DatasetSlot.OFFICIAL_INSTAGRAM
    link_column: str = "Media URL"
    chart_dpi: int = 100
    capture_delay_seconds: float = 0.1


def _read_env_file() -> dict[str, str]:
    """Load minimal .env to support SHEETVIZ_* keys if not in the environment.

    Existing os.environ values are never overwritten.
    """
    env_path = Path.cwd() / ".env"
    env: dict[str, str] = {}
    if not env_path.exists():
        return env
    try:
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            k, v = line.split("=", 1)
            env[k.strip()] = v.strip().strip('"').strip("'")
    except (OSError, UnicodeDecodeError):
        return {}
    return env


def _get_env(
    name: str,
    fallback_names: list[str] | None = None,
    env_file: dict[str, str] | None = None,
) -> str | None:
    # Priority: process env -> .env -> fallback names
    val = os.getenv(name)
    if val:
        return val
    if env_file and name in env_file:
        return env_file[name]
    if fallback_names:
        for fb in fallback_names:
            v = os.getenv(fb)
            if v:
                return v
            if env_file and fb in env_file:
                return env_file[fb]
    return None


def get_settings() -> Settings:
    env_file = _read_env_file()
    settings = Settings()

    title = _get_env("SHEETVIZ_REPORT_TITLE", None, env_file)
    if title:
        settings.report_title = title

    page_size = _get_env("SHEETVIZ_PAGE_SIZE", None, env_file)
    if page_size:
        settings.page_size = PageSize(page_size.lower())

    orientation = _get_env("SHEETVIZ_ORIENTATION", None, env_file)
    if orientation:
        settings.orientation = Orientation(orientation.lower())

    output_dir = _get_env("SHEETVIZ_OUTPUT_DIR", ["REPORTS_DIR"], env_file)
    if output_dir:
        settings.output_dir = output_dir

    slides = _get_env("SHEETVIZ_SLIDES_FILENAME", None, env_file)
    if slides:
        settings.slides_filename = slides

    table_dataset = _get_env("SHEETVIZ_TABLE_DATASET", None, env_file)
    if table_dataset:
        settings.table_dataset = DatasetSlot(table_dataset)

    link_column = _get_env("SHEETVIZ_LINK_COLUMN", None, env_file)
    if link_column:
        settings.link_column = link_column

    dpi = _get_env("SHEETVIZ_CHART_DPI", None, env_file)
    if dpi:
        settings.chart_dpi = int(dpi)

    delay = _get_env("SHEETVIZ_CAPTURE_DELAY", None, env_file)
    if delay:
        settings.capture_delay_seconds = float(delay)

    return settings
