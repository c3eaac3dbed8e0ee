"""YAML report definitions.

A report definition names the file to upload into each dataset slot, the
charts to build from them and the export options, e.g.::

    report:
      title: Social Media Report
    uploads:
      officialInstagram: data/instagram.xlsx
    charts:
      - dataset: officialInstagram
        x: Timestamp
        y: Likes
        type: line
    export:
      pdf:
        page_size: letter
        orientation: landscape
        group_by_dataset: true
      slides:
        filename: DataReport.pptx
        table_dataset: officialInstagram
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .enums import ChartKind, Orientation, PageSize


@dataclass(frozen=True)
class ChartSpec:
    dataset: str
    x: str
    y: str
    type: ChartKind = ChartKind.BAR


@dataclass(frozen=True)
class PdfOptions:
    page_size: PageSize | None = None
    orientation: Orientation | None = None
    group_by_dataset: bool = False


@dataclass(frozen=True)
class SlideOptions:
    filename: str | None = None
    table_dataset: str | None = None


@dataclass
class ReportConfig:
    title: str | None = None
    date: str | None = None
    uploads: dict[str, Path] = field(default_factory=dict)
    charts: list[ChartSpec] = field(default_factory=list)
    pdf: PdfOptions = field(default_factory=PdfOptions)
    slides: SlideOptions = field(default_factory=SlideOptions)


def _parse_chart(entry: dict[str, Any]) -> ChartSpec:
    missing = [k for k in ("dataset", "x", "y") if not entry.get(k)]
    if missing:
        raise ValueError(f"Chart entry missing required keys: {', '.join(missing)}")
    return ChartSpec(
        dataset=str(entry["dataset"]),
        x=str(entry["x"]),
        y=str(entry["y"]),
        type=ChartKind(str(entry.get("type", "bar")).lower()),
    )


def parse_report_config(data: dict[str, Any], base_dir: Path | None = None) -> ReportConfig:
    """Build a ReportConfig from already-loaded YAML data.

    Relative upload paths resolve against ``base_dir``.

    Raises:
        ValueError: If a section has the wrong shape or an unknown enum value
    """
    report = data.get("report") or {}
    uploads_raw = data.get("uploads") or {}
    charts_raw = data.get("charts") or []
    export = data.get("export") or {}

    if not isinstance(uploads_raw, dict):
        raise ValueError("'uploads' must map dataset slots to file paths")
    if not isinstance(charts_raw, list):
        raise ValueError("'charts' must be a list")

    uploads: dict[str, Path] = {}
    for slot, raw_path in uploads_raw.items():
        path = Path(str(raw_path))
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path
        uploads[str(slot)] = path

    pdf_raw = export.get("pdf") or {}
    slides_raw = export.get("slides") or {}

    pdf = PdfOptions(
        page_size=PageSize(str(pdf_raw["page_size"]).lower()) if pdf_raw.get("page_size") else None,
        orientation=(
            Orientation(str(pdf_raw["orientation"]).lower()) if pdf_raw.get("orientation") else None
        ),
        group_by_dataset=bool(pdf_raw.get("group_by_dataset", False)),
    )
    slides = SlideOptions(
        filename=slides_raw.get("filename"),
        table_dataset=slides_raw.get("table_dataset"),
    )

    date_value = report.get("date")
    return ReportConfig(
        title=report.get("title"),
        date=str(date_value) if date_value else None,
        uploads=uploads,
        charts=[_parse_chart(c) for c in charts_raw],
        pdf=pdf,
        slides=slides,
    )


def load_report_config(path: str | Path) -> ReportConfig:
    """Load a report definition from YAML.

    Raises:
        FileNotFoundError: If the file does not exist
        yaml.YAMLError: If the YAML is malformed
        ValueError: If the content is not a valid report definition
    """
    cfg_path = Path(path)
    with cfg_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Report config must be a mapping: {cfg_path}")
    return parse_report_config(data, base_dir=cfg_path.parent)
