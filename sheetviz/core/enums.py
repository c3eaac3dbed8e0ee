from __future__ import annotations

from enum import Enum


class DatasetSlot(str, Enum):
    COMBINED_SOURCES = "combinedSources"
    OFFICIAL_FACEBOOK = "officialFacebook"
    OFFICIAL_INSTAGRAM = "officialInstagram"
    KEYWORDS = "keywords"

    @property
    def label(self) -> str:
        return _SLOT_LABELS[self]


_SLOT_LABELS = {
    DatasetSlot.COMBINED_SOURCES: "Combined Sources",
    DatasetSlot.OFFICIAL_FACEBOOK: "Official Facebook",
    DatasetSlot.OFFICIAL_INSTAGRAM: "Official Instagram",
    DatasetSlot.KEYWORDS: "Keywords",
}


class ChartKind(str, Enum):
    BAR = "bar"
    LINE = "line"
    PIE = "pie"


class PageSize(str, Enum):
    A4 = "a4"
    LETTER = "letter"
    LEGAL = "legal"


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class UploadState(str, Enum):
    EMPTY = "empty"
    SUCCESS = "success"
    ERROR = "error"


class ExportState(str, Enum):
    IDLE = "idle"
    EXPORTING = "exporting"
    SUCCESS = "success"
    ERROR = "error"
