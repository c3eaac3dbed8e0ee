from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ..core.config import DEFAULT_REPORT_TITLE, Settings, get_settings
from ..core.enums import ExportState
from ..core.errors import ExportError, NoChartsError
from ..core.logging_config import get_logger
from ..core.models import ReportMetadata
from ..visuals.registry import ChartViewRegistry

logger = get_logger(__name__)


_PATH_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def sanitize_filename(title: str, suffix: str) -> str:
    """Report title as a single file name.

    Whitespace runs and path or reserved characters become underscores. A
    title that leaves nothing usable falls back to the default report title.
    """
    name = _PATH_CHARS.sub("_", re.sub(r"\s+", "_", title))
    if not name.strip("._"):
        name = re.sub(r"\s+", "_", DEFAULT_REPORT_TITLE)
    return name + suffix


class DocumentExporter(ABC):
    """Shared export state machine: idle -> exporting -> success | error.

    Subclasses build the document bytes and write them; this class guards the
    no-charts precondition, converts every failure into a generic message and
    always leaves the exporting state.
    """

    kind = "document"
    failure_message = ExportError.user_message

    def __init__(
        self, registry: ChartViewRegistry, settings: Settings | None = None
    ) -> None:
        self.registry = registry
        self.settings = settings or get_settings()
        self.is_exporting = False
        self.success = False
        self.error: str | None = None

    @property
    def status(self) -> ExportState:
        if self.is_exporting:
            return ExportState.EXPORTING
        if self.error:
            return ExportState.ERROR
        if self.success:
            return ExportState.SUCCESS
        return ExportState.IDLE

    def export(
        self,
        report: ReportMetadata,
        output_dir: str | Path | None = None,
        **options: Any,
    ) -> Path | None:
        """Build and write the document for ``report``.

        Returns:
            Path of the written file, or None on failure (see ``error``)
        """
        if not report.charts:
            self.success = False
            self.error = NoChartsError.user_message
            logger.info(f"{self.kind} export skipped: no charts")
            return None

        self.is_exporting = True
        self.error = None
        self.success = False

        target_dir = Path(output_dir or self.settings.output_dir)
        path = target_dir / self.output_name(report, **options)

        try:
            content = self.build(report, **options)
            self.write(path, content)
        except Exception as e:
            logger.error(
                f"Error generating {self.kind}",
                extra={"error": str(e), "error_type": type(e).__name__, "path": str(path)},
                exc_info=True,
            )
            self.error = self.failure_message
            return None
        finally:
            self.is_exporting = False

        self.success = True
        logger.info(
            f"{self.kind} exported",
            extra={"path": str(path), "charts": len(report.charts)},
        )
        return path

    @abstractmethod
    def output_name(self, report: ReportMetadata, **options: Any) -> str:
        """File name for the exported document."""

    @abstractmethod
    def build(self, report: ReportMetadata, **options: Any) -> bytes:
        """Assemble the whole document in memory."""

    @abstractmethod
    def write(self, path: Path, content: bytes) -> None:
        """Persist the finished document."""
