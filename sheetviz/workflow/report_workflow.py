from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..charts.builder import ChartBuilder
from ..core.config import Settings, get_settings
from ..core.errors import InvalidSelectionError
from ..core.logging_config import get_logger
from ..core.report_config import ReportConfig, load_report_config
from ..core.store import DatasetStore
from ..ingest.upload import UploadService
from ..render.pdf import PDFExporter
from ..render.report_pdf import ReportPdfExporter
from ..render.slides import SlideDeckExporter
from ..visuals.charts import ChartRenderer
from ..visuals.registry import ChartViewRegistry
from .base import BaseWorkflow, WorkflowResult

logger = get_logger(__name__)

SUPPORTED_FORMATS = ("pdf", "pptx")


class ReportWorkflow(BaseWorkflow):
    """Complete report workflow: YAML definition -> uploads -> charts -> documents.

    1. Loads the report definition
    2. Uploads every configured file into its dataset slot
    3. Builds the configured chart definitions
    4. Draws the chart views
    5. Exports the requested PDF and/or slide deck
    """

    def __init__(
        self,
        settings: Settings | None = None,
        pdf_exporter: PDFExporter | None = None,
        renderer: ChartRenderer | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.pdf_exporter = pdf_exporter
        self.renderer = renderer or ChartRenderer()
        self.store = DatasetStore()

    def validate_context(self, context: dict[str, Any]) -> tuple[bool, str]:
        if "config" not in context:
            return False, "Missing required parameter: config"

        config_path = Path(context["config"])
        if not config_path.exists():
            return False, f"Report config not found: {config_path}"

        formats = context.get("formats", ["pdf"])
        unknown = [f for f in formats if f not in SUPPORTED_FORMATS]
        if unknown:
            return False, (
                f"Unsupported format(s): {', '.join(unknown)}. "
                f"Use: {', '.join(SUPPORTED_FORMATS)}"
            )
        return True, ""

    def execute(self, context: dict[str, Any]) -> WorkflowResult:
        logger.info("Starting report workflow", extra={"config": context.get("config")})

        is_valid, error_msg = self.validate_context(context)
        if not is_valid:
            logger.error("Context validation failed", extra={"error": error_msg})
            return WorkflowResult(success=False, data={}, message=error_msg)

        try:
            cfg = load_report_config(context["config"])
        except (yaml.YAMLError, OSError, ValueError) as e:
            logger.error(
                "Failed to load report config",
                extra={"config": context["config"], "error": str(e)},
            )
            return WorkflowResult(success=False, data={}, message=f"Invalid report config: {e}")

        self.store = DatasetStore()
        uploads = UploadService(self.store)

        # Step 1: uploads
        failed = []
        for slot, path in cfg.uploads.items():
            status = uploads.upload(slot, path)
            if status.error:
                failed.append(f"{slot}: {status.error}")
        if failed:
            return WorkflowResult(
                success=False,
                data={"errors": failed},
                message="Upload failed - " + "; ".join(failed),
            )
        if not uploads.ready_for_charts(require_all=context.get("require_all_uploads", False)):
            return WorkflowResult(
                success=False, data={}, message=uploads.errors.get("general", "No uploads")
            )

        # Step 2: report metadata
        metadata: dict[str, Any] = {
            "title": context.get("title") or cfg.title or self.settings.report_title
        }
        if cfg.date:
            metadata["date"] = cfg.date
        self.store.update_report_metadata(metadata)

        # Step 3: chart definitions
        try:
            self._build_charts(cfg)
        except InvalidSelectionError as e:
            logger.error("Chart definition failed", extra={"error": str(e)})
            return WorkflowResult(success=False, data={}, message=e.user_message)

        # Step 4 + 5: draw views, export
        output_dir = Path(context.get("output_dir") or self.settings.output_dir)
        formats = context.get("formats", ["pdf"])
        registry = ChartViewRegistry()
        data: dict[str, Any] = {
            "charts": len(self.store.charts),
            "uploads": {s.value: len(self.store.get_dataset(s) or []) for s in self.store.uploaded_slots},
        }
        try:
            registry.populate(self.store.charts, self.renderer)
            report = self.store.report

            if "pdf" in formats:
                pdf = ReportPdfExporter(registry, self.settings, pdf_exporter=self.pdf_exporter)
                path = pdf.export(
                    report,
                    output_dir,
                    page_size=context.get("page_size") or cfg.pdf.page_size,
                    orientation=context.get("orientation") or cfg.pdf.orientation,
                    group_by_dataset=cfg.pdf.group_by_dataset,
                )
                if path is None:
                    return WorkflowResult(success=False, data=data, message=pdf.error or "PDF export failed")
                data["pdf_report"] = str(path)

            if "pptx" in formats:
                slides = SlideDeckExporter(registry, self.store, self.settings)
                path = slides.export(
                    report,
                    output_dir,
                    filename=cfg.slides.filename,
                    table_dataset=cfg.slides.table_dataset,
                )
                if path is None:
                    return WorkflowResult(
                        success=False, data=data, message=slides.error or "Slide export failed"
                    )
                data["slides_report"] = str(path)
        finally:
            registry.close()

        logger.info("Report workflow completed successfully", extra=data)
        return WorkflowResult(
            success=True,
            data=data,
            message=f"Report complete: {data['charts']} chart(s) exported",
        )

    def _build_charts(self, cfg: ReportConfig) -> None:
        builder = ChartBuilder(self.store)
        for spec in cfg.charts:
            builder.select_dataset(spec.dataset)
            if not builder.columns_enabled:
                raise InvalidSelectionError(
                    f"Dataset {spec.dataset} has no data",
                    user_message=f"Dataset '{spec.dataset}' has no uploaded data",
                )
            builder.select_kind(spec.type)
            builder.select_columns_by_name(spec.x, spec.y)
            builder.create_chart()
