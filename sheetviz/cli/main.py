from __future__ import annotations

from pathlib import Path

import typer
import yaml

from .. import __version__
from ..charts.builder import ChartBuilder
from ..core.config import get_settings
from ..core.enums import ChartKind, DatasetSlot, Orientation, PageSize
from ..core.errors import InvalidSelectionError
from ..core.logging_config import get_logger, setup_logging
from ..core.report_config import load_report_config
from ..core.store import DatasetStore
from ..ingest.upload import UploadService
from ..visuals.charts import ChartRenderer, rasterize
from ..workflow.dashboard import summarize
from ..workflow.report_workflow import SUPPORTED_FORMATS, ReportWorkflow
from . import output as cli_output

app = typer.Typer(help="SheetViz CLI")
report_app = typer.Typer(help="Report building and export commands")

logger = get_logger(__name__)


@app.callback()
def callback(
    json_logs: bool = typer.Option(False, "--json-logs", help="Output logs in JSON format"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
) -> None:
    """Configure global CLI options."""
    setup_logging(json_output=json_logs, log_level=log_level)
    logger.debug("CLI initialized", extra={"json_logs": json_logs, "log_level": log_level})


@app.command()
def version() -> None:
    """Print version."""
    typer.echo(__version__)


def _upload_or_exit(uploads: UploadService, slot: DatasetSlot, file: Path) -> None:
    status = uploads.upload(slot, file)
    if status.error:
        cli_output.error(status.error)
        raise typer.Exit(code=1)


@app.command()
def inspect(
    file: Path = typer.Argument(..., help="Spreadsheet to inspect (.xlsx, .xls or .csv)"),  # noqa: B008
    slot: DatasetSlot = typer.Option(  # noqa: B008
        DatasetSlot.COMBINED_SOURCES, help="Dataset slot to load the file into"
    ),
) -> None:
    """Validate and decode a spreadsheet, then list its columns."""
    store = DatasetStore()
    uploads = UploadService(store)
    _upload_or_exit(uploads, slot, file)

    rows = store.get_dataset(slot) or []
    columns = list(rows[0].keys()) if rows else []
    cli_output.success(f"{file.name}: {len(rows)} rows loaded into {slot.label}")
    cli_output.plain("Columns:")
    for index, column in enumerate(columns):
        cli_output.plain(f"  [{index}] {column}")


@app.command()
def preview(
    file: Path = typer.Argument(..., help="Spreadsheet to chart"),  # noqa: B008
    x: str = typer.Option(..., "--x", help="Column for the X axis / pie labels"),
    y: str = typer.Option(..., "--y", help="Column for the Y axis / pie values"),
    chart_type: ChartKind = typer.Option(  # noqa: B008
        ChartKind.BAR, "--type", case_sensitive=False, help="Chart type: bar|line|pie"
    ),
    output: Path = typer.Option(Path("chart.png"), help="Where to write the PNG preview"),  # noqa: B008
    dpi: int = typer.Option(100, min=50, max=600, help="Image resolution"),
) -> None:
    """Render a single chart from a spreadsheet to a PNG file."""
    store = DatasetStore()
    uploads = UploadService(store)
    slot = DatasetSlot.COMBINED_SOURCES
    _upload_or_exit(uploads, slot, file)

    builder = ChartBuilder(store)
    builder.select_dataset(slot)
    builder.select_kind(chart_type)
    try:
        builder.select_columns_by_name(x, y)
    except InvalidSelectionError as e:
        cli_output.error(e.user_message)
        raise typer.Exit(code=1) from None

    chart = builder.create_chart()
    if chart is None:
        cli_output.error("Please select X and Y axes for your chart")
        raise typer.Exit(code=1)

    image = rasterize(ChartRenderer().render(chart), dpi=dpi, close=True)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(image.png)
    cli_output.chart(chart.title)
    cli_output.success(f"Preview written to {output}")


@report_app.command("status")
def report_status(
    config: str = typer.Option(
        "configs/sample_report.yaml", help="Path to report definition YAML"
    ),
) -> None:
    """Upload the configured files and show the dashboard summary."""
    try:
        cfg = load_report_config(config)
    except FileNotFoundError:
        cli_output.error(f"Config file not found: {config}")
        raise typer.Exit(code=1) from None
    except (yaml.YAMLError, ValueError) as e:
        cli_output.error(f"Invalid report config: {e}")
        raise typer.Exit(code=1) from None

    store = DatasetStore()
    uploads = UploadService(store)
    for slot, path in cfg.uploads.items():
        uploads.upload(slot, path)
    if cfg.title:
        store.update_report_metadata({"title": cfg.title})

    summary = summarize(store, uploads)
    cli_output.info(f"{summary.title} ({summary.date})")
    cli_output.plain(f"{len(summary.uploaded_slots)} file(s) uploaded")
    for s in summary.slots:
        if s.uploaded:
            cli_output.slot_status(s.slot.label, f"{s.file_name} ({s.rows} rows)", ok=True)
        else:
            cli_output.slot_status(s.slot.label, s.error or "not uploaded", ok=False)
    cli_output.chart(f"{len(cfg.charts)} chart(s) defined")


@report_app.command("run")
def report_run(
    config: str = typer.Option(
        "configs/sample_report.yaml", help="Path to report definition YAML"
    ),
    format: str = typer.Option(
        "pdf", help="Output format(s): pdf, pptx, or comma-separated (e.g., 'pdf,pptx')"
    ),
    output_dir: str | None = typer.Option(None, help="Directory for exported documents"),
    page_size: PageSize | None = typer.Option(  # noqa: B008
        None, case_sensitive=False, help="PDF page size: a4|letter|legal"
    ),
    orientation: Orientation | None = typer.Option(  # noqa: B008
        None, case_sensitive=False, help="PDF orientation: portrait|landscape"
    ),
    title: str | None = typer.Option(None, help="Report title (overrides the config)"),
    require_all: bool = typer.Option(
        False, "--require-all", help=f"Require all {len(DatasetSlot)} dataset slots to be uploaded"
    ),
) -> None:
    """Upload, chart and export a report described by a YAML definition.

    Examples:
        sheetviz report run --config configs/sample_report.yaml
        sheetviz report run --config configs/sample_report.yaml --format pdf,pptx --page-size letter --orientation landscape
    """
    formats = [f.strip().lower() for f in format.split(",") if f.strip()]
    unknown = [f for f in formats if f not in SUPPORTED_FORMATS]
    if unknown:
        cli_output.error(f"Unsupported format(s): {', '.join(unknown)}. Use pdf and/or pptx.")
        raise typer.Exit(code=1)

    context = {
        "config": config,
        "formats": formats,
        "output_dir": output_dir or get_settings().output_dir,
        "page_size": page_size,
        "orientation": orientation,
        "title": title,
        "require_all_uploads": require_all,
    }

    result = ReportWorkflow().execute(context)

    if not result.success:
        cli_output.error(result.message)
        raise typer.Exit(code=1)

    cli_output.success(result.message)
    if "pdf_report" in result.data:
        cli_output.plain(f"  PDF: {result.data['pdf_report']}")
    if "slides_report" in result.data:
        cli_output.plain(f"  Slides: {result.data['slides_report']}")


app.add_typer(report_app, name="report")
