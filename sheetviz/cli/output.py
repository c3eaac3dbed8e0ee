"""Console output helpers for the SheetViz CLI.

User-facing feedback goes through these functions; diagnostics go through
the module loggers. Keep the two apart: a failed upload prints the short
message next to its slot while the parser error is logged.
"""

from __future__ import annotations

from enum import Enum

import typer


class OutputColor(str, Enum):
    """Valid color options for plain text output."""

    WHITE = "WHITE"
    CYAN = "CYAN"
    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"


def success(message: str, *, prefix: bool = True) -> None:
    """Green message with a checkmark, e.g. "✅ Report written to report.pdf"."""
    formatted = f"✅ {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.GREEN)


def error(message: str, *, prefix: bool = True, err: bool = True) -> None:
    """Red message with a cross, written to stderr by default."""
    formatted = f"❌ {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.RED, err=err)


def info(message: str, *, prefix: bool = True) -> None:
    formatted = f"ℹ️  {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.CYAN)


def warning(message: str, *, prefix: bool = True) -> None:
    formatted = f"⚠️  {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.YELLOW)


def plain(message: str, *, color: OutputColor | None = None) -> None:
    if color:
        typer.secho(message, fg=getattr(typer.colors, color.value))
    else:
        typer.echo(message)


def chart(message: str, *, prefix: bool = True) -> None:
    """Cyan message with a chart emoji, used for chart listings."""
    formatted = f"📊 {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.CYAN)


def slot_status(label: str, detail: str, *, ok: bool) -> None:
    """One line of the upload status table."""
    mark = "✔" if ok else "·"
    typer.secho(
        f"  {mark} {label:<20} {detail}",
        fg=typer.colors.GREEN if ok else typer.colors.WHITE,
    )
