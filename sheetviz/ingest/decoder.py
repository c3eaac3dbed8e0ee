"""Spreadsheet decoding.

Turns the raw bytes of an uploaded ``.xlsx``/``.xls``/``.csv`` file into an
ordered list of row records taken from the first sheet. Row 1 is the header
and names the columns of every later row. pandas does the parsing
(openpyxl for .xlsx, xlrd for .xls); this module only normalises the cells
into plain Python scalars.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time
from io import BytesIO
from pathlib import PurePath
from typing import Any

import numpy as np
import pandas as pd

from ..core.errors import DecodeError
from ..core.logging_config import get_logger
from ..core.models import CellValue, Row

logger = get_logger(__name__)

SUPPORTED_EXTENSIONS = (".xlsx", ".xls", ".csv")


def file_extension(file_name: str) -> str:
    return PurePath(file_name).suffix.lower()


def is_supported_file(file_name: str) -> bool:
    """Check the filename suffix against the spreadsheet extensions."""
    return file_extension(file_name) in SUPPORTED_EXTENSIONS


def normalize_cell(value: Any) -> CellValue:
    """Convert a pandas/numpy cell into a builtin scalar.

    Missing values become None and date-like values ISO-8601 strings.
    """
    if value is None or value is pd.NA or value is pd.NaT:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, pd.Timestamp):
        if value.hour == value.minute == value.second == value.microsecond == 0:
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, np.bool_):
        return bool(value)
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        f = float(value)
        return None if math.isnan(f) else f
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def frame_to_rows(frame: pd.DataFrame) -> list[Row]:
    """Convert a DataFrame into row records, omitting empty cells."""
    columns = [str(c) for c in frame.columns]
    rows: list[Row] = []
    for values in frame.itertuples(index=False, name=None):
        row: Row = {}
        for column, raw in zip(columns, values):
            cell = normalize_cell(raw)
            if cell is None or cell == "":
                continue
            row[column] = cell
        rows.append(row)
    return rows


def decode_spreadsheet(content: bytes, file_name: str) -> list[Row]:
    """Decode spreadsheet bytes into row records.

    Args:
        content: Raw file bytes
        file_name: Original filename, used to pick the parser

    Returns:
        Row records from the first sheet, header row excluded

    Raises:
        DecodeError: If the content cannot be parsed
    """
    ext = file_extension(file_name)
    try:
        if ext == ".csv":
            frame = pd.read_csv(BytesIO(content))
        else:
            frame = pd.read_excel(BytesIO(content), sheet_name=0)
    except pd.errors.EmptyDataError:
        logger.debug("Spreadsheet is empty", extra={"file_name": file_name})
        return []
    except Exception as e:
        logger.error(
            "Failed to decode spreadsheet",
            extra={"file_name": file_name, "error": str(e), "error_type": type(e).__name__},
        )
        raise DecodeError(f"Could not parse {file_name}: {e}") from e

    # Blank sheet rows are skipped; nullable dtypes keep integer columns integral.
    frame = frame.dropna(how="all").convert_dtypes()
    rows = frame_to_rows(frame)
    logger.debug(
        "Spreadsheet decoded",
        extra={"file_name": file_name, "rows": len(rows), "columns": len(frame.columns)},
    )
    return rows
