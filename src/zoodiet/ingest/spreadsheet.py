"""Spreadsheet loader for daily feeding exports (xlsx, xls and csv)."""

import io
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any, BinaryIO
from zipfile import BadZipFile

import pandas as pd

from zoodiet.config import get_settings
from zoodiet.ingest.schemas import REQUIRED_COLUMNS, SHEET_COLUMNS, SheetRow
from zoodiet.logging_config import get_logger

logger = get_logger(__name__)

CSV_SUFFIXES = frozenset({".csv", ".txt"})

# Header cells are matched case-insensitively; the snake_case spelling of
# "Feed type name" is accepted too.
_HEADER_LOOKUP: dict[str, str] = {column.lower(): column for column in SHEET_COLUMNS}
_HEADER_LOOKUP["feed_type_name"] = "Feed type name"


class SpreadsheetError(Exception):
    """Raised when an uploaded sheet can't be turned into feeding rows."""

    def __init__(self, message: str, filename: str | None = None):
        super().__init__(message)
        self.filename = filename


def _header_name(cell: Any) -> str:
    if cell is None or (isinstance(cell, float) and pd.isna(cell)):
        return ""
    return str(cell).strip().lower()


def find_header_row(rows: Sequence[Sequence[Any]], scan_rows: int | None = None) -> int | None:
    """
    Index of the first row naming more than half of the required columns.

    Exports often carry a title block above the table, so the header is
    searched for instead of assumed to be the first row.
    """
    scan_rows = scan_rows or get_settings().header_scan_rows
    required = {column.lower() for column in REQUIRED_COLUMNS}

    for index, row in enumerate(rows[:scan_rows]):
        names = {_HEADER_LOOKUP.get(_header_name(cell), _header_name(cell)).lower() for cell in row}
        if len(required & names) > len(required) / 2:
            return index
    return None


def _read_frame(data: bytes, filename: str) -> pd.DataFrame:
    buffer = io.BytesIO(data)
    if Path(filename).suffix.lower() in CSV_SUFFIXES:
        return pd.read_csv(buffer, header=None, dtype=object, skip_blank_lines=False)
    return pd.read_excel(buffer, header=None, dtype=object)


def parse_rows(raw_rows: Sequence[Sequence[Any]], filename: str | None = None) -> list[SheetRow]:
    """
    Validate the rows below the detected header.

    Columns not part of the export are ignored and fully blank rows are
    skipped.

    Raises:
        SpreadsheetError: If no header row is found or no data rows follow it.
    """
    header_index = find_header_row(raw_rows)
    if header_index is None:
        raise SpreadsheetError(
            "A valid header row could not be found. "
            "Please ensure the required columns are present.",
            filename=filename,
        )

    columns = [_HEADER_LOOKUP.get(_header_name(cell)) for cell in raw_rows[header_index]]

    rows = []
    for raw in raw_rows[header_index + 1 :]:
        values = {
            column: None if pd.isna(value) else value
            for column, value in zip(columns, raw)
            if column is not None
        }
        if all(value is None or str(value).strip() == "" for value in values.values()):
            continue
        rows.append(SheetRow.model_validate(values))

    if not rows:
        raise SpreadsheetError(
            "The sheet contains headers but no data rows.",
            filename=filename,
        )

    logger.info(
        f"Parsed {len(rows)} rows from {filename or 'sheet'} (header at row {header_index + 1})"
    )
    return rows


def load_spreadsheet(
    source: str | os.PathLike | bytes | BinaryIO,
    filename: str | None = None,
) -> list[SheetRow]:
    """
    Load a feeding export and validate its rows.

    Args:
        source: A path, the raw file bytes or a binary file object.
        filename: Name used to pick the reader (csv vs. Excel) and for errors;
            defaults to the path's name.

    Returns:
        Validated sheet rows in sheet order.

    Raises:
        SpreadsheetError: If the file can't be read or holds no feeding rows.
    """
    if isinstance(source, (str, os.PathLike)):
        path = Path(source)
        filename = filename or path.name
        try:
            data = path.read_bytes()
        except OSError as e:
            raise SpreadsheetError(f"Could not read {path}: {e}", filename=filename) from e
    elif isinstance(source, bytes):
        data = source
    else:
        data = source.read()

    filename = filename or "upload.xlsx"
    max_bytes = get_settings().max_upload_bytes
    if len(data) > max_bytes:
        raise SpreadsheetError(
            f"File is {len(data)} bytes, larger than the {max_bytes} byte limit",
            filename=filename,
        )

    try:
        frame = _read_frame(data, filename)
    except (ValueError, OSError, BadZipFile) as e:
        logger.warning(f"Failed to read spreadsheet {filename}: {e}")
        raise SpreadsheetError(f"Could not read spreadsheet: {e}", filename=filename) from e

    return parse_rows(frame.values.tolist(), filename=filename)
