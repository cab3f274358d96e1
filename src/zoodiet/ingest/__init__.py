"""Spreadsheet ingestion: raw feeding rows from daily exports."""

from zoodiet.ingest.schemas import REQUIRED_COLUMNS, SHEET_COLUMNS, SheetRow
from zoodiet.ingest.spreadsheet import (
    SpreadsheetError,
    find_header_row,
    load_spreadsheet,
    parse_rows,
)

__all__ = [
    "REQUIRED_COLUMNS",
    "SHEET_COLUMNS",
    "SheetRow",
    "SpreadsheetError",
    "find_header_row",
    "load_spreadsheet",
    "parse_rows",
]
