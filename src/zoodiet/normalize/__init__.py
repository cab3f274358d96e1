"""Normalize spreadsheet rows into feeding records and format their quantities."""

from zoodiet.normalize.records import (
    MISSING,
    FeedingRecord,
    ItemKind,
    normalize_row,
    normalize_rows,
)
from zoodiet.normalize.units import (
    Measure,
    UnitTotals,
    UnitType,
    classify_unit,
    format_measure,
    format_quantity,
    format_totals,
    format_unit_totals,
    is_weight_unit,
    split_totals,
)

__all__ = [
    "MISSING",
    "FeedingRecord",
    "ItemKind",
    "Measure",
    "UnitTotals",
    "UnitType",
    "classify_unit",
    "format_measure",
    "format_quantity",
    "format_totals",
    "format_unit_totals",
    "is_weight_unit",
    "normalize_row",
    "normalize_rows",
    "split_totals",
]
