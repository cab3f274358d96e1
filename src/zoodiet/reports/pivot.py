"""Pivot table of quantities over an eight-field row hierarchy."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from zoodiet.aggregate.engine import FieldSelector, aggregate, filter_records, sort_text
from zoodiet.logging_config import get_logger
from zoodiet.normalize.records import MISSING, FeedingRecord

logger = get_logger(__name__)

PIVOT_FIELDS: tuple[tuple[str, FieldSelector], ...] = (
    ("Common Name", "common_name"),
    ("Feed Type Name", "feed_type_name"),
    ("Meal Start Time", "meal_start_time"),
    ("Type", "type_label"),
    ("Type Name", "item_name"),
    ("Ingredient Name", "ingredient_name"),
    ("Preparation Type Name", "prep_type"),
    ("Cut Size Name", "cut_size"),
)


@dataclass
class PivotRow:
    keys: tuple[str, ...]
    values: dict[str, float]
    row_spans: list[int]

    def value_text(self, unit: str) -> str:
        return f"{self.values.get(unit, 0.0):.2f}"


@dataclass
class PivotTable:
    headers: list[str]
    unit_columns: list[str] = field(default_factory=list)
    rows: list[PivotRow] = field(default_factory=list)

    def as_rows(self) -> list[list[str]]:
        """Flat string rows for CSV/PDF export, units as trailing columns."""
        return [
            [*row.keys, *(row.value_text(unit) for unit in self.unit_columns)]
            for row in self.rows
        ]


def row_spans(keys: Sequence[tuple[str, ...]]) -> list[list[int]]:
    """
    Merged-cell spans for hierarchical key columns.

    For each row and column, the number of rows sharing the key prefix up to
    that column if this row opens the run, otherwise 0. Keys must be sorted.
    """
    depth = len(keys[0]) if keys else 0
    counts: list[dict[tuple[str, ...], int]] = [{} for _ in range(depth)]
    for key in keys:
        for i in range(depth):
            prefix = key[: i + 1]
            counts[i][prefix] = counts[i].get(prefix, 0) + 1

    last_seen: list[tuple[str, ...] | None] = [None] * depth
    spans = []
    for key in keys:
        row = []
        for i in range(depth):
            prefix = key[: i + 1]
            if last_seen[i] != prefix:
                last_seen[i] = prefix
                row.append(counts[i][prefix])
            else:
                row.append(0)
        spans.append(row)
    return spans


def pivot_table(
    records: Sequence[FeedingRecord],
    site: str | None = None,
    common_name: str | None = None,
) -> PivotTable:
    """
    Sum native quantities per unit over the pivot hierarchy.

    Args:
        records: Feeding records of the loaded dataset.
        site: Restrict to one site.
        common_name: Case-insensitive substring filter on the species name.
    """
    records = filter_records(records, site_name=site, common_name=common_name)
    headers = [header for header, _ in PIVOT_FIELDS]
    if not records:
        return PivotTable(headers=headers)

    unit_columns = sorted({record.unit or MISSING for record in records}, key=sort_text)
    groups = aggregate(records, [selector for _, selector in PIVOT_FIELDS])
    spans = row_spans([group.key for group in groups])

    rows = [
        PivotRow(
            keys=group.key,
            values={unit: values.quantity for unit, values in group.totals.items()},
            row_spans=span,
        )
        for group, span in zip(groups, spans)
    ]
    logger.debug(f"Pivot table: {len(rows)} rows, {len(unit_columns)} unit columns")
    return PivotTable(headers=headers, unit_columns=unit_columns, rows=rows)
