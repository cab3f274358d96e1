"""Aggregation engine and diet signature consolidation."""

from zoodiet.aggregate.consolidate import (
    SIGNATURE_DECIMALS,
    AnimalSummary,
    ConsolidatedDiet,
    ConsolidationError,
    DietItem,
    consolidate,
    diet_signature,
    item_quantities,
)
from zoodiet.aggregate.engine import (
    AggregationGroup,
    aggregate,
    by_key,
    by_total_grams,
    distinct_values,
    filter_records,
    partition,
)

__all__ = [
    "SIGNATURE_DECIMALS",
    "AggregationGroup",
    "AnimalSummary",
    "ConsolidatedDiet",
    "ConsolidationError",
    "DietItem",
    "aggregate",
    "by_key",
    "by_total_grams",
    "consolidate",
    "diet_signature",
    "distinct_values",
    "filter_records",
    "item_quantities",
    "partition",
]
