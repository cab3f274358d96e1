"""Grouping and per-unit accumulation of feeding records."""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from zoodiet.logging_config import get_logger
from zoodiet.normalize.records import MISSING, FeedingRecord
from zoodiet.normalize.units import Measure, UnitTotals, is_weight_unit, split_totals

logger = get_logger(__name__)

FieldSelector = str | Callable[[FeedingRecord], Any]
SortKey = Callable[["AggregationGroup"], Any]


@dataclass
class AggregationGroup:
    """Accumulated totals and distinct entities for one grouping key."""

    key: tuple[str, ...]
    records: list[FeedingRecord] = field(default_factory=list)
    totals: dict[str, UnitTotals] = field(default_factory=dict)
    species: set[str] = field(default_factory=set)
    animals: set[str] = field(default_factory=set)
    enclosures: set[str] = field(default_factory=set)
    sites: set[str] = field(default_factory=set)

    def add(self, record: FeedingRecord, track_entities: bool = False) -> None:
        """Fold one record into the group."""
        self.records.append(record)

        # Units are never coerced here; kg and piece rows stay apart.
        unit = record.unit or MISSING
        self.totals.setdefault(unit, UnitTotals()).add(record.quantity, record.quantity_in_grams)

        if track_entities:
            self.species.add(record.common_name or MISSING)
            self.animals.add(record.animal_id or MISSING)
            self.enclosures.add(record.enclosure_name or MISSING)
            self.sites.add(record.site_name or MISSING)

    @property
    def size(self) -> int:
        return len(self.records)

    @property
    def first(self) -> FeedingRecord:
        return self.records[0]

    @property
    def species_count(self) -> int:
        return len(self.species)

    @property
    def animal_count(self) -> int:
        return len(self.animals)

    @property
    def enclosure_count(self) -> int:
        return len(self.enclosures)

    @property
    def site_count(self) -> int:
        return len(self.sites)

    @property
    def single_unit(self) -> str | None:
        """The unit shared by every record, or None when the group spans several."""
        if len(self.totals) == 1:
            return next(iter(self.totals))
        return None

    @property
    def unit_quantity(self) -> float | None:
        """Native quantity of a single-unit group; None when units are mixed."""
        unit = self.single_unit
        return self.totals[unit].quantity if unit is not None else None

    @property
    def measure(self) -> Measure:
        return split_totals(self.totals)

    @property
    def total_grams(self) -> float:
        return sum(values.quantity_in_grams for values in self.totals.values())

    @property
    def weight_grams(self) -> float:
        """Gram total over weight units only."""
        return sum(
            values.quantity_in_grams
            for unit, values in self.totals.items()
            if is_weight_unit(unit)
        )


# =============================================================================
# Key Selection
# =============================================================================


def _field_value(record: FeedingRecord, selector: FieldSelector) -> str:
    value = selector(record) if callable(selector) else getattr(record, selector)
    if value is None or (isinstance(value, str) and not value.strip()):
        return MISSING
    return str(value)


def make_key(record: FeedingRecord, key_fields: Sequence[FieldSelector]) -> tuple[str, ...]:
    """Build a grouping key, substituting "N/A" for missing values."""
    return tuple(_field_value(record, selector) for selector in key_fields)


def sort_text(value: Any) -> tuple[str, str]:
    """Case-insensitive sort key that stays deterministic on ties."""
    text = "" if value is None else str(value)
    return text.casefold(), text


# =============================================================================
# Orderings
# =============================================================================


def by_key(group: AggregationGroup) -> tuple:
    """Lexicographic, case-insensitive ordering over the key tuple."""
    return tuple(sort_text(part) for part in group.key)


def by_total_grams(group: AggregationGroup) -> tuple:
    """Order by gram weight, key as tie breaker; pair with ``reverse=True`` for top-N."""
    return (group.total_grams, by_key(group))


# =============================================================================
# Aggregation
# =============================================================================


def aggregate(
    records: Iterable[FeedingRecord],
    key_fields: Sequence[FieldSelector],
    *,
    track_entities: bool = False,
    sort_key: SortKey | None = by_key,
    reverse: bool = False,
) -> list[AggregationGroup]:
    """
    Group records by a key tuple and accumulate per-unit totals.

    Every record contributes to exactly one group; a record missing a key
    field is grouped under "N/A" rather than dropped.

    Args:
        records: Feeding records to fold.
        key_fields: Record attribute names or callables producing the key parts.
        track_entities: Collect distinct species, animals, enclosures and sites.
        sort_key: Ordering of the output groups; None keeps first-seen order.
        reverse: Reverse the ordering (e.g. heaviest first).

    Returns:
        The aggregation groups in the requested order.
    """
    groups: dict[tuple[str, ...], AggregationGroup] = {}

    for record in records:
        key = make_key(record, key_fields)
        group = groups.get(key)
        if group is None:
            group = groups[key] = AggregationGroup(key=key)
        group.add(record, track_entities=track_entities)

    result = list(groups.values())
    if sort_key is not None:
        result.sort(key=sort_key, reverse=reverse)
    return result


def partition(
    records: Iterable[FeedingRecord],
    selector: FieldSelector,
) -> dict[str, list[FeedingRecord]]:
    """Split records by a single field in first-seen order."""
    buckets: dict[str, list[FeedingRecord]] = {}
    for record in records:
        buckets.setdefault(_field_value(record, selector), []).append(record)
    return buckets


# =============================================================================
# Filtering Helpers
# =============================================================================


def distinct_values(records: Iterable[FeedingRecord], selector: FieldSelector) -> list[str]:
    """Sorted distinct non-blank values of one field, for filter options."""
    values = set()
    for record in records:
        value = selector(record) if callable(selector) else getattr(record, selector)
        if value is not None and str(value).strip():
            values.add(str(value))
    return sorted(values, key=sort_text)


def filter_records(
    records: Iterable[FeedingRecord],
    **criteria: str | Sequence[str] | None,
) -> list[FeedingRecord]:
    """
    Keep records matching every given criterion.

    Blank criteria are ignored. A sequence criterion matches any of its
    values. ``common_name`` is a case-insensitive substring search.
    """
    active = {name: value for name, value in criteria.items() if value}

    def matches(record: FeedingRecord) -> bool:
        for name, wanted in active.items():
            actual = getattr(record, name)
            if name == "common_name" and isinstance(wanted, str):
                if wanted.lower() not in (actual or "").lower():
                    return False
            elif isinstance(wanted, str):
                if actual != wanted:
                    return False
            elif actual not in wanted:
                return False
        return True

    return [record for record in records if matches(record)]
