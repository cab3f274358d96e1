"""Kitchen packing list: what to prepare per enclosure, species and meal."""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from zoodiet.aggregate.engine import aggregate, by_key
from zoodiet.logging_config import get_logger
from zoodiet.normalize.records import FeedingRecord, ItemKind
from zoodiet.normalize.units import UnitTotals, format_unit_totals

logger = get_logger(__name__)

PACKING_KEY_FIELDS = ("site_name", "enclosure_name", "common_name")
ID_SEPARATOR = "|"

_HOUR_PATTERN = re.compile(r"^\s*(\d{1,2})")


class PackingStatus(str, Enum):
    PENDING = "Pending"
    PACKED = "Packed"
    DISPATCHED = "Dispatched"


class TimeSlot(str, Enum):
    ALL = "all"
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


@dataclass
class PackingItem:
    """Packing status of one packing entry, keyed by the entry id."""

    id: str
    status: PackingStatus = PackingStatus.PENDING
    site_name: str | None = None


@dataclass
class PackingIngredient:
    """One ingredient inside a packing entry."""

    name: str
    quantity: float | None
    quantity_in_grams: float
    unit: str | None
    preparation: str | None
    cut_size: str | None
    percentage: float = 0.0
    totals: dict[str, UnitTotals] = field(default_factory=dict)

    @property
    def display(self) -> str:
        return format_unit_totals(self.totals)


@dataclass
class PackingEntry:
    """
    Everything packed for one item, species, enclosure and meal time.

    ``total_quantity`` and ``unit`` are set only when every row shares one
    unit; ``totals`` keeps each unit apart for display.
    """

    id: str
    site_name: str
    enclosure_name: str
    common_name: str
    meal_start_time: str
    item_name: str
    item_kind: ItemKind
    feed_type_name: str | None
    animal_count: int
    ingredients: list[PackingIngredient] = field(default_factory=list)
    total_quantity: float | None = None
    total_grams: float = 0.0
    unit: str | None = None
    totals: dict[str, UnitTotals] = field(default_factory=dict)

    @property
    def total_display(self) -> str:
        return format_unit_totals(self.totals)

    @property
    def time_slot(self) -> TimeSlot:
        return time_slot(self.meal_start_time)


def time_slot(meal_time: str | None) -> TimeSlot:
    """
    Bucket a meal start time into morning, afternoon or evening.

    Morning is 06:00-11:59, afternoon 12:00-17:59, evening the rest.
    Times that don't start with an hour fall into ALL.
    """
    if not meal_time:
        return TimeSlot.ALL
    match = _HOUR_PATTERN.match(meal_time)
    if not match:
        return TimeSlot.ALL

    hour = int(match.group(1))
    lowered = meal_time.lower()
    if "pm" in lowered and hour < 12:
        hour += 12
    elif "am" in lowered and hour == 12:
        hour = 0

    if 6 <= hour < 12:
        return TimeSlot.MORNING
    if 12 <= hour < 18:
        return TimeSlot.AFTERNOON
    return TimeSlot.EVENING


def _ingredient_details(
    rows: Sequence[FeedingRecord],
    total_grams: float,
) -> list[PackingIngredient]:
    details = []
    for group in aggregate(rows, ["ingredient_name"], sort_key=None):
        first = group.first
        details.append(
            PackingIngredient(
                name=group.key[0],
                quantity=group.unit_quantity,
                quantity_in_grams=group.total_grams,
                unit=group.single_unit,
                preparation=first.prep_type,
                cut_size=first.cut_size,
                percentage=group.total_grams / total_grams * 100 if total_grams > 0 else 0.0,
                totals=group.totals,
            )
        )
    return details


def build_packing_list(records: Sequence[FeedingRecord]) -> list[PackingEntry]:
    """
    Aggregate the dataset into packing entries.

    Entries are keyed by site, enclosure, species, meal time and item, and
    ordered by site, enclosure and species.
    """
    animal_counts = {
        group.key: group.animal_count
        for group in aggregate(records, PACKING_KEY_FIELDS, track_entities=True, sort_key=None)
    }

    groups = aggregate(
        records,
        [*PACKING_KEY_FIELDS, "meal_start_time", lambda r: r.item_key],
        sort_key=lambda group: by_key(group)[:3],
    )

    entries = []
    for group in groups:
        site_name, enclosure_name, common_name, meal_time, item_name = group.key
        first = group.first
        total_grams = group.total_grams
        entries.append(
            PackingEntry(
                id=ID_SEPARATOR.join(group.key),
                site_name=site_name,
                enclosure_name=enclosure_name,
                common_name=common_name,
                meal_start_time=meal_time,
                item_name=item_name,
                item_kind=first.item_kind,
                feed_type_name=first.feed_type_name,
                animal_count=animal_counts.get(group.key[:3], 0),
                ingredients=_ingredient_details(group.records, total_grams),
                total_quantity=group.unit_quantity,
                total_grams=total_grams,
                unit=group.single_unit,
                totals=group.totals,
            )
        )

    logger.info(f"Built packing list: {len(entries)} entries from {len(records)} records")
    return entries


def filter_by_slot(
    entries: Iterable[PackingEntry],
    slot: TimeSlot = TimeSlot.ALL,
) -> list[PackingEntry]:
    """Keep entries whose meal falls into the given slot."""
    if slot is TimeSlot.ALL:
        return list(entries)
    return [entry for entry in entries if entry.time_slot is slot]
