"""Headline statistics for the dataset and kitchen dashboards."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from zoodiet.aggregate.engine import aggregate, by_total_grams, distinct_values
from zoodiet.config import get_settings
from zoodiet.logging_config import get_logger
from zoodiet.normalize.records import FeedingRecord
from zoodiet.normalize.units import is_weight_unit
from zoodiet.reports.packing import PackingItem, PackingStatus

logger = get_logger(__name__)


@dataclass
class NamedValue:
    name: str
    value: float


@dataclass
class DatasetStats:
    animal_count: int = 0
    site_count: int = 0
    ingredient_count: int = 0
    feed_type_count: int = 0
    feed_type_distribution: list[NamedValue] = field(default_factory=list)
    top_ingredients: list[NamedValue] = field(default_factory=list)
    animal_distribution: list[NamedValue] = field(default_factory=list)


@dataclass
class PackingStats:
    status_counts: dict[PackingStatus, int]
    site_distribution: dict[str, dict[PackingStatus, int]]

    @property
    def total(self) -> int:
        return sum(self.status_counts.values())


def dataset_stats(records: Sequence[FeedingRecord], top_n: int | None = None) -> DatasetStats:
    """
    Distinct counts and distributions for the landing dashboard.

    Top ingredients rank weight-unit rows only, in kilograms rounded to two
    decimals; ``top_n`` defaults to the configured limit.
    """
    if not records:
        return DatasetStats()
    top_n = top_n if top_n is not None else get_settings().top_ingredients_limit

    feed_types = aggregate(records, ["feed_type_name"], sort_key=None)

    weighed = [record for record in records if is_weight_unit(record.unit)]
    heaviest = aggregate(weighed, ["ingredient_name"], sort_key=by_total_grams, reverse=True)

    species = aggregate(records, ["common_name"], track_entities=True, sort_key=None)
    species.sort(key=lambda group: group.animal_count, reverse=True)

    return DatasetStats(
        animal_count=len(distinct_values(records, "animal_id")),
        site_count=len(distinct_values(records, "site_name")),
        ingredient_count=len(distinct_values(records, "ingredient_name")),
        feed_type_count=len(distinct_values(records, "feed_type_name")),
        feed_type_distribution=[NamedValue(g.key[0], g.size) for g in feed_types],
        top_ingredients=[
            NamedValue(g.key[0], round(g.total_grams / 1000, 2)) for g in heaviest[:top_n]
        ],
        animal_distribution=[NamedValue(g.key[0], g.animal_count) for g in species],
    )


def packing_stats(
    packing_items: Sequence[PackingItem],
    records: Sequence[FeedingRecord],
) -> PackingStats:
    """Packing status counts overall and per site."""
    status_counts = {status: 0 for status in PackingStatus}
    site_distribution = {
        site: {status: 0 for status in PackingStatus}
        for site in distinct_values(records, "site_name")
    }
    if not records:
        return PackingStats(status_counts=status_counts, site_distribution={})

    for item in packing_items:
        status_counts[item.status] += 1
        site = site_distribution.get(item.site_name)
        if site is not None:
            site[item.status] += 1

    return PackingStats(status_counts=status_counts, site_distribution=site_distribution)
