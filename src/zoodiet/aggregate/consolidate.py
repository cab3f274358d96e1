"""Diet signature consolidation: merge animals that eat identically."""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from zoodiet.aggregate.engine import aggregate, partition, sort_text
from zoodiet.logging_config import get_logger
from zoodiet.normalize.records import MISSING, FeedingRecord
from zoodiet.normalize.units import Measure, format_measure, format_number

logger = get_logger(__name__)

# Per-item totals are compared after rounding to this many decimals.
SIGNATURE_DECIMALS = 3


class ConsolidationError(Exception):
    """Raised when a consolidated diet ends up with no animals behind it."""

    def __init__(
        self,
        message: str,
        site_name: str | None = None,
        meal_time: str | None = None,
        signature: str | None = None,
    ):
        super().__init__(message)
        self.site_name = site_name
        self.meal_time = meal_time
        self.signature = signature


@dataclass
class AnimalSummary:
    """Animals of one species sharing a consolidated diet."""

    common_name: str
    scientific_name: str | None
    count: int
    diet_name: str | None = None
    diet_number: str | None = None


@dataclass
class DietItem:
    """One line of a consolidated diet's items table."""

    id: str
    item_name: str
    item_details: str
    amount_per_animal: str
    total_amount_required: str
    per_animal_quantity: float
    total_quantity: float
    unit: str


@dataclass
class ConsolidatedDiet:
    """A diet shared by one or more animals within a site and meal time."""

    signature: str
    animals: list[AnimalSummary] = field(default_factory=list)
    total_animal_count: int = 0
    items: list[DietItem] = field(default_factory=list)


# =============================================================================
# Signatures
# =============================================================================

_DELIMITERS = re.compile(r"([\\:;,])")


def _escape(text: str) -> str:
    return _DELIMITERS.sub(r"\\\1", text)


def _fixed(value: float) -> str:
    rounded = round(value, SIGNATURE_DECIMALS) + 0.0
    return f"{rounded:.{SIGNATURE_DECIMALS}f}"


def item_quantities(records: Iterable[FeedingRecord]) -> dict[str, Measure]:
    """
    Total amount per diet item for one animal.

    Rows of an item that carry a gram weight are measured in grams; rows
    in any other unit keep their native quantity per unit, so a combo of
    weighed meat and counted insects keeps both parts.
    """
    return {
        group.key[0]: group.measure
        for group in aggregate(records, [lambda r: r.item_key], sort_key=None)
    }


def _signature_value(measure: Measure) -> str:
    parts = []
    if measure.grams or not measure.counts:
        parts.append(_fixed(measure.grams))
    for unit, quantity in sorted(measure.counts.items(), key=lambda item: sort_text(item[0])):
        parts.append(f"{_fixed(quantity)} {_escape(unit)}" if measure.is_mixed else _fixed(quantity))
    return ",".join(parts)


def diet_signature(records: Iterable[FeedingRecord]) -> str:
    """
    Order-independent fingerprint of what one animal eats in one meal.

    Two animals get the same signature iff they have the same items with
    the same totals after rounding to ``SIGNATURE_DECIMALS`` places. Item
    names are escaped so a name can't imitate the ``:``, ``;`` and ``,``
    delimiters.
    """
    measures = sorted(item_quantities(records).items(), key=lambda item: sort_text(item[0]))
    return ";".join(f"{_escape(key)}:{_signature_value(measure)}" for key, measure in measures)


# =============================================================================
# Consolidation
# =============================================================================


def _summarize_animals(records: Sequence[FeedingRecord]) -> list[AnimalSummary]:
    by_species: dict[str, tuple[FeedingRecord, set[str]]] = {}
    for record in records:
        name = record.common_name or MISSING
        if name not in by_species:
            by_species[name] = (record, set())
        by_species[name][1].add(record.animal_id or MISSING)

    summaries = [
        AnimalSummary(
            common_name=name,
            scientific_name=first.scientific_name,
            count=len(ids),
            diet_name=first.diet_name,
            diet_number=first.diet_number,
        )
        for name, (first, ids) in by_species.items()
    ]
    return sorted(summaries, key=lambda summary: sort_text(summary.common_name))


def _combo_breakdown(records: Sequence[FeedingRecord]) -> str:
    ingredients = aggregate(records, ["ingredient_name"], sort_key=None)
    combo_grams = sum(group.total_grams for group in ingredients)

    parts = []
    for group in ingredients:
        percentage = group.total_grams / combo_grams * 100 if combo_grams > 0 else 0.0
        parts.append(f"{format_number(percentage)}% {group.key[0]}")
    return f"({', '.join(parts)})"


def _build_items(representative: Sequence[FeedingRecord], animal_count: int) -> list[DietItem]:
    items = []
    for group in aggregate(representative, [lambda r: r.item_key], sort_key=None):
        main = group.first
        measure = group.measure

        # The numeric columns follow the weight when there is one, else the
        # first count unit; the display strings carry every unit.
        if measure.grams > 0:
            unit, per_animal = "gram", measure.grams
        else:
            unit, per_animal = next(iter(measure.counts.items()))
            unit = "" if unit == MISSING else unit

        amount_per_animal = format_measure(measure, "gram")
        total_amount = format_measure(measure.scaled(animal_count), "kilogram")
        total = per_animal * animal_count

        item_name = main.item_key
        if main.preparation:
            item_name += f" ({main.preparation})"

        items.append(
            DietItem(
                id=main.item_key,
                item_name=item_name,
                item_details=_combo_breakdown(group.records) if main.is_composite else "",
                amount_per_animal=amount_per_animal,
                total_amount_required=total_amount,
                per_animal_quantity=per_animal,
                total_quantity=total,
                unit=unit,
            )
        )
    return items


def consolidate(
    records: Iterable[FeedingRecord],
    *,
    site_name: str | None = None,
    meal_time: str | None = None,
) -> list[ConsolidatedDiet]:
    """
    Merge animals with identical diets within one site and meal time.

    Diets come out in the order their first animal appears. Each diet's
    items table is computed from its first animal's rows; totals scale
    that animal's amounts by the consolidated animal count.

    Args:
        records: Feeding records of a single (site, meal time) bucket.
        site_name: Bucket site, for error context.
        meal_time: Bucket meal time, for error context.

    Raises:
        ConsolidationError: If a signature group resolves to zero animals.
    """
    animal_rows = partition(records, "animal_id")

    signatures: dict[str, list[str]] = {}
    for animal_id, rows in animal_rows.items():
        signatures.setdefault(diet_signature(rows), []).append(animal_id)

    diets = []
    for signature, animal_ids in signatures.items():
        diet_rows = [record for animal_id in animal_ids for record in animal_rows[animal_id]]
        animals = _summarize_animals(diet_rows)
        total_animal_count = sum(animal.count for animal in animals)

        if total_animal_count == 0:
            raise ConsolidationError(
                "Consolidated diet has no animals",
                site_name=site_name,
                meal_time=meal_time,
                signature=signature,
            )

        representative = animal_rows[animal_ids[0]]
        diets.append(
            ConsolidatedDiet(
                signature=signature,
                animals=animals,
                total_animal_count=total_animal_count,
                items=_build_items(representative, total_animal_count),
            )
        )

    logger.debug(
        f"Consolidated {len(animal_rows)} animals into {len(diets)} diets "
        f"(site={site_name}, meal={meal_time})"
    )
    return diets
