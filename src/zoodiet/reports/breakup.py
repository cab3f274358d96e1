"""Ingredient, meal-group and recipe breakup tables."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from zoodiet.aggregate.engine import (
    AggregationGroup,
    aggregate,
    by_total_grams,
    distinct_values,
    filter_records,
)
from zoodiet.logging_config import get_logger
from zoodiet.normalize.records import FeedingRecord
from zoodiet.normalize.units import (
    UnitTotals,
    format_totals,
    format_unit_totals,
    format_weight,
)

logger = get_logger(__name__)


@dataclass
class BreakupRow:
    """Totals and distinct entity counts for one breakup key."""

    ingredient_name: str
    totals: dict[str, UnitTotals]
    total_display: str
    species_count: int
    animal_count: int
    enclosure_count: int
    site_count: int
    group_name: str | None = None
    row_span: int = 1


@dataclass
class RecipeIngredient:
    ingredient_name: str
    quantity: float | None
    quantity_in_grams: float
    unit: str | None
    totals: dict[str, UnitTotals] = field(default_factory=dict)

    @property
    def display(self) -> str:
        return format_unit_totals(self.totals)


@dataclass
class RecipeBreakup:
    """Ingredient composition of one recipe or combo."""

    recipe_name: str
    ingredients: list[RecipeIngredient] = field(default_factory=list)
    grand_total_grams: float = 0.0
    used_by_groups: list[str] = field(default_factory=list)

    @property
    def grand_total_display(self) -> str:
        return format_weight(self.grand_total_grams)

    def percentage(self, ingredient: RecipeIngredient) -> float:
        if self.grand_total_grams <= 0:
            return 0.0
        return ingredient.quantity_in_grams / self.grand_total_grams * 100


def _breakup_row(group: AggregationGroup, ingredient_name: str, group_name: str | None = None):
    return BreakupRow(
        ingredient_name=ingredient_name,
        group_name=group_name,
        totals=group.totals,
        total_display=format_totals(group.totals),
        species_count=group.species_count,
        animal_count=group.animal_count,
        enclosure_count=group.enclosure_count,
        site_count=group.site_count,
    )


def _apply_row_spans(rows: list[BreakupRow], lead: str) -> list[BreakupRow]:
    """Give the first row of each run of equal lead values the run length, others 0."""
    spans: dict[str, int] = {}
    for row in rows:
        value = getattr(row, lead)
        spans[value] = spans.get(value, 0) + 1

    seen = set()
    for row in rows:
        value = getattr(row, lead)
        row.row_span = 0 if value in seen else spans[value]
        seen.add(value)
    return rows


def ingredient_breakup(records: Sequence[FeedingRecord]) -> list[BreakupRow]:
    """How each ingredient is distributed over species, animals, enclosures and sites."""
    groups = aggregate(records, ["ingredient_name"], track_entities=True)
    return [_breakup_row(group, group.key[0]) for group in groups]


def meal_group_breakup(
    records: Sequence[FeedingRecord],
    feed_type: str | None = None,
    lead: Literal["ingredient", "group"] = "ingredient",
) -> list[BreakupRow]:
    """
    Ingredient totals split by meal group.

    Rows without a group name are left out. ``lead`` picks the outer column:
    ingredient then group, or group then ingredient.
    """
    records = filter_records(records, feed_type_name=feed_type)
    records = [record for record in records if record.group_name]

    if lead == "group":
        groups = aggregate(records, ["group_name", "ingredient_name"], track_entities=True)
        rows = [_breakup_row(g, g.key[1], group_name=g.key[0]) for g in groups]
        return _apply_row_spans(rows, "group_name")

    groups = aggregate(records, ["ingredient_name", "group_name"], track_entities=True)
    rows = [_breakup_row(g, g.key[0], group_name=g.key[1]) for g in groups]
    return _apply_row_spans(rows, "ingredient_name")


def recipe_options(records: Sequence[FeedingRecord]) -> list[str]:
    """Names of all recipes and combos in the dataset."""
    return distinct_values(
        [record for record in records if record.is_composite],
        "item_name",
    )


def recipe_breakup(
    records: Sequence[FeedingRecord],
    recipe_name: str,
    group_name: str | None = None,
) -> RecipeBreakup:
    """Ingredients of one recipe, heaviest first, optionally within one meal group."""
    recipe_rows = [
        record
        for record in records
        if record.is_composite and record.item_name == recipe_name
    ]
    used_by_groups = distinct_values(recipe_rows, "group_name")
    recipe_rows = filter_records(recipe_rows, group_name=group_name)

    ingredients = []
    for group in aggregate(recipe_rows, ["ingredient_name"], sort_key=by_total_grams, reverse=True):
        ingredients.append(
            RecipeIngredient(
                ingredient_name=group.key[0],
                quantity=group.unit_quantity,
                quantity_in_grams=group.total_grams,
                unit=group.single_unit,
                totals=group.totals,
            )
        )

    return RecipeBreakup(
        recipe_name=recipe_name,
        ingredients=ingredients,
        grand_total_grams=sum(ingredient.quantity_in_grams for ingredient in ingredients),
        used_by_groups=used_by_groups,
    )
