"""Ingredient summaries by site, overall totals and total requirements."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from zoodiet.aggregate.engine import aggregate, filter_records
from zoodiet.logging_config import get_logger
from zoodiet.normalize.records import FeedingRecord
from zoodiet.normalize.units import (
    UnitTotals,
    combine_totals,
    estimate_piece_weight,
    format_combined_totals,
    format_quantity,
    format_requirement,
    format_totals,
    format_weight,
    is_piece_unit,
    is_weight_unit,
)

logger = get_logger(__name__)

LITRE_UNITS = frozenset({"litre", "liter", "litres", "liters", "ltr", "l"})


@dataclass
class IngredientLine:
    """Totals of one ingredient at one site."""

    ingredient_name: str
    totals: dict[str, UnitTotals]
    display: str


@dataclass
class SiteSummary:
    """Ingredient lines and combined totals for one site."""

    site_name: str
    ingredients: list[IngredientLine] = field(default_factory=list)
    site_totals: dict[str, float] = field(default_factory=dict)

    @property
    def display_total(self) -> str:
        return format_combined_totals(self.site_totals)


@dataclass
class OverallTotal:
    """One ingredient's totals across all sites, weight and pieces apart."""

    ingredient_name: str
    totals: dict[str, UnitTotals]
    weight: str
    pieces: str
    pieces_as_weight: str


@dataclass
class IngredientSummary:
    sites: list[SiteSummary]
    overall: list[OverallTotal]
    grand_totals: dict[str, float]

    @property
    def grand_total_display(self) -> str:
        return format_combined_totals(self.grand_totals)


@dataclass
class IngredientRequirement:
    ingredient_name: str
    kilograms: float
    pieces: float
    litres: float

    @property
    def display(self) -> str:
        return format_requirement(self.kilograms, self.pieces, self.litres)


def _merge_combined(target: dict[str, float], totals: dict[str, UnitTotals]) -> None:
    for unit, value in combine_totals(totals).items():
        target[unit] = target.get(unit, 0.0) + value


def _separate_totals(totals: dict[str, UnitTotals]) -> tuple[str, str]:
    weight, pieces = [], []
    for unit, values in totals.items():
        formatted = format_quantity(values.quantity, values.quantity_in_grams, unit)
        (weight if is_weight_unit(unit) else pieces).append(formatted)
    return ", ".join(weight) or "-", ", ".join(pieces) or "-"


def _pieces_as_weight(ingredient_name: str, totals: dict[str, UnitTotals]) -> str:
    piece_count = sum(values.quantity for unit, values in totals.items() if is_piece_unit(unit))
    grams = estimate_piece_weight(ingredient_name, piece_count)
    return "-" if grams is None else format_weight(grams)


def build_ingredient_summary(
    records: Sequence[FeedingRecord],
    feed_type: str | None = None,
    ingredients: Sequence[str] | None = None,
) -> IngredientSummary:
    """
    Summarize ingredient totals per site with site, overall and grand totals.

    Args:
        records: Feeding records of the loaded dataset.
        feed_type: Restrict to one feed type.
        ingredients: Restrict to these ingredient names.
    """
    records = filter_records(records, feed_type_name=feed_type, ingredient_name=ingredients)

    sites: dict[str, SiteSummary] = {}
    grand_totals: dict[str, float] = {}
    for group in aggregate(records, ["site_name", "ingredient_name"]):
        site_name, ingredient_name = group.key
        site = sites.setdefault(site_name, SiteSummary(site_name=site_name))
        site.ingredients.append(
            IngredientLine(
                ingredient_name=ingredient_name,
                totals=group.totals,
                display=format_totals(group.totals),
            )
        )
        _merge_combined(site.site_totals, group.totals)
        _merge_combined(grand_totals, group.totals)

    overall = []
    for group in aggregate(records, ["ingredient_name"]):
        ingredient_name = group.key[0]
        weight, pieces = _separate_totals(group.totals)
        overall.append(
            OverallTotal(
                ingredient_name=ingredient_name,
                totals=group.totals,
                weight=weight,
                pieces=pieces,
                pieces_as_weight=_pieces_as_weight(ingredient_name, group.totals),
            )
        )

    logger.info(f"Built ingredient summary: {len(sites)} sites, {len(overall)} ingredients")
    return IngredientSummary(sites=list(sites.values()), overall=overall, grand_totals=grand_totals)


def ingredient_requirements(
    records: Sequence[FeedingRecord],
    site: str | None = None,
    ingredient: str | None = None,
) -> list[IngredientRequirement]:
    """Total kilograms, pieces and litres required per ingredient."""
    records = filter_records(records, site_name=site, ingredient_name=ingredient)

    requirements = []
    for group in aggregate(records, ["ingredient_name"]):
        kilograms = pieces = litres = 0.0
        for unit, values in group.totals.items():
            unit_lower = unit.lower()
            if is_weight_unit(unit_lower):
                kilograms += values.grams(unit_lower) / 1000
            elif is_piece_unit(unit_lower):
                pieces += values.quantity
            elif unit_lower in LITRE_UNITS:
                litres += values.quantity
        requirements.append(
            IngredientRequirement(
                ingredient_name=group.key[0],
                kilograms=kilograms,
                pieces=pieces,
                litres=litres,
            )
        )
    return requirements
