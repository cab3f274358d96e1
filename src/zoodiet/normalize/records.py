"""Feeding records: the canonical row shape every report works on."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from zoodiet.ingest.schemas import SheetRow
from zoodiet.logging_config import get_logger

logger = get_logger(__name__)

MISSING = "N/A"


class ItemKind(str, Enum):
    """What a feeding row hands out: a single ingredient or a composite feed."""

    PLAIN = "plain"
    RECIPE = "recipe"
    COMBO = "combo"

    @classmethod
    def from_type(cls, value: str | None) -> "ItemKind":
        """Resolve the sheet's free-text ``type`` column."""
        normalized = (value or "").strip().lower()
        if normalized == "recipe":
            return cls.RECIPE
        if normalized == "combo":
            return cls.COMBO
        return cls.PLAIN

    @property
    def is_composite(self) -> bool:
        return self is not ItemKind.PLAIN


@dataclass(frozen=True)
class FeedingRecord:
    """One quantity of one ingredient given to one animal at one meal."""

    site_name: str | None
    animal_id: str | None
    common_name: str | None
    scientific_name: str | None
    enclosure_name: str | None
    feed_type_name: str | None
    ingredient_name: str | None
    item_kind: ItemKind
    item_name: str | None
    group_name: str | None
    quantity: float
    unit: str | None
    quantity_in_grams: float
    meal_start_time: str | None
    diet_name: str | None = None
    diet_number: str | None = None
    prep_type: str | None = None
    cut_size: str | None = None
    feeding_date: str | float | None = None
    section_name: str | None = None
    meal_end_time: str | None = None
    type_label: str | None = None

    @property
    def item_key(self) -> str:
        """
        Name under which this row is counted as one diet item.

        Recipe and combo rows are keyed by the composite's name so that all
        their ingredient rows fold into one item; plain rows by ingredient.
        Signature building, the consolidated items table and the packing
        list all key through here.
        """
        if self.item_kind.is_composite:
            return self.item_name or self.ingredient_name or MISSING
        return self.ingredient_name or MISSING

    @property
    def is_composite(self) -> bool:
        return self.item_kind.is_composite

    @property
    def preparation(self) -> str:
        """Cut size and preparation joined for display, empty when neither is set."""
        return ", ".join(part for part in (self.cut_size, self.prep_type) if part)


def normalize_row(row: SheetRow | Mapping[str, Any]) -> FeedingRecord:
    """
    Build a FeedingRecord from a validated sheet row or a raw mapping.

    Raw mappings are validated through SheetRow first, so sheet column names
    (including ``"Feed type name"``) are accepted.
    """
    if not isinstance(row, SheetRow):
        row = SheetRow.model_validate(dict(row))

    kind = ItemKind.from_type(row.type)
    if kind.is_composite:
        item_name = row.type_name or row.ingredient_name
    else:
        item_name = row.ingredient_name

    return FeedingRecord(
        site_name=row.site_name,
        animal_id=row.animal_id,
        common_name=row.common_name,
        scientific_name=row.scientific_name,
        enclosure_name=row.user_enclosure_name,
        feed_type_name=row.feed_type_name,
        ingredient_name=row.ingredient_name,
        item_kind=kind,
        item_name=item_name,
        group_name=row.group_name,
        quantity=row.ingredient_qty,
        unit=row.base_uom_name,
        quantity_in_grams=row.ingredient_qty_gram,
        meal_start_time=row.meal_start_time,
        diet_name=row.diet_name,
        diet_number=row.diet_no,
        prep_type=row.preparation_type_name,
        cut_size=row.cut_size_name,
        feeding_date=row.feeding_date,
        section_name=row.section_name,
        meal_end_time=row.meal_end_time,
        type_label=row.type,
    )


def normalize_rows(rows: Iterable[SheetRow | Mapping[str, Any]]) -> list[FeedingRecord]:
    """Normalize a batch of sheet rows, preserving order."""
    records = [normalize_row(row) for row in rows]
    logger.debug(f"Normalized {len(records)} feeding rows")
    return records
