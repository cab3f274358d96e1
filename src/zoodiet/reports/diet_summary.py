"""Pre-aggregated input for narrative diet summaries of one species."""

from collections.abc import Sequence

from pydantic import BaseModel, Field

from zoodiet.aggregate.engine import aggregate, partition
from zoodiet.logging_config import get_logger
from zoodiet.normalize.records import MISSING, FeedingRecord
from zoodiet.normalize.units import format_measure

logger = get_logger(__name__)


class MealItem(BaseModel):
    """One item served at one meal."""

    meal_time: str = Field(description="Meal start time, e.g. '7:00 am'")
    type_name: str = Field(description="Mix, recipe or ingredient name")
    ingredients: list[str] = Field(default_factory=list)
    quantity: str = Field(description="Formatted total quantity for the meal")


class DietSummaryInput(BaseModel):
    """Structured diet of one species, ready for a summary generator."""

    common_name: str
    scientific_name: str | None = None
    diet_data: list[MealItem] = Field(default_factory=list)


def build_diet_summary_input(
    records: Sequence[FeedingRecord],
    common_name: str,
) -> DietSummaryInput | None:
    """
    Collect what one species eats, meal by meal.

    Rows are split by meal start time and folded per diet item. Quantities
    are shown by weight for rows that carry grams and in their own unit for
    the rest; different count units are listed side by side.

    Returns:
        The summary input, or None when the species has no rows.
    """
    species_rows = [record for record in records if record.common_name == common_name]
    if not species_rows:
        logger.warning(f"No feeding rows for species: {common_name}")
        return None

    diet_data = []
    for meal_time, meal_rows in partition(species_rows, "meal_start_time").items():
        for group in aggregate(meal_rows, [lambda r: r.item_key], sort_key=None):
            quantity = format_measure(group.measure, "kg")
            ingredients = list(dict.fromkeys(r.ingredient_name or MISSING for r in group.records))
            diet_data.append(
                MealItem(
                    meal_time=meal_time,
                    type_name=group.key[0],
                    ingredients=ingredients,
                    quantity=quantity,
                )
            )

    logger.debug(f"Diet summary input for {common_name}: {len(diet_data)} meal items")
    return DietSummaryInput(
        common_name=common_name,
        scientific_name=species_rows[0].scientific_name,
        diet_data=diet_data,
    )
