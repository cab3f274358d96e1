"""Pydantic schemas for validating spreadsheet feeding rows."""

import math
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Columns of the daily feeding export, in sheet order.
SHEET_COLUMNS: tuple[str, ...] = (
    "site_name",
    "animal_id",
    "common_name",
    "scientific_name",
    "section_name",
    "user_enclosure_name",
    "Feed type name",
    "diet_name",
    "diet_no",
    "ingredient_name",
    "type",
    "type_name",
    "group_name",
    "ingredient_qty",
    "base_uom_name",
    "ingredient_qty_gram",
    "base_uom_name_gram",
    "preparation_type_name",
    "meal_start_time",
    "meal_end_time",
    "cut_size_name",
    "feeding_date",
)

# Columns that must be present for a sheet row to count as the header.
REQUIRED_COLUMNS: tuple[str, ...] = tuple(
    column for column in SHEET_COLUMNS if column not in ("meal_end_time", "feeding_date")
)


def _is_blank(v: Any) -> bool:
    if v is None:
        return True
    if isinstance(v, float) and math.isnan(v):
        return True
    return isinstance(v, str) and not v.strip()


class SheetRow(BaseModel):
    """One row of the daily feeding export, validated but not yet normalized."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    site_name: str | None = None
    animal_id: str | None = None
    common_name: str | None = None
    scientific_name: str | None = None
    section_name: str | None = None
    user_enclosure_name: str | None = None
    feed_type_name: str | None = Field(default=None, alias="Feed type name")
    diet_name: str | None = None
    diet_no: str | None = None
    ingredient_name: str | None = None
    type: str | None = None
    type_name: str | None = None
    group_name: str | None = None
    ingredient_qty: float = 0.0
    base_uom_name: str | None = None
    ingredient_qty_gram: float = 0.0
    base_uom_name_gram: str | None = None
    preparation_type_name: str | None = None
    meal_start_time: str | None = None
    meal_end_time: str | None = None
    cut_size_name: str | None = None
    feeding_date: str | float | None = None

    @field_validator(
        "site_name",
        "animal_id",
        "common_name",
        "scientific_name",
        "section_name",
        "user_enclosure_name",
        "feed_type_name",
        "diet_name",
        "diet_no",
        "ingredient_name",
        "type",
        "type_name",
        "group_name",
        "base_uom_name",
        "base_uom_name_gram",
        "preparation_type_name",
        "meal_start_time",
        "meal_end_time",
        "cut_size_name",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        """Stringify cells and turn blanks into None."""
        if _is_blank(v):
            return None
        if isinstance(v, float) and v.is_integer():
            # Excel hands back ids and diet numbers as floats
            return str(int(v))
        return str(v).strip()

    @field_validator("ingredient_qty", "ingredient_qty_gram", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> float:
        """Handle blank, textual and NaN quantity cells."""
        if _is_blank(v):
            return 0.0
        if isinstance(v, str):
            v = v.replace(",", "").strip()
        try:
            value = float(v)
        except (ValueError, TypeError):
            return 0.0
        return 0.0 if math.isnan(value) else value

    @field_validator("feeding_date", mode="before")
    @classmethod
    def coerce_feeding_date(cls, v: Any) -> str | float | None:
        """Keep Excel serial numbers numeric, everything else as text."""
        if _is_blank(v):
            return None
        if isinstance(v, datetime):
            return v.date().isoformat()
        if isinstance(v, date):
            return v.isoformat()
        if isinstance(v, (int, float)):
            return float(v)
        return str(v).strip()
