"""Unit classification and quantity display formatting."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from zoodiet.logging_config import get_logger
from zoodiet.normalize.records import MISSING

logger = get_logger(__name__)


# =============================================================================
# Unit Tables
# =============================================================================

KILOGRAM_UNITS = frozenset({"kg", "kilogram"})
GRAM_UNITS = frozenset({"gram"})
WEIGHT_UNITS = KILOGRAM_UNITS | GRAM_UNITS

# Below this many kilograms the gram figure keeps two decimals.
SUB_GRAM_THRESHOLD_KG = 0.001

# Average live weight in grams of feeder insects sold by the piece.
PIECE_WEIGHTS_G: dict[str, float] = {
    "ant eggs": 0.003,
    "caedicia major": 2.0,
    "cockroaches": 2.5,
    "crickets": 0.5,
    "house geckos": 5.0,
    "locusts": 2.0,
    "maggots": 0.03,
    "mealworms": 0.12,
    "superworms": 2.0,
}


class UnitType(str, Enum):
    """Display family of a unit of measure."""

    WEIGHT = "weight"
    COUNT = "count"
    MISSING = "missing"


@dataclass
class UnitTotals:
    """Running totals for one unit of measure inside an aggregation group."""

    quantity: float = 0.0
    quantity_in_grams: float = 0.0

    def add(self, quantity: float, quantity_in_grams: float) -> None:
        self.quantity += quantity or 0.0
        self.quantity_in_grams += quantity_in_grams or 0.0

    def grams(self, unit: str) -> float:
        """Gram weight of these totals, falling back to the native weight quantity."""
        if self.quantity_in_grams:
            return self.quantity_in_grams
        unit_lower = unit.strip().lower()
        if unit_lower in KILOGRAM_UNITS:
            return self.quantity * 1000
        if unit_lower in GRAM_UNITS:
            return self.quantity
        return 0.0


@dataclass
class Measure:
    """
    An amount that may span several units.

    Everything that carries a gram weight is folded into ``grams``; every
    other unit keeps its own native quantity in ``counts``.
    """

    grams: float = 0.0
    counts: dict[str, float] = field(default_factory=dict)

    @property
    def is_mixed(self) -> bool:
        return len(self.counts) + (1 if self.grams else 0) > 1

    def scaled(self, factor: float) -> "Measure":
        return Measure(
            grams=self.grams * factor,
            counts={unit: quantity * factor for unit, quantity in self.counts.items()},
        )


def classify_unit(unit: str | None) -> UnitType:
    """Classify a unit string case-insensitively."""
    if not unit or not unit.strip():
        return UnitType.MISSING
    if unit.strip().lower() in WEIGHT_UNITS:
        return UnitType.WEIGHT
    return UnitType.COUNT


def is_weight_unit(unit: str | None) -> bool:
    return classify_unit(unit) is UnitType.WEIGHT


def is_piece_unit(unit: str | None) -> bool:
    if not unit:
        return False
    lowered = unit.lower()
    return "piece" in lowered or "pc" in lowered


def singularize(unit: str) -> str:
    """Drop a trailing plural 's' from a unit name."""
    return unit[:-1] if unit.endswith("s") else unit


# =============================================================================
# Number Formatting
# =============================================================================


def format_number(value: float, min_decimals: int = 0, max_decimals: int = 0) -> str:
    """
    Render a number with thousands separators and bounded decimals.

    Rounds half-up at ``max_decimals`` and trims trailing zeros down to
    ``min_decimals``:

        format_number(1500) -> "1,500"
        format_number(2.5, 2, 2) -> "2.50"
        format_number(0.25, 0, 2) -> "0.25"
        format_number(3.0, 0, 2) -> "3"
    """
    if not math.isfinite(value):
        value = 0.0

    step = Decimal(1).scaleb(-max_decimals)
    rounded = Decimal(str(value)).quantize(step, rounding=ROUND_HALF_UP)
    if rounded.is_zero():
        rounded = abs(rounded)

    text = f"{rounded:,.{max_decimals}f}"
    if max_decimals > min_decimals and "." in text:
        integer, fraction = text.split(".")
        fraction = fraction.rstrip("0").ljust(min_decimals, "0")
        text = f"{integer}.{fraction}" if fraction else integer
    return text


# =============================================================================
# Quantity Formatting
# =============================================================================


def format_quantity(
    quantity: float | None,
    quantity_in_grams: float | None,
    unit: str | None,
    *,
    singularize_units: bool = False,
) -> str:
    """
    Format one quantity for display.

    Weight units follow a kilogram/gram policy: fractions of a kilogram are
    shown as whole grams (two decimals below one gram), whole kilograms with
    two decimals, and gram values without decimals. Count units show exactly
    one unit without decimals and anything else with two.

    Args:
        quantity: Quantity in the record's native unit.
        quantity_in_grams: Pre-converted weight; used for sub-kilogram display.
        unit: Native unit string.
        singularize_units: Drop a plural 's' from count units when quantity is 1.

    Returns:
        The display string; never raises for missing units or quantities.
    """
    if not unit or quantity is None or not math.isfinite(quantity):
        return f"0 {unit}" if unit else "0"

    unit_lower = unit.strip().lower()

    if unit_lower in KILOGRAM_UNITS:
        if 0 < quantity < 1:
            grams = quantity_in_grams or quantity * 1000
            max_decimals = 2 if quantity < SUB_GRAM_THRESHOLD_KG else 0
            return f"{format_number(grams, 0, max_decimals)} gram"
        return f"{format_number(quantity, 2, 2)} {unit}"

    if unit_lower in GRAM_UNITS:
        max_decimals = 2 if 0 < quantity < 1 else 0
        return f"{format_number(quantity, 0, max_decimals)} gram"

    decimals = 0 if quantity == 1 else 2
    display_unit = singularize(unit) if singularize_units and quantity == 1 else unit
    return f"{format_number(quantity, decimals, decimals)} {display_unit}"


def format_totals(totals: Mapping[str, UnitTotals]) -> str:
    """Format every per-unit accumulator of one group, comma separated."""
    if not totals:
        return "-"
    return ", ".join(
        format_quantity(values.quantity, values.quantity_in_grams, unit, singularize_units=True)
        for unit, values in totals.items()
    )


def split_totals(totals: Mapping[str, UnitTotals]) -> Measure:
    """
    Split per-unit accumulators into one gram weight and native counts.

    An accumulator with a gram total counts towards the weight; any other
    unit keeps its quantity under its own name and is never added to
    another unit.
    """
    measure = Measure()
    for unit, values in totals.items():
        if values.quantity_in_grams:
            measure.grams += values.quantity_in_grams
        else:
            measure.counts[unit] = measure.counts.get(unit, 0.0) + values.quantity
    return measure


def format_measure(measure: Measure, weight_unit: str = "kilogram") -> str:
    """
    Format a split amount: the weight first, then each count unit.

    With ``weight_unit="gram"`` the weight is shown in grams, otherwise in
    ``weight_unit`` with the usual fallback to grams below one kilogram.
    """
    parts = []
    if measure.grams or not measure.counts:
        grams = measure.grams
        if weight_unit in GRAM_UNITS:
            parts.append(format_quantity(grams, grams, weight_unit))
        else:
            parts.append(format_quantity(grams / 1000, grams, weight_unit))
    for unit, quantity in measure.counts.items():
        parts.append(format_quantity(quantity, 0, None if unit == MISSING else unit))
    return ", ".join(parts)


def format_unit_totals(totals: Mapping[str, UnitTotals]) -> str:
    """
    Format one amount held as per-unit accumulators.

    A single unit is shown in that unit; several units are split with
    ``split_totals`` and shown side by side.
    """
    if len(totals) == 1:
        ((unit, values),) = totals.items()
        display_unit = None if unit == MISSING else unit
        return format_quantity(values.quantity, values.quantity_in_grams, display_unit)
    return format_measure(split_totals(totals), "kg")


def combine_totals(totals: Mapping[str, UnitTotals]) -> dict[str, float]:
    """
    Collapse per-unit accumulators into one figure per lower-cased unit.

    Weight units contribute their gram totals, count units their quantities.
    """
    combined: dict[str, float] = {}
    for unit, values in totals.items():
        unit_key = unit.lower()
        value = values.grams(unit_key) if is_weight_unit(unit_key) else values.quantity
        combined[unit_key] = combined.get(unit_key, 0.0) + value
    return combined


def format_combined_totals(totals: Mapping[str, float]) -> str:
    """Format totals produced by ``combine_totals`` (site and grand totals)."""
    parts = []
    for unit, total in totals.items():
        if not total:
            continue
        if is_weight_unit(unit) or unit == "g":
            if total < 1000 and unit in ("gram", "g"):
                display_total, display_unit = total, "gram"
            else:
                display_total, display_unit = total / 1000, "kg"
        else:
            display_total = total
            display_unit = singularize(unit) if total == 1 else unit
        parts.append(f"{format_number(display_total, 0, 2)} {display_unit}")
    return ", ".join(parts)


def format_weight(grams: float) -> str:
    """Format a gram figure as grams below one kilogram, kilograms above."""
    if grams < 1000:
        return f"{format_number(grams, 0, 2)} g"
    return f"{format_number(grams / 1000, 0, 2)} kg"


def format_requirement(kilograms: float, pieces: float, litres: float) -> str:
    """Format a kilogram / piece / litre requirement triple."""
    parts = []
    if kilograms > 0:
        if kilograms < 1:
            parts.append(f"{format_number(kilograms * 1000, 0, 2)} g")
        else:
            parts.append(f"{format_number(kilograms, 0, 2)} kg")
    if pieces > 0:
        parts.append(f"{format_number(pieces, 0, 2)} pcs")
    if litres > 0:
        parts.append(f"{format_number(litres, 0, 2)} ltr")
    return ", ".join(parts) or "-"


def estimate_piece_weight(ingredient_name: str | None, piece_count: float) -> float | None:
    """
    Estimate the gram weight of a piece-counted feeder ingredient.

    Returns None for ingredients without a known average weight or when no
    pieces are counted.
    """
    average = PIECE_WEIGHTS_G.get((ingredient_name or "").lower())
    if average is None or piece_count <= 0:
        return None
    return piece_count * average
