"""Report variants built on the aggregation engine and consolidator."""

from zoodiet.reports.breakup import (
    BreakupRow,
    RecipeBreakup,
    ingredient_breakup,
    meal_group_breakup,
    recipe_breakup,
    recipe_options,
)
from zoodiet.reports.dashboard import DatasetStats, PackingStats, dataset_stats, packing_stats
from zoodiet.reports.diet_report import (
    MealReport,
    SiteReport,
    build_diet_report,
    group_options,
    report_date,
    verification_key,
)
from zoodiet.reports.diet_summary import DietSummaryInput, MealItem, build_diet_summary_input
from zoodiet.reports.packing import (
    PackingEntry,
    PackingItem,
    PackingStatus,
    TimeSlot,
    build_packing_list,
    filter_by_slot,
)
from zoodiet.reports.pivot import PivotTable, pivot_table
from zoodiet.reports.summary import (
    IngredientRequirement,
    IngredientSummary,
    build_ingredient_summary,
    ingredient_requirements,
)

__all__ = [
    "BreakupRow",
    "DatasetStats",
    "DietSummaryInput",
    "IngredientRequirement",
    "IngredientSummary",
    "MealItem",
    "MealReport",
    "PackingEntry",
    "PackingItem",
    "PackingStats",
    "PackingStatus",
    "PivotTable",
    "RecipeBreakup",
    "SiteReport",
    "TimeSlot",
    "build_diet_report",
    "build_diet_summary_input",
    "build_ingredient_summary",
    "build_packing_list",
    "dataset_stats",
    "filter_by_slot",
    "group_options",
    "ingredient_breakup",
    "ingredient_requirements",
    "meal_group_breakup",
    "packing_stats",
    "pivot_table",
    "recipe_breakup",
    "recipe_options",
    "report_date",
    "verification_key",
]
