"""Site / meal time / consolidated diet report."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from zoodiet.aggregate.consolidate import ConsolidatedDiet, consolidate
from zoodiet.aggregate.engine import distinct_values, filter_records, partition, sort_text
from zoodiet.logging_config import get_logger
from zoodiet.normalize.records import FeedingRecord

logger = get_logger(__name__)

EXCEL_EPOCH = date(1899, 12, 30)
DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%d-%m-%Y", "%d/%m/%Y", "%Y/%m/%d", "%d %b %Y")


@dataclass
class MealReport:
    """Consolidated diets served at one meal time."""

    time: str
    diets: list[ConsolidatedDiet] = field(default_factory=list)


@dataclass
class SiteReport:
    """All meals of one site."""

    site_name: str
    meals: list[MealReport] = field(default_factory=list)


def build_diet_report(
    records: Sequence[FeedingRecord],
    group_name: str | None = None,
) -> list[SiteReport]:
    """
    Build the consolidated diet report.

    Records are split by site and meal start time; each bucket is
    consolidated independently. Sites and meal times come out sorted.

    Args:
        records: Feeding records of the loaded dataset.
        group_name: Restrict the report to one meal group.
    """
    if group_name:
        records = filter_records(records, group_name=group_name)

    sites = []
    for site_name, site_rows in partition(records, "site_name").items():
        meals = [
            MealReport(
                time=time,
                diets=consolidate(meal_rows, site_name=site_name, meal_time=time),
            )
            for time, meal_rows in partition(site_rows, "meal_start_time").items()
        ]
        meals.sort(key=lambda meal: sort_text(meal.time))
        sites.append(SiteReport(site_name=site_name, meals=meals))

    sites.sort(key=lambda site: sort_text(site.site_name))
    logger.info(
        f"Built diet report: {len(records)} records, {len(sites)} sites, "
        f"{sum(len(meal.diets) for site in sites for meal in site.meals)} diets"
    )
    return sites


def group_options(records: Sequence[FeedingRecord]) -> list[str]:
    """Meal groups available for the report selector."""
    return distinct_values(records, "group_name")


def verification_key(site_name: str, meal_time: str, signature: str) -> str:
    """Key under which a reviewer's OK / not-OK mark for one diet block is stored."""
    return f"{site_name}|{meal_time}|{signature}"


def parse_feeding_date(value: str | float | None) -> date | None:
    """
    Parse a feeding date cell.

    Accepts Excel serial day numbers and the common textual formats;
    returns None when the value can't be read.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        if value <= 1:
            return None
        return EXCEL_EPOCH + timedelta(days=int(value))

    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    logger.debug(f"Unparseable feeding date: {value!r}")
    return None


def report_date(records: Sequence[FeedingRecord]) -> date | None:
    """Date printed on the report, taken from the first record."""
    if not records:
        return None
    return parse_feeding_date(records[0].feeding_date)
