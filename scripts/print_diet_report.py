"""Script to print the consolidated diet report of a feeding export.

Run with: uv run python scripts/print_diet_report.py feeding_export.xlsx
Packing list: uv run python scripts/print_diet_report.py feeding_export.xlsx --packing
"""

import argparse
import sys

from zoodiet.aggregate.consolidate import ConsolidationError
from zoodiet.ingest.spreadsheet import SpreadsheetError, load_spreadsheet
from zoodiet.logging_config import configure_logging, get_logger
from zoodiet.normalize.records import normalize_rows
from zoodiet.reports.diet_report import build_diet_report, report_date
from zoodiet.reports.packing import TimeSlot, build_packing_list, filter_by_slot

logger = get_logger(__name__)


def print_diet_report(records, group_name=None):
    """Print sites, meal times and consolidated diet blocks."""
    sites = build_diet_report(records, group_name=group_name)
    feeding_date = report_date(records)
    print(f"\nDiet report for {feeding_date or 'unknown date'}")

    for site in sites:
        print(f"\n{'=' * 70}")
        print(site.site_name)
        print("=" * 70)
        for meal in site.meals:
            print(f"\n  {meal.time}")
            for diet in meal.diets:
                species = ", ".join(f"{a.common_name} ({a.count})" for a in diet.animals)
                print(f"    {species} | {diet.total_animal_count} animals")
                for item in diet.items:
                    details = f" {item.item_details}" if item.item_details else ""
                    print(
                        f"      - {item.item_name}{details}: "
                        f"{item.amount_per_animal} per animal, {item.total_amount_required} total"
                    )


def print_packing_list(records, slot):
    """Print packing entries of one time slot."""
    entries = filter_by_slot(build_packing_list(records), slot)
    print(f"\nPacking list ({slot.value}): {len(entries)} entries")
    print("-" * 70)
    for entry in entries:
        print(
            f"{entry.site_name} / {entry.enclosure_name} / {entry.common_name} "
            f"@ {entry.meal_start_time}: {entry.item_name} = {entry.total_display}"
        )
        for ingredient in entry.ingredients:
            print(f"    {ingredient.name}: {ingredient.display}")


def main():
    parser = argparse.ArgumentParser(description="Print diet reports from a feeding export")
    parser.add_argument("path", help="Feeding export (xlsx, xls or csv)")
    parser.add_argument("--group", "-g", type=str, help="Restrict to one meal group")
    parser.add_argument("--packing", "-p", action="store_true", help="Print the packing list")
    parser.add_argument(
        "--slot",
        "-s",
        choices=[slot.value for slot in TimeSlot],
        default=TimeSlot.ALL.value,
        help="Time slot for the packing list",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args()

    configure_logging(log_level=args.log_level)

    try:
        records = normalize_rows(load_spreadsheet(args.path))
    except SpreadsheetError as e:
        logger.error(f"Failed to load {args.path}: {e}")
        sys.exit(1)

    if args.packing:
        print_packing_list(records, TimeSlot(args.slot))
        return

    try:
        print_diet_report(records, group_name=args.group)
    except ConsolidationError as e:
        logger.error(f"Diet consolidation failed at {e.site_name} {e.meal_time}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
