"""API routes for diet reports, summaries, breakups and dashboards."""

from datetime import date
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from zoodiet.aggregate.consolidate import AnimalSummary, ConsolidationError, DietItem
from zoodiet.logging_config import LoggingContext, get_logger
from zoodiet.normalize.records import FeedingRecord
from zoodiet.normalize.units import UnitTotals
from zoodiet.reports.breakup import (
    BreakupRow,
    ingredient_breakup,
    meal_group_breakup,
    recipe_breakup,
    recipe_options,
)
from zoodiet.reports.dashboard import DatasetStats, dataset_stats
from zoodiet.reports.diet_report import (
    build_diet_report,
    group_options,
    report_date,
    verification_key,
)
from zoodiet.reports.diet_summary import DietSummaryInput, build_diet_summary_input
from zoodiet.reports.pivot import pivot_table
from zoodiet.reports.summary import build_ingredient_summary, ingredient_requirements
from zoodiet.routers.dependencies import get_records, get_session
from zoodiet.session import SessionState, VerificationStatus

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])

Records = Annotated[tuple[FeedingRecord, ...], Depends(get_records)]


# Response schemas
class DietBlockResponse(BaseModel):
    """One consolidated diet with its reviewer mark."""

    signature: str
    verification_key: str
    verification: VerificationStatus
    reason: str = ""
    total_animal_count: int
    animals: list[AnimalSummary]
    items: list[DietItem]


class MealResponse(BaseModel):
    time: str
    diets: list[DietBlockResponse]


class SiteResponse(BaseModel):
    site_name: str
    meals: list[MealResponse]


class DietReportResponse(BaseModel):
    report_date: date | None
    groups: list[str]
    sites: list[SiteResponse]


class VerifyRequest(BaseModel):
    """Reviewer's mark for one diet block."""

    site_name: str
    meal_time: str
    signature: str
    status: VerificationStatus
    reason: str = Field(default="", description="Kept only for not-ok marks")


class VerifyResponse(BaseModel):
    verification_key: str
    status: VerificationStatus
    reason: str


class IngredientLineResponse(BaseModel):
    ingredient_name: str
    display: str
    totals: dict[str, UnitTotals]


class SiteSummaryResponse(BaseModel):
    site_name: str
    total: str
    ingredients: list[IngredientLineResponse]


class OverallTotalResponse(BaseModel):
    ingredient_name: str
    weight: str
    pieces: str
    pieces_as_weight: str


class SummaryResponse(BaseModel):
    sites: list[SiteSummaryResponse]
    overall: list[OverallTotalResponse]
    grand_total: str


class RequirementResponse(BaseModel):
    ingredient_name: str
    kilograms: float
    pieces: float
    litres: float
    display: str


class RecipeIngredientResponse(BaseModel):
    ingredient_name: str
    quantity: float | None
    quantity_in_grams: float
    unit: str | None
    display: str
    percentage: float


class RecipeBreakupResponse(BaseModel):
    recipe_name: str
    grand_total: str
    grand_total_grams: float
    used_by_groups: list[str]
    ingredients: list[RecipeIngredientResponse]


class PivotRowResponse(BaseModel):
    keys: list[str]
    values: dict[str, float]
    row_spans: list[int]


class PivotResponse(BaseModel):
    headers: list[str]
    unit_columns: list[str]
    rows: list[PivotRowResponse]


# =============================================================================
# Diet Report
# =============================================================================


@router.get("/diet", response_model=DietReportResponse)
async def get_diet_report(
    records: Records,
    group: Annotated[str | None, Query(description="Restrict to one meal group")] = None,
    session: SessionState = Depends(get_session),
) -> DietReportResponse:
    """
    Consolidated diet report by site and meal time.

    Animals eating identically within a site and meal time share one block.
    """
    with LoggingContext(report="diet"):
        try:
            sites = build_diet_report(records, group_name=group)
        except ConsolidationError as e:
            logger.error(f"Diet consolidation failed at {e.site_name} {e.meal_time}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Diet consolidation failed: {e}",
            )

    site_responses = []
    for site in sites:
        meals = []
        for meal in site.meals:
            blocks = []
            for diet in meal.diets:
                key = verification_key(site.site_name, meal.time, diet.signature)
                mark = session.verification(key)
                blocks.append(
                    DietBlockResponse(
                        signature=diet.signature,
                        verification_key=key,
                        verification=mark.status,
                        reason=mark.reason,
                        total_animal_count=diet.total_animal_count,
                        animals=diet.animals,
                        items=diet.items,
                    )
                )
            meals.append(MealResponse(time=meal.time, diets=blocks))
        site_responses.append(SiteResponse(site_name=site.site_name, meals=meals))

    return DietReportResponse(
        report_date=report_date(records),
        groups=group_options(records),
        sites=site_responses,
    )


@router.post("/diet/verify", response_model=VerifyResponse)
async def verify_diet(
    request: VerifyRequest,
    session: SessionState = Depends(get_session),
) -> VerifyResponse:
    """Mark one diet block as checked OK or not OK."""
    key = verification_key(request.site_name, request.meal_time, request.signature)
    verification = session.verify(key, request.status, request.reason)
    if verification.status is VerificationStatus.NOT_OK:
        session.add_journal_entry(
            "Diet Marked Not OK",
            f"{request.site_name} at {request.meal_time}: "
            f"{verification.reason or 'no reason given'}",
        )
    logger.info(f"Diet block {key} marked {verification.status.value}")
    return VerifyResponse(
        verification_key=key,
        status=verification.status,
        reason=verification.reason,
    )


# =============================================================================
# Summaries
# =============================================================================


@router.get("/summary", response_model=SummaryResponse)
async def get_ingredient_summary(
    records: Records,
    feed_type: Annotated[str | None, Query(description="Restrict to one feed type")] = None,
    ingredient: Annotated[list[str] | None, Query(description="Ingredient names")] = None,
) -> SummaryResponse:
    """Ingredient totals per site with overall and grand totals."""
    with LoggingContext(report="summary"):
        summary = build_ingredient_summary(records, feed_type=feed_type, ingredients=ingredient)

    return SummaryResponse(
        sites=[
            SiteSummaryResponse(
                site_name=site.site_name,
                total=site.display_total,
                ingredients=[
                    IngredientLineResponse(
                        ingredient_name=line.ingredient_name,
                        display=line.display,
                        totals=line.totals,
                    )
                    for line in site.ingredients
                ],
            )
            for site in summary.sites
        ],
        overall=[
            OverallTotalResponse(
                ingredient_name=total.ingredient_name,
                weight=total.weight,
                pieces=total.pieces,
                pieces_as_weight=total.pieces_as_weight,
            )
            for total in summary.overall
        ],
        grand_total=summary.grand_total_display,
    )


@router.get("/requirements", response_model=list[RequirementResponse])
async def get_ingredient_requirements(
    records: Records,
    site: Annotated[str | None, Query(description="Restrict to one site")] = None,
    ingredient: Annotated[str | None, Query(description="Restrict to one ingredient")] = None,
) -> list[RequirementResponse]:
    """Total kilograms, pieces and litres required per ingredient."""
    return [
        RequirementResponse(
            ingredient_name=requirement.ingredient_name,
            kilograms=requirement.kilograms,
            pieces=requirement.pieces,
            litres=requirement.litres,
            display=requirement.display,
        )
        for requirement in ingredient_requirements(records, site=site, ingredient=ingredient)
    ]


# =============================================================================
# Breakups
# =============================================================================


@router.get("/breakup", response_model=list[BreakupRow])
async def get_ingredient_breakup(records: Records) -> list[BreakupRow]:
    """Distribution of each ingredient over species, animals, enclosures and sites."""
    with LoggingContext(report="breakup"):
        return ingredient_breakup(records)


@router.get("/meal-groups", response_model=list[BreakupRow])
async def get_meal_group_breakup(
    records: Records,
    feed_type: Annotated[str | None, Query(description="Restrict to one feed type")] = None,
    lead: Annotated[
        Literal["ingredient", "group"], Query(description="Outer column")
    ] = "ingredient",
) -> list[BreakupRow]:
    """Ingredient totals split by meal group."""
    with LoggingContext(report="meal-groups"):
        return meal_group_breakup(records, feed_type=feed_type, lead=lead)


@router.get("/recipes", response_model=list[str])
async def list_recipes(records: Records) -> list[str]:
    """Names of all recipes and combos in the dataset."""
    return recipe_options(records)


@router.get("/recipes/{recipe_name:path}", response_model=RecipeBreakupResponse)
async def get_recipe_breakup(
    recipe_name: str,
    records: Records,
    group: Annotated[str | None, Query(description="Restrict to one meal group")] = None,
) -> RecipeBreakupResponse:
    """Ingredient composition of one recipe or combo, heaviest first."""
    breakup = recipe_breakup(records, recipe_name, group_name=group)
    if not breakup.ingredients and not breakup.used_by_groups:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Recipe {recipe_name} not found",
        )

    return RecipeBreakupResponse(
        recipe_name=breakup.recipe_name,
        grand_total=breakup.grand_total_display,
        grand_total_grams=breakup.grand_total_grams,
        used_by_groups=breakup.used_by_groups,
        ingredients=[
            RecipeIngredientResponse(
                ingredient_name=ingredient.ingredient_name,
                quantity=ingredient.quantity,
                quantity_in_grams=ingredient.quantity_in_grams,
                unit=ingredient.unit,
                display=ingredient.display,
                percentage=breakup.percentage(ingredient),
            )
            for ingredient in breakup.ingredients
        ],
    )


@router.get("/pivot", response_model=PivotResponse)
async def get_pivot_table(
    records: Records,
    site: Annotated[str | None, Query(description="Restrict to one site")] = None,
    common_name: Annotated[str | None, Query(description="Species name contains")] = None,
) -> PivotResponse:
    """Quantities per unit over the species / feed / meal / item hierarchy."""
    with LoggingContext(report="pivot"):
        table = pivot_table(records, site=site, common_name=common_name)

    return PivotResponse(
        headers=table.headers,
        unit_columns=table.unit_columns,
        rows=[
            PivotRowResponse(keys=list(row.keys), values=row.values, row_spans=row.row_spans)
            for row in table.rows
        ],
    )


# =============================================================================
# Dashboard and Summary Input
# =============================================================================


@router.get("/dashboard", response_model=DatasetStats)
async def get_dashboard(records: Records) -> DatasetStats:
    """Headline counts and distributions of the loaded dataset."""
    return dataset_stats(records)


@router.get("/diet-summary/{common_name}", response_model=DietSummaryInput)
async def get_diet_summary_input(common_name: str, records: Records) -> DietSummaryInput:
    """Meal-by-meal diet of one species, as handed to a summary generator."""
    summary = build_diet_summary_input(records, common_name)
    if summary is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No feeding data for {common_name}",
        )
    return summary
