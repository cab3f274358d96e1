"""API routes for the kitchen packing list."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from zoodiet.logging_config import get_logger
from zoodiet.normalize.records import FeedingRecord
from zoodiet.reports.dashboard import packing_stats
from zoodiet.reports.packing import (
    PackingIngredient,
    PackingStatus,
    TimeSlot,
    build_packing_list,
    filter_by_slot,
)
from zoodiet.routers.dependencies import get_records, get_session
from zoodiet.session import SessionState, UnknownPackingItemError

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/packing", tags=["packing"])


# Response schemas
class PackingEntryResponse(BaseModel):
    """One packing entry with its current status."""

    id: str
    site_name: str
    enclosure_name: str
    common_name: str
    meal_start_time: str
    time_slot: TimeSlot
    item_name: str
    item_kind: str
    feed_type_name: str | None
    animal_count: int
    total: str
    status: PackingStatus
    ingredients: list[PackingIngredient]


class PackingToggleRequest(BaseModel):
    id: str


class PackingStatusRequest(BaseModel):
    id: str
    status: PackingStatus


class PackingItemResponse(BaseModel):
    id: str
    status: PackingStatus


class PackingStatsResponse(BaseModel):
    """Packing progress overall and per site."""

    total: int
    status_counts: dict[str, int]
    site_distribution: dict[str, dict[str, int]]


@router.get("", response_model=list[PackingEntryResponse])
async def list_packing(
    records: Annotated[tuple[FeedingRecord, ...], Depends(get_records)],
    slot: Annotated[TimeSlot, Query(description="Meal time slot")] = TimeSlot.ALL,
    session: SessionState = Depends(get_session),
) -> list[PackingEntryResponse]:
    """Packing entries for one time slot, ordered by site, enclosure and species."""
    entries = filter_by_slot(build_packing_list(records), slot)
    return [
        PackingEntryResponse(
            id=entry.id,
            site_name=entry.site_name,
            enclosure_name=entry.enclosure_name,
            common_name=entry.common_name,
            meal_start_time=entry.meal_start_time,
            time_slot=entry.time_slot,
            item_name=entry.item_name,
            item_kind=entry.item_kind.value,
            feed_type_name=entry.feed_type_name,
            animal_count=entry.animal_count,
            total=entry.total_display,
            status=session.packing_status(entry.id),
            ingredients=entry.ingredients,
        )
        for entry in entries
    ]


def _unknown_item(e: UnknownPackingItemError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Packing item {e.item_id} not found",
    )


@router.post("/toggle", response_model=PackingItemResponse)
async def toggle_packing(
    request: PackingToggleRequest,
    session: SessionState = Depends(get_session),
) -> PackingItemResponse:
    """Flip an entry between Pending and Packed."""
    try:
        item = session.toggle_packing(request.id)
    except UnknownPackingItemError as e:
        raise _unknown_item(e)

    logger.info(f"Packing item {item.id} -> {item.status.value}")
    return PackingItemResponse(id=item.id, status=item.status)


@router.post("/status", response_model=PackingItemResponse)
async def set_packing_status(
    request: PackingStatusRequest,
    session: SessionState = Depends(get_session),
) -> PackingItemResponse:
    """Set an entry's status directly, e.g. to Dispatched."""
    try:
        item = session.set_packing_status(request.id, request.status)
    except UnknownPackingItemError as e:
        raise _unknown_item(e)

    logger.info(f"Packing item {item.id} -> {item.status.value}")
    return PackingItemResponse(id=item.id, status=item.status)


@router.get("/stats", response_model=PackingStatsResponse)
async def get_packing_stats(session: SessionState = Depends(get_session)) -> PackingStatsResponse:
    """Status counts overall and per site."""
    stats = packing_stats(session.packing_items(), session.records)
    return PackingStatsResponse(
        total=stats.total,
        status_counts={s.value: count for s, count in stats.status_counts.items()},
        site_distribution={
            site: {s.value: count for s, count in counts.items()}
            for site, counts in stats.site_distribution.items()
        },
    )
