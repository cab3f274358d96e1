"""API routes for spreadsheet uploads and the session journal."""

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import BaseModel

from zoodiet.aggregate.engine import distinct_values
from zoodiet.ingest.spreadsheet import SpreadsheetError, load_spreadsheet
from zoodiet.logging_config import LoggingContext, get_logger
from zoodiet.normalize.records import normalize_rows
from zoodiet.routers.dependencies import get_session
from zoodiet.session import SessionState

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["uploads"])


class UploadResponse(BaseModel):
    """Result of loading a feeding spreadsheet."""

    upload_id: str
    filename: str
    row_count: int
    site_count: int
    packing_items: int


class JournalEntryResponse(BaseModel):
    title: str
    message: str
    created_at: datetime


@router.post("/uploads", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_spreadsheet(
    file: UploadFile = File(..., description="Daily feeding export (xlsx, xls or csv)"),
    session: SessionState = Depends(get_session),
) -> UploadResponse:
    """
    Load a feeding spreadsheet, replacing the current dataset.

    Packing statuses of entries that still exist are kept.
    """
    upload_id = uuid.uuid4().hex[:8]
    filename = file.filename or "upload.xlsx"
    data = await file.read()

    with LoggingContext(upload_id=upload_id):
        logger.info(f"Received upload {filename} ({len(data)} bytes)")
        try:
            rows = load_spreadsheet(data, filename=filename)
        except SpreadsheetError as e:
            session.add_journal_entry("Upload Failed", f"Error processing {filename}: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        records = normalize_rows(rows)
        session.load_records(records, source=filename)

    return UploadResponse(
        upload_id=upload_id,
        filename=filename,
        row_count=len(records),
        site_count=len(distinct_values(records, "site_name")),
        packing_items=len(session.packing),
    )


@router.delete("/uploads", status_code=status.HTTP_204_NO_CONTENT)
async def reset_session(session: SessionState = Depends(get_session)) -> None:
    """Drop the loaded dataset and everything derived from it."""
    session.reset()
    session.add_journal_entry("Session Reset", "Dataset and packing list cleared.")
    logger.info("Session reset")


@router.get("/journal", response_model=list[JournalEntryResponse])
async def list_journal(session: SessionState = Depends(get_session)) -> list[JournalEntryResponse]:
    """Journal entries, newest first."""
    return [
        JournalEntryResponse(title=entry.title, message=entry.message, created_at=entry.created_at)
        for entry in reversed(session.journal)
    ]
