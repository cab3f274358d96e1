"""Shared FastAPI dependencies."""

from fastapi import Depends, HTTPException, Request, status

from zoodiet.normalize.records import FeedingRecord
from zoodiet.session import SessionState


def get_session(request: Request) -> SessionState:
    """The application's session state, created at startup."""
    return request.app.state.session


def get_records(session: SessionState = Depends(get_session)) -> tuple[FeedingRecord, ...]:
    """The loaded dataset; 409 when nothing has been uploaded yet."""
    if not session.has_data:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No dataset loaded. Upload a feeding spreadsheet first.",
        )
    return session.records
