"""API routers for the zoodiet application."""

from zoodiet.routers.packing import router as packing_router
from zoodiet.routers.reports import router as reports_router
from zoodiet.routers.uploads import router as uploads_router

__all__ = [
    "packing_router",
    "reports_router",
    "uploads_router",
]
