"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from zoodiet.config import get_settings
from zoodiet.logging_config import LoggingContext, configure_logging, get_logger
from zoodiet.routers import packing_router, reports_router, uploads_router
from zoodiet.session import SessionState

# Configure logging on module load
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    logger.info("Starting Zoodiet API")

    yield

    # Shutdown
    logger.info("Shutting down Zoodiet API")
    app.state.session.reset()


app = FastAPI(
    title="Zoodiet API",
    description="Daily diet reports and kitchen packing lists from zoo feeding exports",
    version="0.1.0",
    lifespan=lifespan,
)
app.state.session = SessionState()

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().allowed_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag every log line of a request with a request id."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
    with LoggingContext(request_id=request_id):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# Include routers
app.include_router(uploads_router)
app.include_router(reports_router)
app.include_router(packing_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "zoodiet-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Zoodiet API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
