"""
FastAPI application - primary inbound adapter.
"""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.src.infrastructure.config import Settings
from backend.src.infrastructure.logging_config import setup_logging

logger = logging.getLogger(__name__)

settings = Settings()

APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown lifecycle."""
    setup_logging(settings.logging.level, settings.logging.file)
    settings.validate_production()
    logger.info("FrameArchive backend starting up...")
    from backend.src.infrastructure.container import ApplicationContainer
    if not hasattr(app.state, "container"):
        app.state.container = ApplicationContainer(settings)
    yield
    orchestrator = app.state.container.orchestrator()
    if orchestrator.is_running:
        orchestrator.request_cancel()
    app.state.container.capturer().release_all()
    logger.info("FrameArchive backend shutting down...")


app = FastAPI(
    title="FrameArchive API",
    description="Batch video frame extraction into ZIP archives",
    version=APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """Log each request with method, path, status, and duration."""
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    if request.url.path.startswith("/api"):
        response.headers["cache-control"] = "no-store, no-cache, must-revalidate"
    logger.info(
        "%s %s -> %d (%.1fms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


from backend.src.core.exceptions import (
    ArchiveNotFoundError,
    BatchAlreadyRunningError,
    FrameArchiveError,
    UploadValidationError,
)


@app.exception_handler(ArchiveNotFoundError)
async def archive_not_found_handler(request: Request, exc: ArchiveNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(UploadValidationError)
async def upload_validation_handler(request: Request, exc: UploadValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(BatchAlreadyRunningError)
async def batch_running_handler(request: Request, exc: BatchAlreadyRunningError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(FrameArchiveError)
async def frame_archive_error_handler(request: Request, exc: FrameArchiveError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# ── API routes ─────────────────────────────────────────────────

from backend.src.adapters.inbound.api.archives import router as archives_router
from backend.src.adapters.inbound.api.batches import router as batches_router
from backend.src.adapters.inbound.api.queue import router as queue_router

app.include_router(queue_router, prefix="/api/queue", tags=["queue"])
app.include_router(batches_router, prefix="/api/batches", tags=["batches"])
app.include_router(archives_router, prefix="/api/archives", tags=["archives"])


@app.get("/api/health")
async def health(request: Request):
    orchestrator = request.app.state.container.orchestrator()
    return {
        "status": "ok",
        "version": APP_VERSION,
        "batch_running": orchestrator.is_running,
    }


@app.get("/api/config/defaults")
async def extraction_defaults(request: Request):
    """Default values for the settings form."""
    container = request.app.state.container
    return container.settings.extraction.to_value().to_dict()


@app.websocket("/ws/{batch_id}")
async def websocket_endpoint(websocket: WebSocket, batch_id: str):
    """WebSocket endpoint for real-time batch updates (``*`` for every batch)."""
    reporter = websocket.app.state.container.reporter()
    await reporter.connect(batch_id, websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await reporter.disconnect(batch_id, websocket)
