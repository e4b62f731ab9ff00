"""
Batch extraction API routes.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Request

from backend.src.application.dto.batch_summary import BatchSummary
from backend.src.application.dto.start_batch_request import StartBatchRequest

router = APIRouter()


@router.post("", status_code=202)
async def start_batch(request: Request, body: Optional[StartBatchRequest] = None):
    """Start extracting frames from every queued video."""
    container = request.app.state.container
    defaults = container.settings.extraction.to_value()
    settings = (body or StartBatchRequest()).to_settings(defaults)

    session = await container.queue_service().start_batch(settings)
    return {
        "batch_id": session.id,
        "state": session.state.value,
        "settings": settings.to_dict(),
        "items": len(session.items),
    }


@router.post("/cancel")
async def cancel_batch(request: Request):
    """Request a cooperative stop of the running batch."""
    cancelled = request.app.state.container.queue_service().cancel_batch()
    return {"cancel_requested": cancelled}


@router.get("/{batch_id}")
async def get_batch(batch_id: str, request: Request):
    session = await request.app.state.container.queue_service().get_batch(batch_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Batch not found")
    return {**session.to_dict(), "summary": BatchSummary.from_session(session).to_dict()}
