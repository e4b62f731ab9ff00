"""
Delivered archive API routes.
"""
from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, Request
from fastapi.responses import Response

router = APIRouter()


@router.get("")
async def list_archives(request: Request):
    sink = request.app.state.container.sink()
    return {"archives": sink.list_archives()}


@router.get("/{name}")
async def download_archive(name: str, request: Request):
    """Download a delivered ZIP archive."""
    sink = request.app.state.container.sink()
    data = sink.read_archive(name)
    return Response(
        content=data,
        media_type="application/zip",
        headers={"content-disposition": f"attachment; filename*=UTF-8''{quote(name)}"},
    )
