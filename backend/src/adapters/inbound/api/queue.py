"""
Upload queue API routes.
"""
from __future__ import annotations

import os
import re

from fastapi import APIRouter, File, HTTPException, Request, UploadFile

router = APIRouter()

CHUNK_SIZE = 8 * 1024 * 1024  # 8MB


def _sanitize_filename(filename: str) -> str:
    """Sanitize filename to prevent path traversal and invalid characters."""
    filename = os.path.basename(filename)
    filename = filename.replace("\x00", "")
    filename = re.sub(r'[^\w\s\-.]', '_', filename)
    filename = re.sub(r'\.{2,}', '.', filename)
    filename = re.sub(r'_{2,}', '_', filename)
    if not filename or filename.startswith('.'):
        filename = "upload" + filename
    return filename


@router.post("/upload")
async def upload_videos(request: Request, files: list[UploadFile] = File(...)):
    """Add one or more video files to the queue."""
    container = request.app.state.container
    queue_service = container.queue_service()
    max_size_bytes = container.settings.web.max_upload_size_mb * 1024 * 1024

    for upload in files:
        queue_service.validate_upload(upload.filename or "", upload.content_type)

    added = []
    for upload in files:
        original_name = upload.filename or "upload.mp4"
        video_id, target = queue_service.new_upload_target(_sanitize_filename(original_name))

        # Stream file in chunks instead of reading all into memory
        total_written = 0
        try:
            with open(target, "wb") as f:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    total_written += len(chunk)
                    if total_written > max_size_bytes:
                        raise HTTPException(
                            status_code=413,
                            detail=f"File too large. Maximum size: {container.settings.web.max_upload_size_mb}MB",
                        )
                    f.write(chunk)
        except HTTPException:
            # Clean up partial file on validation failure
            if target.exists():
                target.unlink()
            raise

        video = queue_service.add_video(
            name=original_name,
            path=str(target),
            size_bytes=total_written,
            mime_type=upload.content_type or "",
            video_id=video_id,
        )
        added.append(video.to_dict())

    return {"added": added, "queue_size": len(queue_service.list_queue())}


@router.get("")
async def list_queue(request: Request):
    queue_service = request.app.state.container.queue_service()
    videos = queue_service.list_queue()
    return {"count": len(videos), "videos": [v.to_dict() for v in videos]}


@router.delete("")
async def clear_queue(request: Request):
    queue_service = request.app.state.container.queue_service()
    cleared = await queue_service.clear_queue()
    return {"cleared": cleared}
