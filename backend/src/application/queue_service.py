"""
Upload queue use case.
Holds the videos waiting for the next batch and starts/cancels batches on them.
"""
from __future__ import annotations

import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Optional

from backend.src.application.batch_orchestrator import BatchOrchestrator
from backend.src.application.dto.batch_summary import BatchSummary
from backend.src.core.entities.batch_session import BatchSession
from backend.src.core.entities.source_video import SourceVideo
from backend.src.core.exceptions import BatchAlreadyRunningError, UploadValidationError
from backend.src.core.value_objects.extraction_settings import ExtractionSettings

logger = logging.getLogger(__name__)

UPLOADS_DIR = "uploads"


class QueueService:
    """Manages the video queue: add, list, clear, start a batch, cancel it."""

    def __init__(
        self,
        orchestrator: BatchOrchestrator,
        file_storage,    # FileStoragePort
        runner,          # InProcessBatchRunner
        sink,            # ArchiveSinkPort
        reporter,        # ProgressReporterPort
        repository=None,  # BatchRepositoryPort
        allowed_extensions: Optional[list[str]] = None,
    ):
        self._orchestrator = orchestrator
        self._file_storage = file_storage
        self._runner = runner
        self._sink = sink
        self._reporter = reporter
        self._repository = repository
        self._allowed_extensions = {e.lower() for e in (allowed_extensions or [])}
        self._queue: list[SourceVideo] = []

    # -- Queue -----------------------------------------------------------------

    def validate_upload(self, filename: str, content_type: Optional[str] = None) -> None:
        """Accept only video files: a ``video/*`` MIME type or an allowed extension."""
        mime = content_type or mimetypes.guess_type(filename)[0] or ""
        ext = Path(filename).suffix.lower()
        if mime.startswith("video/") or (ext and ext in self._allowed_extensions):
            return
        raise UploadValidationError(f"Not a video file: {filename}")

    def new_upload_target(self, filename: str) -> tuple[str, Path]:
        """Reserve a storage path for an upload; returns the video id and path."""
        self._ensure_idle()
        video_id = str(uuid.uuid4())
        path = self._file_storage.get_file_path(filename, f"{UPLOADS_DIR}/{video_id}")
        path.parent.mkdir(parents=True, exist_ok=True)
        return video_id, path

    def add_video(
        self,
        name: str,
        path: str,
        size_bytes: int = 0,
        mime_type: str = "",
        video_id: Optional[str] = None,
    ) -> SourceVideo:
        self._ensure_idle()
        self.validate_upload(name, mime_type or None)
        video = SourceVideo(name=name, path=str(path), size_bytes=size_bytes, mime_type=mime_type)
        if video_id:
            video.id = video_id
        self._queue.append(video)
        logger.info("Added %s to queue (%.1f MB)", name, video.size_mb)
        return video

    def add_local_files(self, paths: list[str]) -> list[SourceVideo]:
        """Queue files already on disk, skipping anything that is not a video."""
        added: list[SourceVideo] = []
        for raw in paths:
            p = Path(raw)
            try:
                added.append(self.add_video(p.name, str(p), p.stat().st_size if p.exists() else 0))
            except UploadValidationError as e:
                logger.warning("Skipped %s: %s", raw, e)
        if not added:
            raise UploadValidationError("No video files found.")
        return added

    def list_queue(self) -> list[SourceVideo]:
        return list(self._queue)

    async def clear_queue(self) -> int:
        self._ensure_idle()
        cleared = list(self._queue)
        self._queue.clear()
        for video in cleared:
            if UPLOADS_DIR in Path(video.path).parts:
                await self._file_storage.delete_file(video.path)
        logger.info("Queue cleared (%d videos)", len(cleared))
        return len(cleared)

    # -- Batches ---------------------------------------------------------------

    async def start_batch(self, settings: ExtractionSettings) -> BatchSession:
        """Start a batch over the current queue in the background."""
        if not self._queue:
            raise ValueError("Queue is empty")
        session = self._orchestrator.begin(self._queue, settings)
        try:
            if self._repository is not None:
                await self._repository.save(session)
            self._runner.submit(
                session.id,
                self._orchestrator.execute(session, self._sink, self._reporter),
            )
        except Exception:
            self._orchestrator.abort(session)
            raise
        logger.info("Batch %s started with %d videos", session.id, len(session.items))
        return session

    def cancel_batch(self) -> bool:
        if not self._orchestrator.is_running:
            return False
        self._orchestrator.request_cancel()
        return True

    async def get_batch(self, batch_id: str) -> Optional[BatchSession]:
        current = self._orchestrator.current_session
        if current is not None and current.id == batch_id:
            return current
        if self._repository is None:
            return None
        return await self._repository.get_by_id(batch_id)

    async def summarize(self, batch_id: str) -> Optional[BatchSummary]:
        session = await self.get_batch(batch_id)
        return BatchSummary.from_session(session) if session else None

    def _ensure_idle(self) -> None:
        if self._orchestrator.is_running:
            raise BatchAlreadyRunningError("Queue is locked while a batch is running")
