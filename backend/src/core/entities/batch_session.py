"""BatchSession aggregate: process-wide state for one extraction run."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from backend.src.core.entities.queue_item import QueueItem, QueueItemStatus
from backend.src.core.entities.source_video import SourceVideo
from backend.src.core.value_objects.extraction_settings import ExtractionSettings


class BatchState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class BatchSession:
    """Aggregate root for a batch run.

    Owns the ordered queue items and the cancellation flag. The session is
    mutated only by the orchestrator's current step.
    """

    settings: ExtractionSettings
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    items: list[QueueItem] = field(default_factory=list)
    state: BatchState = BatchState.IDLE
    cancel_requested: bool = False
    delivered_archives: list[str] = field(default_factory=list)
    error: Optional[str] = None
    progress: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @classmethod
    def from_videos(cls, videos: list[SourceVideo], settings: ExtractionSettings) -> BatchSession:
        return cls(
            settings=settings,
            items=[QueueItem(video=v, index=i) for i, v in enumerate(videos)],
        )

    @property
    def is_running(self) -> bool:
        return self.state == BatchState.RUNNING

    def start(self) -> None:
        if self.state != BatchState.IDLE:
            raise ValueError(f"Batch {self.id} is {self.state.value}, cannot start")
        self.state = BatchState.RUNNING
        self.cancel_requested = False
        self.started_at = datetime.utcnow()

    def request_cancel(self) -> None:
        self.cancel_requested = True

    def finish(self) -> None:
        self.state = BatchState.CANCELLED if self.cancel_requested else BatchState.COMPLETED
        self.finished_at = datetime.utcnow()

    def count(self, status: QueueItemStatus) -> int:
        return sum(1 for item in self.items if item.status == status)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "state": self.state.value,
            "settings": self.settings.to_dict(),
            "cancel_requested": self.cancel_requested,
            "progress": self.progress,
            "items": [item.to_dict() for item in self.items],
            "delivered_archives": list(self.delivered_archives),
            "error": self.error,
            "created_at": self.created_at.isoformat(),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }
