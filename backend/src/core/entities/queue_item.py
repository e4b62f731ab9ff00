"""Queue item entity: one source video and its processing status."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from backend.src.core.entities.source_video import SourceVideo
from backend.src.core.exceptions import QueueStateError


class QueueItemStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    ERROR = "error"


# Status transitions are monotonic: no item ever returns to an earlier state.
_ALLOWED_TRANSITIONS: dict[QueueItemStatus, frozenset[QueueItemStatus]] = {
    QueueItemStatus.PENDING: frozenset({QueueItemStatus.PROCESSING}),
    QueueItemStatus.PROCESSING: frozenset({QueueItemStatus.DONE, QueueItemStatus.ERROR}),
    QueueItemStatus.DONE: frozenset(),
    QueueItemStatus.ERROR: frozenset(),
}


@dataclass
class QueueItem:
    video: SourceVideo
    index: int = 0
    status: QueueItemStatus = QueueItemStatus.PENDING
    error_message: Optional[str] = None
    frames_captured: int = 0
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_finished(self) -> bool:
        return self.status in (QueueItemStatus.DONE, QueueItemStatus.ERROR)

    def start_processing(self) -> None:
        self._transition(QueueItemStatus.PROCESSING)

    def complete(self) -> None:
        self._transition(QueueItemStatus.DONE)

    def fail(self, message: str) -> None:
        self._transition(QueueItemStatus.ERROR)
        self.error_message = message

    def _transition(self, target: QueueItemStatus) -> None:
        if target not in _ALLOWED_TRANSITIONS[self.status]:
            raise QueueStateError(
                f"Illegal status transition for {self.video.name!r}: "
                f"{self.status.value} -> {target.value}"
            )
        self.status = target
        self.updated_at = datetime.utcnow()

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "video": self.video.to_dict(),
            "status": self.status.value,
            "error_message": self.error_message,
            "frames_captured": self.frames_captured,
        }
