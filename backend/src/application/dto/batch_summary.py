"""DTO summarising a batch session."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from backend.src.core.entities.batch_session import BatchSession
from backend.src.core.entities.queue_item import QueueItemStatus


@dataclass
class BatchSummary:
    batch_id: str
    state: str
    total: int = 0
    done: int = 0
    errors: int = 0
    pending: int = 0
    progress: int = 0
    archives: list = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def from_session(cls, session: BatchSession) -> BatchSummary:
        return cls(
            batch_id=session.id,
            state=session.state.value,
            total=len(session.items),
            done=session.count(QueueItemStatus.DONE),
            errors=session.count(QueueItemStatus.ERROR),
            pending=session.count(QueueItemStatus.PENDING),
            progress=session.progress,
            archives=list(session.delivered_archives),
            error=session.error,
        )

    def to_dict(self) -> dict:
        return {
            "batch_id": self.batch_id,
            "state": self.state,
            "total": self.total,
            "done": self.done,
            "errors": self.errors,
            "pending": self.pending,
            "progress": self.progress,
            "archives": self.archives,
            "error": self.error,
        }
