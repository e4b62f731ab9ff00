from backend.src.core.entities.source_video import SourceVideo
from backend.src.core.entities.queue_item import QueueItem, QueueItemStatus
from backend.src.core.entities.batch_session import BatchSession, BatchState

__all__ = [
    "SourceVideo", "QueueItem", "QueueItemStatus", "BatchSession", "BatchState",
]
