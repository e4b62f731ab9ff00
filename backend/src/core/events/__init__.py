from backend.src.core.events.batch_events import (
    BatchEvent,
    BatchMessage,
    ItemStatusChanged,
    ProgressUpdated,
)

__all__ = [
    "BatchEvent",
    "ItemStatusChanged",
    "ProgressUpdated",
    "BatchMessage",
]
