from backend.src.core.services.archive_naming import (
    interval_entry_name,
    per_source_archive_name,
    shared_archive_name,
    shared_entry_name,
)
from backend.src.core.services.progress import batch_percentage, frame_fraction
from backend.src.core.services.timestamp_scheduler import TimestampSchedule, TimestampScheduler

__all__ = [
    "TimestampSchedule",
    "TimestampScheduler",
    "interval_entry_name",
    "shared_entry_name",
    "per_source_archive_name",
    "shared_archive_name",
    "batch_percentage",
    "frame_fraction",
]
