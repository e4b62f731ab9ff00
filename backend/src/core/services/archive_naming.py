"""Naming rules for archive entries and delivered archives."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from backend.src.core.entities.source_video import SourceVideo
from backend.src.core.value_objects.extraction_settings import ImageFormat

SHARED_ARCHIVE_PREFIX = "Batch_Thumbnails"


def format_timestamp_token(timestamp: float) -> str:
    """``3.5`` -> ``3_50``."""
    return f"{timestamp:.2f}".replace(".", "_")


def interval_entry_name(video: SourceVideo, timestamp: float, image_format: ImageFormat) -> str:
    """Entry name inside a per-source archive, grouped under the source stem.

    Timestamps within one video strictly increase, so names never collide.
    """
    return f"{video.stem}/frame_{format_timestamp_token(timestamp)}.{image_format.extension}"


def shared_entry_name(video: SourceVideo, queue_index: int, image_format: ImageFormat) -> str:
    """Entry name inside the shared archive; the queue index disambiguates equal stems."""
    return f"{video.stem}_{queue_index}.{image_format.extension}"


def archive_stamp(now: Optional[datetime] = None) -> str:
    """UTC timestamp safe for file names, e.g. ``2024-05-01T12-30-00``."""
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H-%M-%S")


def per_source_archive_name(video: SourceVideo, queue_index: int, now: Optional[datetime] = None) -> str:
    """``<name>_<queue index>_frames_<stamp>.zip``; the index separates equal names within one second."""
    return f"{video.name}_{queue_index}_frames_{archive_stamp(now)}.zip"


def shared_archive_name(now: Optional[datetime] = None) -> str:
    return f"{SHARED_ARCHIVE_PREFIX}_{archive_stamp(now)}.zip"
