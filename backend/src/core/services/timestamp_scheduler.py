"""Timestamp scheduling for frame capture.

Produces the capture instants for one video as a lazy sequence. The schedule
object can be iterated any number of times; every iteration starts over from
the first timestamp.
"""
from __future__ import annotations

import logging
import math
from typing import Iterator

from backend.src.core.value_objects.extraction_settings import ExtractionMode, ExtractionSettings

logger = logging.getLogger(__name__)

# Interval used when the configured one would not advance.
DEFAULT_INTERVAL_SECONDS = 1.0
# Entry names carry two decimals; closer timestamps would share a name.
MIN_INTERVAL_SECONDS = 0.01


class TimestampSchedule:
    """Lazy, finite, restartable sequence of capture timestamps."""

    def __init__(self, duration_seconds: float, settings: ExtractionSettings) -> None:
        self.duration_seconds = duration_seconds
        self.mode = settings.mode
        if self.mode == ExtractionMode.SINGLE_FRAME_SHARED_ARCHIVE:
            self.interval = 0.0
            self.snapshot_at = resolve_snapshot_time(duration_seconds, settings.time_parameter)
        else:
            self.interval = resolve_interval(settings.time_parameter)
            self.snapshot_at = 0.0

    def __iter__(self) -> Iterator[float]:
        if self.mode == ExtractionMode.SINGLE_FRAME_SHARED_ARCHIVE:
            yield self.snapshot_at
            return

        step = 0
        while True:
            # k * interval instead of a running sum keeps the spacing exact.
            timestamp = step * self.interval
            if timestamp > self.duration_seconds:
                return
            yield timestamp
            step += 1

    def __len__(self) -> int:
        if self.mode == ExtractionMode.SINGLE_FRAME_SHARED_ARCHIVE:
            return 1
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return (
            f"TimestampSchedule(mode={self.mode.value}, duration={self.duration_seconds:.2f}, "
            f"interval={self.interval}, snapshot_at={self.snapshot_at})"
        )


def resolve_interval(interval: float) -> float:
    """Return *interval*, the default when it is non-positive or not finite, or
    the minimum when it is too small to name its frames apart."""
    if not math.isfinite(interval) or interval <= 0:
        logger.warning(
            "Invalid interval %r, falling back to %.1fs", interval, DEFAULT_INTERVAL_SECONDS
        )
        return DEFAULT_INTERVAL_SECONDS
    if interval < MIN_INTERVAL_SECONDS:
        logger.warning(
            "Interval %r below %.2fs, using %.2fs", interval, MIN_INTERVAL_SECONDS, MIN_INTERVAL_SECONDS
        )
        return MIN_INTERVAL_SECONDS
    return interval


def resolve_snapshot_time(duration_seconds: float, requested: float) -> float:
    """Requested snapshot time, or the video midpoint when it lies past the end."""
    if requested > duration_seconds:
        return duration_seconds / 2
    return requested


class TimestampScheduler:
    """Builds a :class:`TimestampSchedule` for a video duration and batch settings."""

    def schedule(self, duration_seconds: float, settings: ExtractionSettings) -> TimestampSchedule:
        return TimestampSchedule(duration_seconds, settings)
