"""Batch progress arithmetic."""
from __future__ import annotations


def batch_percentage(item_index: int, item_count: int, item_fraction: float = 0.0) -> int:
    """Overall percentage with *item_index* items finished and the current one *item_fraction* done."""
    if item_count <= 0:
        return 0
    fraction = min(max(item_fraction, 0.0), 1.0)
    pct = (item_index + fraction) / item_count * 100
    return int(round(min(max(pct, 0.0), 100.0)))


def frame_fraction(timestamp: float, duration_seconds: float) -> float:
    """Position of *timestamp* within the video, 0..1."""
    if duration_seconds <= 0:
        return 0.0
    return min(max(timestamp / duration_seconds, 0.0), 1.0)
