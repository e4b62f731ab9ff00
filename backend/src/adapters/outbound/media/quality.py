"""Mapping of the 0..1 quality scale onto codec settings."""
from __future__ import annotations

import math
from typing import Optional


def jpeg_quality(quality: float, minimum: int = 1, maximum: int = 100) -> Optional[int]:
    """Clamp *quality* to [0, 1] and scale it to the codec range.

    Returns ``None`` when *quality* is not a finite number so the caller can
    fall back to the codec default.
    """
    try:
        value = float(quality)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    value = min(max(value, 0.0), 1.0)
    return max(minimum, min(maximum, int(round(value * 100))))
