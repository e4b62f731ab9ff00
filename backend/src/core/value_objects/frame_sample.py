"""FrameSample value object: one encoded capture of a source video."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from backend.src.core.value_objects.extraction_settings import ImageFormat

if TYPE_CHECKING:
    from backend.src.core.entities.source_video import SourceVideo


@dataclass(frozen=True)
class FrameSample:
    video: SourceVideo
    timestamp: float
    data: bytes
    image_format: ImageFormat

    @property
    def size_bytes(self) -> int:
        return len(self.data)
