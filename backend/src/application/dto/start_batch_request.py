"""DTO for batch start requests."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from backend.src.core.services.timestamp_scheduler import MIN_INTERVAL_SECONDS
from backend.src.core.value_objects.extraction_settings import (
    ExtractionMode,
    ExtractionSettings,
    ImageFormat,
)


class StartBatchRequest(BaseModel):
    """Settings form of a batch start. Missing fields fall back to configured defaults."""

    mode: Optional[ExtractionMode] = None
    time_parameter: Optional[float] = Field(default=None, description="Interval or snapshot time in seconds")
    image_format: Optional[str] = Field(default=None, description="png, jpeg or an image/* MIME type")
    quality: Optional[float] = None

    def to_settings(self, defaults: ExtractionSettings) -> ExtractionSettings:
        settings = ExtractionSettings(
            mode=self.mode or defaults.mode,
            time_parameter=defaults.time_parameter if self.time_parameter is None else self.time_parameter,
            image_format=ImageFormat.parse(self.image_format) if self.image_format else defaults.image_format,
            quality=defaults.quality if self.quality is None else self.quality,
        )
        if not settings.is_single_frame and 0 < settings.time_parameter < MIN_INTERVAL_SECONDS:
            raise ValueError(f"Interval must be at least {MIN_INTERVAL_SECONDS}s")
        return settings
