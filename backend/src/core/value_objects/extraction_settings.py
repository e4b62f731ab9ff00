"""Extraction settings value object captured once at batch start."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ExtractionMode(str, Enum):
    INTERVAL_MULTI_ARCHIVE = "interval"
    SINGLE_FRAME_SHARED_ARCHIVE = "single"


class ImageFormat(str, Enum):
    PNG = "png"
    JPEG = "jpeg"

    @property
    def extension(self) -> str:
        return "png" if self is ImageFormat.PNG else "jpg"

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"

    @classmethod
    def parse(cls, value: str | ImageFormat) -> ImageFormat:
        """Accept ``png``/``jpeg``/``jpg`` or a MIME type like ``image/png``."""
        if isinstance(value, ImageFormat):
            return value
        normalized = value.strip().lower().removeprefix("image/")
        if normalized == "jpg":
            normalized = "jpeg"
        return cls(normalized)


@dataclass(frozen=True)
class ExtractionSettings:
    """Immutable batch settings.

    ``time_parameter`` is the sampling interval in interval mode and the
    snapshot timestamp in single-frame mode. ``quality`` only applies to JPEG.
    """

    mode: ExtractionMode = ExtractionMode.INTERVAL_MULTI_ARCHIVE
    time_parameter: float = 1.0
    image_format: ImageFormat = ImageFormat.JPEG
    quality: float = 0.9

    def __post_init__(self) -> None:
        if not isinstance(self.mode, ExtractionMode):
            object.__setattr__(self, "mode", ExtractionMode(self.mode))
        if not isinstance(self.image_format, ImageFormat):
            object.__setattr__(self, "image_format", ImageFormat.parse(self.image_format))

    @property
    def is_single_frame(self) -> bool:
        return self.mode == ExtractionMode.SINGLE_FRAME_SHARED_ARCHIVE

    @property
    def extension(self) -> str:
        return self.image_format.extension

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "time_parameter": self.time_parameter,
            "image_format": self.image_format.value,
            "quality": self.quality,
        }
