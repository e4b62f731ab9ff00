"""Port for compressing a raster frame into image bytes."""
from __future__ import annotations
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    from backend.src.core.value_objects.extraction_settings import ImageFormat


@runtime_checkable
class FrameEncoderPort(Protocol):
    def encode(self, frame: np.ndarray, image_format: ImageFormat, quality: float) -> bytes: ...
