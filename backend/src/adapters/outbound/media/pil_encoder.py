"""PIL frame encoder adapter.

Converts OpenCV BGR rasters to PNG or JPEG bytes with Pillow, implementing
:class:`FrameEncoderPort`.
"""
from __future__ import annotations

import io
import logging

import cv2
import numpy as np
from PIL import Image

from backend.src.adapters.outbound.media.quality import jpeg_quality
from backend.src.core.exceptions import EncodeError
from backend.src.core.value_objects.extraction_settings import ImageFormat

logger = logging.getLogger(__name__)

# Pillow's own JPEG default.
_DEFAULT_JPEG_QUALITY = 75


class PILFrameEncoder:
    """Satisfies :class:`~backend.src.ports.outbound.frame_encoder_port.FrameEncoderPort`."""

    def __init__(self, png_compress_level: int = 6, optimize: bool = False) -> None:
        self._png_compress_level = png_compress_level
        self._optimize = optimize

    def encode(self, frame: np.ndarray, image_format: ImageFormat, quality: float) -> bytes:
        try:
            img = Image.fromarray(self._to_rgb(frame))
        except (TypeError, ValueError, cv2.error) as exc:
            raise EncodeError(f"Unsupported frame layout {getattr(frame, 'shape', None)}: {exc}") from exc

        buf = io.BytesIO()
        try:
            if image_format == ImageFormat.PNG:
                img.save(buf, format="PNG", compress_level=self._png_compress_level)
            else:
                q = jpeg_quality(quality, maximum=95)
                if q is None:
                    logger.warning("Invalid JPEG quality %r, using codec default", quality)
                    q = _DEFAULT_JPEG_QUALITY
                img.save(buf, format="JPEG", quality=q, optimize=self._optimize)
        except (OSError, ValueError) as exc:
            raise EncodeError(f"{image_format.value.upper()} encoding failed: {exc}") from exc

        return buf.getvalue()

    @staticmethod
    def _to_rgb(frame: np.ndarray) -> np.ndarray:
        if frame.ndim == 2:
            return frame
        if frame.shape[2] == 4:
            return cv2.cvtColor(frame, cv2.COLOR_BGRA2RGB)
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
