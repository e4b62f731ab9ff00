"""OpenCV frame encoder adapter using ``cv2.imencode``."""
from __future__ import annotations

import logging

import cv2
import numpy as np

from backend.src.adapters.outbound.media.quality import jpeg_quality
from backend.src.core.exceptions import EncodeError
from backend.src.core.value_objects.extraction_settings import ImageFormat

logger = logging.getLogger(__name__)

_DEFAULT_JPEG_QUALITY = 95


class OpenCVFrameEncoder:
    """Satisfies :class:`~backend.src.ports.outbound.frame_encoder_port.FrameEncoderPort`."""

    def __init__(self, png_compression: int = 3) -> None:
        self._png_compression = png_compression

    def encode(self, frame: np.ndarray, image_format: ImageFormat, quality: float) -> bytes:
        if image_format == ImageFormat.PNG:
            ext = ".png"
            params = [cv2.IMWRITE_PNG_COMPRESSION, self._png_compression]
        else:
            ext = ".jpg"
            q = jpeg_quality(quality)
            if q is None:
                logger.warning("Invalid JPEG quality %r, using codec default", quality)
                q = _DEFAULT_JPEG_QUALITY
            params = [cv2.IMWRITE_JPEG_QUALITY, q]

        try:
            ok, encoded = cv2.imencode(ext, frame, params)
        except cv2.error as exc:
            raise EncodeError(f"{image_format.value.upper()} encoding failed: {exc}") from exc
        if not ok:
            raise EncodeError(f"{image_format.value.upper()} encoding failed for frame {frame.shape}")
        return encoded.tobytes()
