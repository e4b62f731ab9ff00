"""Unit tests for the PIL and OpenCV frame encoders."""
from __future__ import annotations

import io
import math

import numpy as np
import pytest
from PIL import Image

from backend.src.adapters.outbound.media.opencv_encoder import OpenCVFrameEncoder
from backend.src.adapters.outbound.media.pil_encoder import PILFrameEncoder
from backend.src.adapters.outbound.media.quality import jpeg_quality
from backend.src.core.exceptions import EncodeError
from backend.src.core.value_objects.extraction_settings import ImageFormat


@pytest.fixture
def bgr_frame() -> np.ndarray:
    """48x64 frame, pure blue in BGR order with some noise for JPEG sizing."""
    rng = np.random.default_rng(0)
    frame = rng.integers(0, 256, size=(48, 64, 3), dtype=np.uint8)
    frame[:8, :8] = (255, 0, 0)
    return frame


class TestJpegQuality:
    """Tests for the 0..1 -> codec quality mapping."""

    @pytest.mark.parametrize(
        "quality, expected",
        [(0.0, 1), (0.5, 50), (0.92, 92), (1.0, 100), (-3.0, 1), (7.0, 100)],
    )
    def test_clamps_and_scales(self, quality, expected):
        assert jpeg_quality(quality) == expected

    def test_custom_maximum(self):
        assert jpeg_quality(1.0, maximum=95) == 95

    @pytest.mark.parametrize("quality", [math.nan, math.inf, -math.inf, None, "high"])
    def test_non_numeric_returns_none(self, quality):
        assert jpeg_quality(quality) is None


@pytest.mark.parametrize("encoder", [PILFrameEncoder(), OpenCVFrameEncoder()], ids=["pil", "opencv"])
class TestFrameEncoders:
    """Behaviour shared by both encoder backends."""

    def test_png_is_lossless_and_rgb(self, encoder, bgr_frame):
        data = encoder.encode(bgr_frame, ImageFormat.PNG, 0.1)

        img = Image.open(io.BytesIO(data))
        assert img.format == "PNG"
        assert img.size == (64, 48)
        decoded = np.asarray(img.convert("RGB"))
        assert np.array_equal(decoded, bgr_frame[:, :, ::-1])
        assert tuple(decoded[0, 0]) == (0, 0, 255)

    def test_jpeg_output(self, encoder, bgr_frame):
        data = encoder.encode(bgr_frame, ImageFormat.JPEG, 0.8)
        img = Image.open(io.BytesIO(data))
        assert img.format == "JPEG"
        assert img.size == (64, 48)

    def test_jpeg_quality_affects_size(self, encoder, bgr_frame):
        low = encoder.encode(bgr_frame, ImageFormat.JPEG, 0.1)
        high = encoder.encode(bgr_frame, ImageFormat.JPEG, 1.0)
        assert len(low) < len(high)

    def test_png_ignores_quality(self, encoder, bgr_frame):
        assert encoder.encode(bgr_frame, ImageFormat.PNG, 0.1) == encoder.encode(bgr_frame, ImageFormat.PNG, 1.0)

    def test_nan_quality_uses_default(self, encoder, bgr_frame):
        data = encoder.encode(bgr_frame, ImageFormat.JPEG, math.nan)
        assert Image.open(io.BytesIO(data)).format == "JPEG"

    def test_empty_frame_raises(self, encoder):
        with pytest.raises(EncodeError):
            encoder.encode(np.zeros((0, 0, 3), dtype=np.uint8), ImageFormat.PNG, 0.9)
