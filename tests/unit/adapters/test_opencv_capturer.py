"""Unit tests for OpenCVFrameCapturer against a generated clip."""
from __future__ import annotations

import cv2
import numpy as np
import pytest

from backend.src.adapters.outbound.media.opencv_capturer import OpenCVFrameCapturer
from backend.src.core.entities.source_video import SourceVideo
from backend.src.core.exceptions import DecodeError, MetadataError

FPS = 10.0
FRAME_COUNT = 30
WIDTH, HEIGHT = 64, 48


@pytest.fixture
def sample_clip(tmp_path) -> SourceVideo:
    """Three-second MJPG clip whose frame brightness encodes the frame index."""
    path = tmp_path / "sample.avi"
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), FPS, (WIDTH, HEIGHT))
    if not writer.isOpened():
        pytest.skip("OpenCV build cannot write MJPG")
    for i in range(FRAME_COUNT):
        writer.write(np.full((HEIGHT, WIDTH, 3), i * 8, dtype=np.uint8))
    writer.release()
    return SourceVideo(name="sample.avi", path=str(path), size_bytes=path.stat().st_size)


@pytest.fixture
def capturer():
    c = OpenCVFrameCapturer()
    yield c
    c.release_all()


class TestOpenCVFrameCapturer:
    """Tests for OpenCVFrameCapturer."""

    @pytest.mark.asyncio
    async def test_open_resolves_metadata(self, capturer, sample_clip):
        video = await capturer.open(sample_clip)
        assert video is sample_clip
        assert (video.width, video.height) == (WIDTH, HEIGHT)
        assert video.fps == pytest.approx(FPS)
        assert video.duration_seconds == pytest.approx(FRAME_COUNT / FPS)
        assert video.metadata_resolved
        assert capturer.open_count == 1

    @pytest.mark.asyncio
    async def test_capture_returns_native_resolution(self, capturer, sample_clip):
        await capturer.open(sample_clip)
        frame = await capturer.capture(sample_clip, 0.0)
        assert frame.shape == (HEIGHT, WIDTH, 3)
        assert frame.dtype == np.uint8

    @pytest.mark.asyncio
    async def test_capture_seeks_to_timestamp(self, capturer, sample_clip):
        await capturer.open(sample_clip)
        early = float((await capturer.capture(sample_clip, 0.0)).mean())
        late = float((await capturer.capture(sample_clip, 2.0)).mean())
        # Frame 20 was written with brightness 160; allow for JPEG drift.
        assert early < 20
        assert late == pytest.approx(160, abs=20)

    @pytest.mark.asyncio
    async def test_capture_past_end_clamps_to_last_frame(self, capturer, sample_clip):
        await capturer.open(sample_clip)
        frame = await capturer.capture(sample_clip, 3.0)
        assert frame.shape == (HEIGHT, WIDTH, 3)

    @pytest.mark.asyncio
    async def test_missing_file_raises_metadata_error(self, capturer, tmp_path):
        video = SourceVideo(name="missing.mp4", path=str(tmp_path / "missing.mp4"))
        with pytest.raises(MetadataError):
            await capturer.open(video)
        assert capturer.open_count == 0

    @pytest.mark.asyncio
    async def test_garbage_file_raises_metadata_error(self, capturer, tmp_path):
        path = tmp_path / "junk.mp4"
        path.write_bytes(b"not a video at all" * 100)
        with pytest.raises(MetadataError):
            await capturer.open(SourceVideo(name="junk.mp4", path=str(path)))

    @pytest.mark.asyncio
    async def test_capture_without_open_raises_decode_error(self, capturer, sample_clip):
        with pytest.raises(DecodeError) as exc_info:
            await capturer.capture(sample_clip, 1.0)
        assert exc_info.value.timestamp == 1.0

    @pytest.mark.asyncio
    async def test_release_is_idempotent(self, capturer, sample_clip):
        await capturer.open(sample_clip)
        capturer.release(sample_clip)
        capturer.release(sample_clip)
        assert capturer.open_count == 0
        with pytest.raises(DecodeError):
            await capturer.capture(sample_clip, 0.0)
