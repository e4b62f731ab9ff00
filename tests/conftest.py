"""Shared test fixtures for all tests."""
from __future__ import annotations

import io
import zipfile
from unittest.mock import AsyncMock, MagicMock

import numpy as np
import pytest

from backend.src.adapters.outbound.archive.in_memory_archive_sink import InMemoryArchiveSink
from backend.src.core.entities.source_video import SourceVideo
from backend.src.core.exceptions import DecodeError, MetadataError
from backend.src.core.value_objects.extraction_settings import (
    ExtractionMode,
    ExtractionSettings,
    ImageFormat,
)


@pytest.fixture
def read_zip():
    """Return a helper mapping a ZIP byte stream to ``{entry name: bytes}``."""
    def _read(data: bytes) -> dict[str, bytes]:
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            return {name: zf.read(name) for name in zf.namelist()}
    return _read


# ── Video Fixtures ─────────────────────────────────────────────────────────

@pytest.fixture
def make_video():
    def _make(name: str, size_bytes: int = 1024) -> SourceVideo:
        return SourceVideo(name=name, path=f"/tmp/videos/{name}", size_bytes=size_bytes, mime_type="video/mp4")
    return _make


@pytest.fixture
def three_videos(make_video) -> list[SourceVideo]:
    return [make_video("a.mp4"), make_video("b.mp4"), make_video("c.mp4")]


# ── Settings Fixtures ──────────────────────────────────────────────────────

@pytest.fixture
def interval_settings() -> ExtractionSettings:
    return ExtractionSettings(
        mode=ExtractionMode.INTERVAL_MULTI_ARCHIVE,
        time_parameter=2.0,
        image_format=ImageFormat.JPEG,
        quality=0.8,
    )


@pytest.fixture
def single_settings() -> ExtractionSettings:
    return ExtractionSettings(
        mode=ExtractionMode.SINGLE_FRAME_SHARED_ARCHIVE,
        time_parameter=5.0,
        image_format=ImageFormat.JPEG,
        quality=0.8,
    )


# ── Mock Port Fixtures ─────────────────────────────────────────────────────

@pytest.fixture
def mock_capturer():
    """Capturer whose videos take their duration from ``mock.durations``.

    A duration of ``None`` makes ``open`` fail with MetadataError; timestamps
    listed in ``mock.bad_timestamps[name]`` make ``capture`` fail with DecodeError.
    """
    mock = AsyncMock()
    mock.durations = {}
    mock.bad_timestamps = {}
    mock.captured = []

    async def _open(video: SourceVideo) -> SourceVideo:
        duration = mock.durations.get(video.name, 10.0)
        if duration is None:
            raise MetadataError(f"Cannot open video file: {video.name}")
        video.width, video.height, video.fps = 64, 48, 25.0
        video.frame_count = int(duration * 25)
        video.duration_seconds = duration
        return video

    async def _capture(video: SourceVideo, timestamp: float) -> np.ndarray:
        if timestamp in mock.bad_timestamps.get(video.name, ()):
            raise DecodeError(f"Failed to read frame at timestamp {timestamp:.2f}s", timestamp)
        mock.captured.append((video.name, timestamp))
        return np.zeros((48, 64, 3), dtype=np.uint8)

    mock.open.side_effect = _open
    mock.capture.side_effect = _capture
    mock.release = MagicMock()
    return mock


@pytest.fixture
def mock_encoder():
    mock = MagicMock()
    mock.encode.side_effect = lambda frame, image_format, quality: f"{image_format.value}-bytes".encode()
    return mock


@pytest.fixture
def mock_reporter():
    return AsyncMock()


@pytest.fixture
def mock_batch_repository():
    mock = AsyncMock()
    mock.save.side_effect = lambda session: session
    mock.get_by_id.return_value = None
    mock.list_all.return_value = []
    return mock


@pytest.fixture
def memory_sink() -> InMemoryArchiveSink:
    return InMemoryArchiveSink()
