"""OpenCV-based frame capture adapter.

Implements :class:`FrameCapturePort`. One ``cv2.VideoCapture`` handle and
one raster buffer at the video's native resolution are kept per open video
and reused for every timestamp until :meth:`release` is called.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

from backend.src.core.entities.source_video import SourceVideo
from backend.src.core.exceptions import DecodeError, MetadataError

logger = logging.getLogger(__name__)


@dataclass
class _DecodeHandle:
    capture: cv2.VideoCapture
    buffer: np.ndarray
    fps: float
    frame_count: int


class OpenCVFrameCapturer:
    """Seeks and decodes single frames with OpenCV.

    Satisfies :class:`~backend.src.ports.outbound.frame_capture_port.FrameCapturePort`.
    """

    def __init__(self) -> None:
        self._handles: dict[str, _DecodeHandle] = {}

    # -- Port interface --------------------------------------------------------

    async def open(self, video: SourceVideo) -> SourceVideo:
        """Open *video* and fill in its width, height, fps and duration."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._open_sync, video)

    async def capture(self, video: SourceVideo, timestamp: float) -> np.ndarray:
        """Decode the frame at (or just before) *timestamp* seconds.

        The returned array is the per-video buffer and stays valid until the
        next capture of the same video.
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._capture_sync, video, timestamp)

    def release(self, video: SourceVideo) -> None:
        handle = self._handles.pop(video.id, None)
        if handle is None:
            return
        handle.capture.release()
        logger.debug("Released decode handle for %s", video.name)

    def release_all(self) -> None:
        for handle in self._handles.values():
            handle.capture.release()
        self._handles.clear()

    @property
    def open_count(self) -> int:
        return len(self._handles)

    # -- Private sync helpers --------------------------------------------------

    def _open_sync(self, video: SourceVideo) -> SourceVideo:
        self.release(video)

        cap = cv2.VideoCapture(video.path)
        if not cap.isOpened():
            raise MetadataError(f"Cannot open video file: {video.name}")

        fps: float = cap.get(cv2.CAP_PROP_FPS)
        frame_count = int(cap.get(cv2.CAP_PROP_FRAME_COUNT))
        width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))

        if fps <= 0 or frame_count <= 0:
            cap.release()
            raise MetadataError(f"Video has no decodable duration: {video.name}")
        if width <= 0 or height <= 0:
            cap.release()
            raise MetadataError(f"Video has no decodable dimensions: {video.name}")

        video.fps = fps
        video.frame_count = frame_count
        video.width = width
        video.height = height
        video.duration_seconds = frame_count / fps

        self._handles[video.id] = _DecodeHandle(
            capture=cap,
            buffer=np.empty((height, width, 3), dtype=np.uint8),
            fps=fps,
            frame_count=frame_count,
        )
        logger.info(
            "Opened %s - %s, FPS: %.2f, Duration: %.2fs",
            video.name, video.resolution_str, fps, video.duration_seconds,
        )
        return video

    def _capture_sync(self, video: SourceVideo, timestamp: float) -> np.ndarray:
        handle: Optional[_DecodeHandle] = self._handles.get(video.id)
        if handle is None:
            raise DecodeError(f"Video is not open: {video.name}", timestamp)

        target_frame = min(max(int(timestamp * handle.fps), 0), handle.frame_count - 1)
        try:
            handle.capture.set(cv2.CAP_PROP_POS_FRAMES, target_frame)
            ret, frame = handle.capture.read(handle.buffer)
        except cv2.error as exc:
            raise DecodeError(f"Decoder error at {timestamp:.2f}s in {video.name}: {exc}", timestamp) from exc

        if not ret or frame is None:
            raise DecodeError(
                f"Failed to read frame at timestamp {timestamp:.2f}s "
                f"(frame {target_frame}) in {video.name}",
                timestamp,
            )
        if frame is not handle.buffer:
            # Decoder produced a different layout (e.g. grayscale); keep it for the next read.
            handle.buffer = frame

        logger.debug("Captured %s at %.2fs (frame %d)", video.name, timestamp, target_frame)
        return frame
