"""Port for seeking and decoding frames from a video."""
from __future__ import annotations
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    from backend.src.core.entities.source_video import SourceVideo


@runtime_checkable
class FrameCapturePort(Protocol):
    async def open(self, video: SourceVideo) -> SourceVideo: ...
    async def capture(self, video: SourceVideo, timestamp: float) -> np.ndarray: ...
    def release(self, video: SourceVideo) -> None: ...
