"""SourceVideo entity representing one queued video file."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import PurePath


@dataclass
class SourceVideo:
    """A video file in the queue and the properties discovered after opening it."""

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    path: str = ""
    size_bytes: int = 0
    mime_type: str = ""
    width: int = 0
    height: int = 0
    fps: float = 0.0
    frame_count: int = 0
    duration_seconds: float = 0.0
    added_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def stem(self) -> str:
        """Name with its last extension stripped (``clip.v2.mp4`` -> ``clip.v2``).

        Names made only of dots map to ``untitled`` so they never form a path segment.
        """
        base = PurePath(self.name.replace("\\", "/")).name if self.name else ""
        if not base.strip("."):
            return "untitled"
        if "." in base.lstrip("."):
            return base[: base.rfind(".")]
        return base

    @property
    def size_mb(self) -> float:
        return round(self.size_bytes / 1024 / 1024, 1)

    @property
    def metadata_resolved(self) -> bool:
        return self.width > 0 and self.height > 0 and self.duration_seconds > 0

    @property
    def resolution_str(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def duration_formatted(self) -> str:
        minutes = int(self.duration_seconds // 60)
        seconds = int(self.duration_seconds % 60)
        return f"{minutes}:{seconds:02d}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "size_bytes": self.size_bytes,
            "size_mb": self.size_mb,
            "width": self.width,
            "height": self.height,
            "duration_seconds": self.duration_seconds,
        }
