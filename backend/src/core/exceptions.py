"""Custom exception hierarchy for FrameArchive."""
from __future__ import annotations


class FrameArchiveError(Exception):
    """Base exception for all FrameArchive errors."""


class MetadataError(FrameArchiveError):
    """Raised when a video cannot be opened or has no decodable duration."""


class DecodeError(FrameArchiveError):
    """Raised when seeking or grabbing a frame fails."""

    def __init__(self, message: str, timestamp: float | None = None) -> None:
        self.timestamp = timestamp
        super().__init__(message)


class EncodeError(FrameArchiveError):
    """Raised when the image codec rejects a frame."""


class ArchiveError(FrameArchiveError):
    """Raised when an archive entry cannot be stored or the archive cannot be finalized."""


class QueueStateError(FrameArchiveError):
    """Raised on an illegal queue item status transition."""


class BatchAlreadyRunningError(FrameArchiveError):
    """Raised when the queue is modified or a batch is started while one is running."""


class UploadValidationError(FrameArchiveError):
    """Raised when an uploaded file fails validation."""


class ArchiveNotFoundError(FrameArchiveError):
    """Raised when a delivered archive cannot be found."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Archive not found: {name}")
