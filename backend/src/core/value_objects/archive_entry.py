"""ArchiveEntry value object."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ArchiveEntry:
    """A named byte buffer stored in an archive."""

    name: str
    data: bytes

    def __post_init__(self) -> None:
        if not self.name or self.name.startswith("/") or self.name.endswith("/"):
            raise ValueError(f"Invalid archive entry name: {self.name!r}")
        # Entries must extract inside the target directory.
        segments = self.name.replace("\\", "/").split("/")
        if any(seg in ("", ".", "..") for seg in segments):
            raise ValueError(f"Archive entry name escapes the archive: {self.name!r}")

    @property
    def size_bytes(self) -> int:
        return len(self.data)
