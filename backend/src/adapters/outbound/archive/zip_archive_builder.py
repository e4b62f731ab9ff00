"""ZIP archive builder adapter.

Entries are buffered in memory and compressed into a single ZIP byte stream
on :meth:`ZipArchiveBuilder.finalize`.
"""
from __future__ import annotations

import io
import logging
import zipfile

from backend.src.core.exceptions import ArchiveError
from backend.src.core.value_objects.archive_entry import ArchiveEntry

logger = logging.getLogger(__name__)


class ZipArchiveBuilder:
    """Implements :class:`ArchiveBuilderPort` with :mod:`zipfile`.

    Every entry name is unique within the archive; adding an existing name
    raises :class:`ArchiveError` instead of overwriting it. The builder is
    single use: once finalized it accepts no further entries.
    """

    def __init__(self, compression_level: int = 6, label: str = "") -> None:
        self._compression_level = compression_level
        self._label = label
        self._entries: dict[str, ArchiveEntry] = {}
        self._finalized = False

    @property
    def entry_names(self) -> list[str]:
        return list(self._entries)

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def buffered_bytes(self) -> int:
        return sum(e.size_bytes for e in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def add_entry(self, name: str, data: bytes) -> None:
        if self._finalized:
            raise ArchiveError(f"Archive {self._label!r} is already finalized; cannot add {name!r}")
        if name in self._entries:
            raise ArchiveError(f"Duplicate archive entry: {name!r}")
        try:
            entry = ArchiveEntry(name=name, data=bytes(data))
        except ValueError as exc:
            raise ArchiveError(str(exc)) from exc
        self._entries[name] = entry
        logger.debug("Added %s (%d bytes) to archive %r", name, entry.size_bytes, self._label)

    def finalize(self) -> bytes:
        if self._finalized:
            raise ArchiveError(f"Archive {self._label!r} was already finalized")
        self._finalized = True

        buf = io.BytesIO()
        try:
            with zipfile.ZipFile(
                buf,
                mode="w",
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=self._compression_level,
            ) as zf:
                for entry in self._entries.values():
                    zf.writestr(entry.name, entry.data)
        except (OSError, ValueError, zipfile.LargeZipFile) as exc:
            raise ArchiveError(f"Failed to compress archive {self._label!r}: {exc}") from exc
        finally:
            self._entries.clear()

        data = buf.getvalue()
        logger.info("Archive %r finalized: %d bytes", self._label, len(data))
        return data

    def discard(self) -> None:
        """Drop all buffered entries without producing an archive."""
        self._entries.clear()
        self._finalized = True
