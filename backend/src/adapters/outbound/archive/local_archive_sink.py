"""Archive sink that writes finalized archives through :class:`LocalFileStorage`."""
from __future__ import annotations

import logging

from backend.src.adapters.outbound.persistence.local_file_storage import LocalFileStorage
from backend.src.core.exceptions import ArchiveError, ArchiveNotFoundError

logger = logging.getLogger(__name__)


class LocalArchiveSink:
    """Implements :class:`ArchiveSinkPort` by writing ``<directory>/<name>`` under the storage root."""

    def __init__(self, storage: LocalFileStorage, directory: str = "archives") -> None:
        self._storage = storage
        self._directory = directory

    async def deliver(self, name: str, data: bytes) -> None:
        if self._storage.get_file_path(name, self._directory).exists():
            raise ArchiveError(f"Archive already delivered: {name}")
        path = await self._storage.save_file(data, name, self._directory)
        logger.info("Archive delivered: %s (%d bytes)", path, len(data))

    def list_archives(self) -> list[str]:
        return sorted(self._storage.list_files(self._directory))

    def read_archive(self, name: str) -> bytes:
        if name not in self.list_archives():
            raise ArchiveNotFoundError(name)
        return self._storage.get_file_path(name, self._directory).read_bytes()
