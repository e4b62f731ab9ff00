"""In-memory archive sink, used by the HTTP download endpoint and tests."""
from __future__ import annotations

import asyncio
import logging

from backend.src.core.exceptions import ArchiveError, ArchiveNotFoundError

logger = logging.getLogger(__name__)


class InMemoryArchiveSink:
    """Implements :class:`ArchiveSinkPort` by keeping archives in a dict."""

    def __init__(self) -> None:
        self._archives: dict[str, bytes] = {}
        self._lock = asyncio.Lock()

    async def deliver(self, name: str, data: bytes) -> None:
        async with self._lock:
            if name in self._archives:
                raise ArchiveError(f"Archive already delivered: {name}")
            self._archives[name] = data
        logger.info("Archive delivered: %s (%d bytes)", name, len(data))

    def list_archives(self) -> list[str]:
        return sorted(self._archives)

    def read_archive(self, name: str) -> bytes:
        data = self._archives.get(name)
        if data is None:
            raise ArchiveNotFoundError(name)
        return data
