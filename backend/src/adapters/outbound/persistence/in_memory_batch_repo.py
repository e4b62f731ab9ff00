"""In-memory implementation of BatchRepositoryPort."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from backend.src.core.entities.batch_session import BatchSession

logger = logging.getLogger(__name__)


class InMemoryBatchRepository:
    """Keeps batch sessions of the current process addressable by id.

    Conforms to :class:`BatchRepositoryPort`. Nothing survives a restart.
    """

    def __init__(self, max_sessions: int = 50) -> None:
        self._store: dict[str, BatchSession] = {}
        self._max_sessions = max_sessions
        self._lock = asyncio.Lock()

    async def save(self, session: BatchSession) -> BatchSession:
        """Persist (or overwrite) a session, evicting the oldest finished ones past the cap."""
        async with self._lock:
            self._store[session.id] = session
            self._evict()
            logger.debug("Saved batch %s (%s)", session.id, session.state.value)
            return session

    async def get_by_id(self, batch_id: str) -> Optional[BatchSession]:
        async with self._lock:
            session = self._store.get(batch_id)
            if session is None:
                logger.debug("Batch %s not found", batch_id)
            return session

    async def list_all(self) -> list[BatchSession]:
        async with self._lock:
            return list(self._store.values())

    def _evict(self) -> None:
        overflow = len(self._store) - self._max_sessions
        if overflow <= 0:
            return
        finished = sorted(
            (s for s in self._store.values() if not s.is_running),
            key=lambda s: s.created_at,
        )
        for session in finished[:overflow]:
            del self._store[session.id]
            logger.debug("Evicted batch %s", session.id)
