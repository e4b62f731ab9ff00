"""Progress reporter that writes batch events to the application log."""

from __future__ import annotations

import logging
from typing import Optional

logger = logging.getLogger(__name__)

TERMINAL_EVENTS = frozenset({"completed", "cancelled"})


class LoggingProgressReporter:
    """Implements :class:`ProgressReporterPort` on top of :mod:`logging`."""

    def __init__(self, progress_step: int = 10) -> None:
        self._progress_step = max(1, progress_step)
        self._last_logged: dict[str, int] = {}

    async def item_status(
        self, batch_id: str, index: int, status: str, message: Optional[str] = None
    ) -> None:
        if message:
            logger.info("[%s] item %d -> %s: %s", batch_id[:8], index, status, message)
        else:
            logger.info("[%s] item %d -> %s", batch_id[:8], index, status)

    async def progress(self, batch_id: str, percent: int, message: str = "") -> None:
        last = self._last_logged.get(batch_id, -self._progress_step)
        if percent >= 100 or percent - last >= self._progress_step:
            self._last_logged[batch_id] = percent
            logger.info("[%s] %3d%% %s", batch_id[:8], percent, message)

    async def batch_event(self, batch_id: str, event: str, message: str = "") -> None:
        level = logging.WARNING if event.endswith("error") else logging.INFO
        logger.log(level, "[%s] %s: %s", batch_id[:8], event, message)
        if event in TERMINAL_EVENTS:
            self._last_logged.pop(batch_id, None)
