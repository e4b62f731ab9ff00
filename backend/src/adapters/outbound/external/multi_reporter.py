"""Progress reporter that forwards every call to several reporters.

Lets the WebSocket stream and the application log observe the same batch.
A failing reporter is logged and skipped; the others still receive the call.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


class MultiProgressReporter:
    """Implements :class:`ProgressReporterPort` by fanning out to *reporters*."""

    def __init__(self, reporters: list[Any]) -> None:
        self._reporters = list(reporters)
        logger.info(
            "MultiProgressReporter initialised: %s",
            [type(r).__name__ for r in self._reporters],
        )

    @property
    def reporters(self) -> list[Any]:
        return list(self._reporters)

    async def _each(self, method: str, *args: Any) -> None:
        for reporter in self._reporters:
            try:
                await getattr(reporter, method)(*args)
            except Exception as e:
                logger.warning("%s.%s failed: %s", type(reporter).__name__, method, e)

    async def item_status(
        self, batch_id: str, index: int, status: str, message: Optional[str] = None
    ) -> None:
        await self._each("item_status", batch_id, index, status, message)

    async def progress(self, batch_id: str, percent: int, message: str = "") -> None:
        await self._each("progress", batch_id, percent, message)

    async def batch_event(self, batch_id: str, event: str, message: str = "") -> None:
        await self._each("batch_event", batch_id, event, message)
