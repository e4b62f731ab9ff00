"""Background runner for batch jobs.

Runs each job as an ``asyncio`` task in the current event loop so that no
external broker is required. A job's outcome is logged; it never propagates
into the request that started it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine, Optional

logger = logging.getLogger(__name__)


class InProcessBatchRunner:
    """Schedules batch coroutines with :func:`asyncio.create_task`, keyed by batch id."""

    def __init__(self, max_finished: int = 50) -> None:
        self._tasks: dict[str, asyncio.Task[Any]] = {}
        self._max_finished = max_finished

    def submit(self, batch_id: str, job: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        """Schedule *job* in the running event loop."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            job.close()
            raise RuntimeError(
                "InProcessBatchRunner.submit requires a running asyncio event loop"
            )

        task = loop.create_task(job, name=f"batch-{batch_id}")
        task.add_done_callback(lambda t: self._on_done(batch_id, t))
        self._tasks[batch_id] = task
        logger.info("Submitted batch %s", batch_id)
        return task

    def status(self, batch_id: str) -> str:
        task = self._tasks.get(batch_id)
        if task is None:
            return "UNKNOWN"
        if not task.done():
            return "STARTED"
        if task.cancelled():
            return "REVOKED"
        return "FAILURE" if task.exception() is not None else "SUCCESS"

    async def wait(self, batch_id: str) -> Optional[Any]:
        """Await a submitted batch and return its result."""
        task = self._tasks.get(batch_id)
        if task is None:
            return None
        return await task

    def _on_done(self, batch_id: str, task: asyncio.Task[Any]) -> None:
        if task.cancelled():
            logger.info("Batch task %s was cancelled", batch_id)
        else:
            exc = task.exception()
            if exc is not None:
                logger.error("Batch task %s failed", batch_id, exc_info=exc)
        self._prune()

    def _prune(self) -> None:
        """Forget the oldest finished tasks beyond *max_finished*."""
        finished = [bid for bid, t in self._tasks.items() if t.done()]
        for bid in finished[: max(0, len(finished) - self._max_finished)]:
            del self._tasks[bid]
