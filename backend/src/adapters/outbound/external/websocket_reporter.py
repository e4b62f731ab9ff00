"""WebSocket progress reporter implementing ProgressReporterPort.

Uses a connection-manager pattern to broadcast batch events to every
WebSocket client subscribed to that batch. Clients subscribed to ``*``
receive the events of every batch.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from typing import Any, Optional

from fastapi import WebSocket

from backend.src.core.events.batch_events import (
    BatchEvent,
    BatchMessage,
    ItemStatusChanged,
    ProgressUpdated,
)

logger = logging.getLogger(__name__)

ALL_BATCHES = "*"


class WebSocketProgressReporter:
    """Implements :class:`ProgressReporterPort` by pushing JSON messages over
    WebSocket connections.

    The last *history_size* events of each batch are kept so that a client
    connecting mid-run can catch up. Only the *max_batches* most recent
    batches keep a history.
    """

    def __init__(self, history_size: int = 200, max_batches: int = 50) -> None:
        # batch_id -> set of active WebSocket connections
        self._connections: dict[str, set[WebSocket]] = {}
        self._history: dict[str, deque[dict[str, Any]]] = {}
        self._history_size = history_size
        self._max_batches = max_batches

    # -- connection management -------------------------------------------------

    async def connect(self, batch_id: str, websocket: WebSocket) -> None:
        """Accept a new WebSocket, register it under *batch_id* and replay history."""
        await websocket.accept()
        self._connections.setdefault(batch_id, set()).add(websocket)
        logger.info(
            "WebSocket connected for batch %s (total=%d)",
            batch_id,
            len(self._connections[batch_id]),
        )
        for payload in list(self._history.get(batch_id, ())):
            await websocket.send_text(json.dumps(payload))

    async def disconnect(self, batch_id: str, websocket: WebSocket) -> None:
        """Remove a WebSocket from the connection pool."""
        conns = self._connections.get(batch_id)
        if conns:
            conns.discard(websocket)
            if not conns:
                del self._connections[batch_id]
        logger.info("WebSocket disconnected for batch %s", batch_id)

    def history(self, batch_id: str) -> list[dict[str, Any]]:
        return list(self._history.get(batch_id, ()))

    # -- internal broadcast ----------------------------------------------------

    async def _publish(self, event: BatchEvent) -> None:
        payload = event.to_payload()
        history = self._history.get(event.batch_id)
        if history is None:
            history = self._history[event.batch_id] = deque(maxlen=self._history_size)
            # Oldest batches are forgotten first.
            while len(self._history) > self._max_batches:
                del self._history[next(iter(self._history))]
        history.append(payload)
        await self._broadcast(event.batch_id, payload)
        await self._broadcast(ALL_BATCHES, payload)

    async def _broadcast(self, key: str, payload: dict[str, Any]) -> None:
        """Send *payload* as JSON to every connection registered under *key*."""
        conns = self._connections.get(key)
        if not conns:
            return

        message = json.dumps(payload)
        stale: list[WebSocket] = []

        for ws in conns:
            try:
                await ws.send_text(message)
            except Exception:
                logger.warning(
                    "Failed to send to WebSocket for %s; marking stale", key
                )
                stale.append(ws)

        for ws in stale:
            conns.discard(ws)
        if not conns:
            del self._connections[key]

    # -- ProgressReporterPort implementation -----------------------------------

    async def item_status(
        self, batch_id: str, index: int, status: str, message: Optional[str] = None
    ) -> None:
        await self._publish(ItemStatusChanged(batch_id, index, status, message))

    async def progress(self, batch_id: str, percent: int, message: str = "") -> None:
        await self._publish(ProgressUpdated(batch_id, percent, message))

    async def batch_event(self, batch_id: str, event: str, message: str = "") -> None:
        await self._publish(BatchMessage(batch_id, event, message))
