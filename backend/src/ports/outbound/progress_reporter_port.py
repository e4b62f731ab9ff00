"""Port for observing batch progress."""
from __future__ import annotations
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ProgressReporterPort(Protocol):
    async def item_status(self, batch_id: str, index: int, status: str, message: Optional[str] = None) -> None: ...
    async def progress(self, batch_id: str, percent: int, message: str = "") -> None: ...
    async def batch_event(self, batch_id: str, event: str, message: str = "") -> None: ...
