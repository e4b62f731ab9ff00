"""Port for delivering finalized archives to the outside world."""
from __future__ import annotations
from typing import Protocol, runtime_checkable


@runtime_checkable
class ArchiveSinkPort(Protocol):
    async def deliver(self, name: str, data: bytes) -> None: ...
