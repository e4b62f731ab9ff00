"""Port for keeping batch sessions addressable by id."""
from __future__ import annotations
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from backend.src.core.entities.batch_session import BatchSession


@runtime_checkable
class BatchRepositoryPort(Protocol):
    async def save(self, session: BatchSession) -> BatchSession: ...
    async def get_by_id(self, batch_id: str) -> Optional[BatchSession]: ...
    async def list_all(self) -> list[BatchSession]: ...
