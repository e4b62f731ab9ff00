"""Port for accumulating entries into a compressed archive."""
from __future__ import annotations
from typing import Protocol, runtime_checkable


@runtime_checkable
class ArchiveBuilderPort(Protocol):
    @property
    def entry_names(self) -> list[str]: ...
    @property
    def finalized(self) -> bool: ...
    def add_entry(self, name: str, data: bytes) -> None: ...
    def finalize(self) -> bytes: ...
    def discard(self) -> None: ...
