"""Domain events emitted while a batch runs."""
from __future__ import annotations
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class BatchEvent:
    batch_id: str
    timestamp: datetime = field(default_factory=datetime.utcnow, kw_only=True)

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def to_payload(self) -> dict:
        payload = asdict(self)
        payload["timestamp"] = self.timestamp.isoformat()
        payload["type"] = self.event_type
        return payload


@dataclass(frozen=True)
class ItemStatusChanged(BatchEvent):
    index: int
    status: str
    message: Optional[str] = None


@dataclass(frozen=True)
class ProgressUpdated(BatchEvent):
    percent: int
    message: str = ""


@dataclass(frozen=True)
class BatchMessage(BatchEvent):
    event: str
    message: str = ""
