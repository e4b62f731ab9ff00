"""Inbound port for batch frame extraction."""
from __future__ import annotations
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable
if TYPE_CHECKING:
    from backend.src.core.entities.batch_session import BatchSession
    from backend.src.core.entities.source_video import SourceVideo
    from backend.src.core.value_objects.extraction_settings import ExtractionSettings
    from backend.src.ports.outbound.archive_sink_port import ArchiveSinkPort
    from backend.src.ports.outbound.progress_reporter_port import ProgressReporterPort


@runtime_checkable
class ExtractFramesUseCase(Protocol):
    async def start_batch(
        self,
        files: list[SourceVideo],
        settings: ExtractionSettings,
        sink: ArchiveSinkPort,
        reporter: ProgressReporterPort,
    ) -> Optional[BatchSession]: ...
    def request_cancel(self) -> None: ...
