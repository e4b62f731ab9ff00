from backend.src.ports.outbound.archive_builder_port import ArchiveBuilderPort
from backend.src.ports.outbound.archive_sink_port import ArchiveSinkPort
from backend.src.ports.outbound.batch_repository_port import BatchRepositoryPort
from backend.src.ports.outbound.file_storage_port import FileStoragePort
from backend.src.ports.outbound.frame_capture_port import FrameCapturePort
from backend.src.ports.outbound.frame_encoder_port import FrameEncoderPort
from backend.src.ports.outbound.progress_reporter_port import ProgressReporterPort

__all__ = [
    "FrameCapturePort",
    "FrameEncoderPort",
    "ArchiveBuilderPort",
    "ArchiveSinkPort",
    "ProgressReporterPort",
    "FileStoragePort",
    "BatchRepositoryPort",
]
