from backend.src.core.value_objects.archive_entry import ArchiveEntry
from backend.src.core.value_objects.extraction_settings import (
    ExtractionMode,
    ExtractionSettings,
    ImageFormat,
)
from backend.src.core.value_objects.frame_sample import FrameSample

__all__ = ["ArchiveEntry", "ExtractionMode", "ExtractionSettings", "ImageFormat", "FrameSample"]
