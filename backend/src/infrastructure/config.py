"""
FrameArchive configuration using Pydantic Settings.
Every section can be overridden through environment variables or a .env file.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

from backend.src.core.value_objects.extraction_settings import (
    ExtractionMode,
    ExtractionSettings,
    ImageFormat,
)

# Load .env before any BaseSettings subclass reads env vars
load_dotenv()


class ExtractionDefaults(BaseSettings):
    """Defaults for the batch settings form."""

    mode: ExtractionMode = ExtractionMode.INTERVAL_MULTI_ARCHIVE
    time_parameter: float = 1.0
    image_format: ImageFormat = ImageFormat.JPEG
    quality: float = 0.9

    model_config = {"env_prefix": "EXTRACTION_"}

    def to_value(self) -> ExtractionSettings:
        return ExtractionSettings(
            mode=self.mode,
            time_parameter=self.time_parameter,
            image_format=self.image_format,
            quality=self.quality,
        )


class ArchiveSettings(BaseSettings):
    compression_level: int = Field(default=6, ge=0, le=9)
    partial_on_cancel: bool = False

    model_config = {"env_prefix": "ARCHIVE_"}


class EncoderSettings(BaseSettings):
    backend: str = "pil"  # "pil" or "opencv"
    png_compress_level: int = Field(default=6, ge=0, le=9)
    jpeg_optimize: bool = False

    model_config = {"env_prefix": "ENCODER_"}


class StorageSettings(BaseSettings):
    media_root: str = "./media"
    archives_dir: str = "archives"

    model_config = {"env_prefix": "STORAGE_"}


class WebSettings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 8000
    max_upload_size_mb: int = 4096
    allowed_extensions: list[str] = Field(
        default_factory=lambda: [".mp4", ".mkv", ".avi", ".mov", ".webm", ".m4v"]
    )

    model_config = {"env_prefix": "WEB_"}


class LoggingSettings(BaseSettings):
    level: str = "INFO"
    file: str = ""
    progress: bool = True  # also write batch progress to the log

    model_config = {"env_prefix": "LOG_"}


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    app_env: str = "development"
    sink_backend: str = "memory"  # "memory" or "local"
    max_sessions: int = 50

    extraction: ExtractionDefaults = Field(default_factory=ExtractionDefaults)
    archive: ArchiveSettings = Field(default_factory=ArchiveSettings)
    encoder: EncoderSettings = Field(default_factory=EncoderSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    web: WebSettings = Field(default_factory=WebSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    def validate_production(self) -> None:
        """Validate critical settings for production environment."""
        if self.app_env == "production" and self.sink_backend == "memory":
            raise RuntimeError(
                "FATAL: in-memory archive sink loses archives on restart. "
                "Set SINK_BACKEND=local in production."
            )


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
