"""
Dependency container.
Wires together ports and adapters based on configuration.
"""
from __future__ import annotations

import logging
from functools import partial
from typing import Optional

from backend.src.infrastructure.config import Settings

logger = logging.getLogger(__name__)


class ApplicationContainer:
    """Simplified container that builds concrete instances from settings.

    Usage::

        container = ApplicationContainer(settings)
        service = container.queue_service()
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self._cache: dict[str, object] = {}

    def _get_or_create(self, key: str, factory):
        if key not in self._cache:
            self._cache[key] = factory(self.settings)
        return self._cache[key]

    # ── Lazy factory helpers ──────────────────────────────────────

    @staticmethod
    def _build_capturer(settings: Settings):
        from backend.src.adapters.outbound.media.opencv_capturer import OpenCVFrameCapturer
        return OpenCVFrameCapturer()

    @staticmethod
    def _build_encoder(settings: Settings):
        if settings.encoder.backend == "opencv":
            from backend.src.adapters.outbound.media.opencv_encoder import OpenCVFrameEncoder
            return OpenCVFrameEncoder()
        from backend.src.adapters.outbound.media.pil_encoder import PILFrameEncoder
        return PILFrameEncoder(
            png_compress_level=settings.encoder.png_compress_level,
            optimize=settings.encoder.jpeg_optimize,
        )

    @staticmethod
    def _build_archive_factory(settings: Settings):
        from backend.src.adapters.outbound.archive.zip_archive_builder import ZipArchiveBuilder
        return partial(ZipArchiveBuilder, settings.archive.compression_level)

    @staticmethod
    def _build_file_storage(settings: Settings):
        from backend.src.adapters.outbound.persistence.local_file_storage import LocalFileStorage
        return LocalFileStorage(base_dir=settings.storage.media_root)

    def _build_sink(self, settings: Settings):
        if settings.sink_backend == "local":
            from backend.src.adapters.outbound.archive.local_archive_sink import LocalArchiveSink
            return LocalArchiveSink(self.file_storage(), directory=settings.storage.archives_dir)
        from backend.src.adapters.outbound.archive.in_memory_archive_sink import InMemoryArchiveSink
        return InMemoryArchiveSink()

    @staticmethod
    def _build_reporter(settings: Settings):
        from backend.src.adapters.outbound.external.websocket_reporter import WebSocketProgressReporter
        return WebSocketProgressReporter(max_batches=settings.max_sessions)

    def _build_progress_reporter(self, settings: Settings):
        if not settings.logging.progress:
            return self.reporter()
        from backend.src.adapters.outbound.external.logging_reporter import LoggingProgressReporter
        from backend.src.adapters.outbound.external.multi_reporter import MultiProgressReporter
        return MultiProgressReporter([self.reporter(), LoggingProgressReporter()])

    @staticmethod
    def _build_batch_repository(settings: Settings):
        from backend.src.adapters.outbound.persistence.in_memory_batch_repo import InMemoryBatchRepository
        return InMemoryBatchRepository(max_sessions=settings.max_sessions)

    @staticmethod
    def _build_runner(settings: Settings):
        from backend.src.adapters.outbound.queue.in_process_runner import InProcessBatchRunner
        return InProcessBatchRunner(max_finished=settings.max_sessions)

    # ── Port accessors ─────────────────────────────────────────────

    def capturer(self):
        return self._get_or_create("capturer", self._build_capturer)

    def encoder(self):
        return self._get_or_create("encoder", self._build_encoder)

    def archive_factory(self):
        return self._get_or_create("archive_factory", self._build_archive_factory)

    def file_storage(self):
        return self._get_or_create("file_storage", self._build_file_storage)

    def sink(self):
        return self._get_or_create("sink", self._build_sink)

    def reporter(self):
        return self._get_or_create("reporter", self._build_reporter)

    def progress_reporter(self):
        return self._get_or_create("progress_reporter", self._build_progress_reporter)

    def batch_repository(self):
        return self._get_or_create("batch_repository", self._build_batch_repository)

    def runner(self):
        return self._get_or_create("runner", self._build_runner)

    # ── Application services ───────────────────────────────────────

    def orchestrator(self):
        def _build(settings: Settings):
            from backend.src.application.batch_orchestrator import BatchOrchestrator
            return BatchOrchestrator(
                capturer=self.capturer(),
                encoder=self.encoder(),
                archive_factory=self.archive_factory(),
                repository=self.batch_repository(),
                partial_archive_on_cancel=settings.archive.partial_on_cancel,
            )
        return self._get_or_create("orchestrator", _build)

    def queue_service(self):
        def _build(settings: Settings):
            from backend.src.application.queue_service import QueueService
            return QueueService(
                orchestrator=self.orchestrator(),
                file_storage=self.file_storage(),
                runner=self.runner(),
                sink=self.sink(),
                reporter=self.progress_reporter(),
                repository=self.batch_repository(),
                allowed_extensions=settings.web.allowed_extensions,
            )
        return self._get_or_create("queue_service", _build)
