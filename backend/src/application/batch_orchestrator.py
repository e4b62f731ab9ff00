"""
Batch frame-extraction use case.
Drives the queue of source videos one at a time through
scheduler -> capturer -> encoder -> archive builder -> sink.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from backend.src.core.entities.batch_session import BatchSession
from backend.src.core.entities.queue_item import QueueItem, QueueItemStatus
from backend.src.core.entities.source_video import SourceVideo
from backend.src.core.exceptions import ArchiveError, BatchAlreadyRunningError
from backend.src.core.services.archive_naming import (
    interval_entry_name,
    per_source_archive_name,
    shared_archive_name,
    shared_entry_name,
)
from backend.src.core.services.progress import batch_percentage, frame_fraction
from backend.src.core.services.timestamp_scheduler import TimestampScheduler
from backend.src.core.value_objects.extraction_settings import ExtractionSettings
from backend.src.core.value_objects.frame_sample import FrameSample
from backend.src.ports.outbound.archive_builder_port import ArchiveBuilderPort
from backend.src.ports.outbound.archive_sink_port import ArchiveSinkPort
from backend.src.ports.outbound.progress_reporter_port import ProgressReporterPort

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Cancelled"


def _default_archive_factory(label: str = "") -> ArchiveBuilderPort:
    from backend.src.adapters.outbound.archive.zip_archive_builder import ZipArchiveBuilder
    return ZipArchiveBuilder(label=label)


class BatchOrchestrator:
    """Runs one extraction batch at a time.

    Processing is strictly sequential across files and frames. Cancellation
    is cooperative: :meth:`request_cancel` only sets a flag, which is checked
    before each file and before each frame capture.
    """

    def __init__(
        self,
        capturer,          # FrameCapturePort
        encoder,           # FrameEncoderPort
        archive_factory: Optional[Callable[..., ArchiveBuilderPort]] = None,
        scheduler: Optional[TimestampScheduler] = None,
        repository=None,   # BatchRepositoryPort
        partial_archive_on_cancel: bool = False,
    ):
        self._capturer = capturer
        self._encoder = encoder
        self._archive_factory = archive_factory or _default_archive_factory
        self._scheduler = scheduler or TimestampScheduler()
        self._repository = repository
        self._partial_archive_on_cancel = partial_archive_on_cancel
        self._session: Optional[BatchSession] = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def current_session(self) -> Optional[BatchSession]:
        return self._session

    # -- Inbound port ----------------------------------------------------------

    async def start_batch(
        self,
        files: list[SourceVideo],
        settings: ExtractionSettings,
        sink: ArchiveSinkPort,
        reporter: ProgressReporterPort,
    ) -> Optional[BatchSession]:
        """Run a batch to completion. Ignored (returns ``None``) while another batch runs."""
        try:
            session = self.begin(files, settings)
        except BatchAlreadyRunningError:
            logger.warning("Batch start ignored: a batch is already running")
            return None
        return await self.execute(session, sink, reporter)

    def request_cancel(self) -> None:
        """Ask the running batch to stop at its next checkpoint. Idempotent."""
        session = self._session
        if not self._running or session is None:
            logger.debug("Cancel requested with no running batch")
            return
        if not session.cancel_requested:
            logger.info("Stop requested for batch %s", session.id)
        session.request_cancel()

    # -- Two-step start, used when the caller needs the batch id up front -------

    def begin(self, files: list[SourceVideo], settings: ExtractionSettings) -> BatchSession:
        """Claim the orchestrator and move a new session to RUNNING."""
        if self._running:
            raise BatchAlreadyRunningError("A batch is already running")
        session = BatchSession.from_videos(list(files), settings)
        session.start()
        self._session = session
        self._running = True
        return session

    def abort(self, session: BatchSession) -> None:
        """Release a session claimed by :meth:`begin` that will never be executed."""
        if session is not self._session or not self._running:
            return
        session.request_cancel()
        session.finish()
        self._running = False
        logger.warning("Batch %s aborted before it ran", session.id)

    async def execute(
        self,
        session: BatchSession,
        sink: ArchiveSinkPort,
        reporter: ProgressReporterPort,
    ) -> BatchSession:
        if session is not self._session or not session.is_running:
            raise ValueError(f"Batch {session.id} was not started by this orchestrator")

        settings = session.settings
        shared: Optional[ArchiveBuilderPort] = None
        try:
            await self._save(session)
            if settings.is_single_frame:
                shared = self._archive_factory(label="shared")
                await self._event(reporter, session, "started", "Mode: Single Frame. Initializing shared archive...")
            else:
                await self._event(reporter, session, "started", "Mode: Interval. Each video will produce its own archive.")

            for item in session.items:
                if session.cancel_requested:
                    break
                await self._process_item(session, item, shared, sink, reporter)

            if shared is not None:
                await self._close_shared_archive(session, shared, sink, reporter)
        finally:
            for item in session.items:
                self._capturer.release(item.video)
            session.finish()
            self._running = False
            await self._save(session)

        await self._event(
            reporter, session, session.state.value,
            "All operations completed." if not session.cancel_requested else "Batch cancelled.",
        )
        logger.info(
            "Batch %s %s: %d done, %d error, %d pending",
            session.id, session.state.value,
            session.count(QueueItemStatus.DONE),
            session.count(QueueItemStatus.ERROR),
            session.count(QueueItemStatus.PENDING),
        )
        return session

    # -- Per-item pipeline -----------------------------------------------------

    async def _process_item(
        self,
        session: BatchSession,
        item: QueueItem,
        shared: Optional[ArchiveBuilderPort],
        sink: ArchiveSinkPort,
        reporter: ProgressReporterPort,
    ) -> None:
        settings = session.settings
        total = len(session.items)

        item.start_processing()
        await self._item_status(reporter, session, item)
        await self._progress(
            reporter, session, batch_percentage(item.index, total),
            f"Processing [{item.index + 1}/{total}]: {item.video.name}",
        )

        local: Optional[ArchiveBuilderPort] = None
        try:
            video = await self._capturer.open(item.video)
            schedule = self._scheduler.schedule(video.duration_seconds, settings)
            builder = shared
            if builder is None:
                local = self._archive_factory(label=video.name)
                builder = local

            interrupted = False
            for timestamp in schedule:
                if session.cancel_requested:
                    interrupted = True
                    break
                sample = await self._capture_sample(video, timestamp, settings)
                if settings.is_single_frame:
                    name = shared_entry_name(video, item.index, sample.image_format)
                else:
                    name = interval_entry_name(video, timestamp, sample.image_format)
                builder.add_entry(name, sample.data)
                item.frames_captured += 1

                if not settings.is_single_frame:
                    await self._progress(
                        reporter, session,
                        batch_percentage(item.index, total, frame_fraction(timestamp, video.duration_seconds)),
                        f"{video.name}: frame at {timestamp:.2f}s",
                    )

            if interrupted and not (local is not None and self._partial_archive_on_cancel):
                if local is not None:
                    local.discard()
                item.fail(CANCELLED_MESSAGE)
                await self._item_status(reporter, session, item)
                logger.info("Abandoned %s after %d frames", video.name, item.frames_captured)
                return

            if local is not None:
                await self._deliver(session, local, per_source_archive_name(video, item.index), sink)
                await self._event(reporter, session, "archive_delivered", f"{video.name}: archive ready")

            item.complete()
            await self._item_status(reporter, session, item)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error("Error on %s: %s", item.video.name, message)
            if local is not None and not local.finalized:
                local.discard()
            item.fail(message)
            await self._item_status(reporter, session, item)
            await self._event(reporter, session, "item_error", f"Error on {item.video.name}: {message}")
        finally:
            self._capturer.release(item.video)

    async def _capture_sample(
        self, video: SourceVideo, timestamp: float, settings: ExtractionSettings
    ) -> FrameSample:
        frame = await self._capturer.capture(video, timestamp)
        loop = asyncio.get_running_loop()
        data = await loop.run_in_executor(
            None, self._encoder.encode, frame, settings.image_format, settings.quality,
        )
        return FrameSample(video=video, timestamp=timestamp, data=data, image_format=settings.image_format)

    # -- Archives --------------------------------------------------------------

    async def _close_shared_archive(
        self,
        session: BatchSession,
        shared: ArchiveBuilderPort,
        sink: ArchiveSinkPort,
        reporter: ProgressReporterPort,
    ) -> None:
        if session.cancel_requested:
            shared.discard()
            await self._event(reporter, session, "archive_discarded", "Shared archive discarded after stop.")
            return
        if not session.items:
            return

        if not shared.entry_names:
            logger.warning("Shared archive for batch %s has no entries", session.id)
        await self._progress(reporter, session, 100, "Compressing shared archive...")
        try:
            await self._deliver(session, shared, shared_archive_name(), sink)
        except Exception as e:
            session.error = f"Error generating archive: {e}"
            logger.error("Shared archive failed for batch %s: %s", session.id, e)
            await self._event(reporter, session, "archive_error", session.error)
            return
        await self._event(reporter, session, "archive_delivered", "Shared archive delivered successfully.")

    async def _deliver(
        self,
        session: BatchSession,
        builder: ArchiveBuilderPort,
        name: str,
        sink: ArchiveSinkPort,
    ) -> None:
        loop = asyncio.get_running_loop()
        data = await loop.run_in_executor(None, builder.finalize)
        try:
            await sink.deliver(name, data)
        except Exception as e:
            raise ArchiveError(f"Archive delivery failed for {name}: {e}") from e
        session.delivered_archives.append(name)

    # -- Reporting (never halts the batch) -------------------------------------

    async def _save(self, session: BatchSession) -> None:
        if self._repository is None:
            return
        try:
            await self._repository.save(session)
        except Exception as e:
            logger.warning("Saving batch %s failed: %s", session.id, e)

    async def _item_status(self, reporter: ProgressReporterPort, session: BatchSession, item: QueueItem) -> None:
        try:
            await reporter.item_status(session.id, item.index, item.status.value, item.error_message)
        except Exception as e:
            logger.warning("Status report failed for %s item %d: %s", session.id, item.index, e)

    async def _progress(self, reporter: ProgressReporterPort, session: BatchSession, percent: int, message: str) -> None:
        session.progress = percent
        try:
            await reporter.progress(session.id, percent, message)
        except Exception as e:
            logger.warning("Progress report failed for %s: %s", session.id, e)

    async def _event(self, reporter: ProgressReporterPort, session: BatchSession, event: str, message: str) -> None:
        try:
            await reporter.batch_event(session.id, event, message)
        except Exception as e:
            logger.warning("Event report failed for %s (%s): %s", session.id, event, e)
