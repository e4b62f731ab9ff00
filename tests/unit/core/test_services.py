"""Unit tests for domain services."""
from __future__ import annotations

import math
from datetime import datetime, timezone

import pytest

from backend.src.core.entities.source_video import SourceVideo
from backend.src.core.events.batch_events import BatchMessage, ItemStatusChanged, ProgressUpdated
from backend.src.core.services.archive_naming import (
    archive_stamp,
    format_timestamp_token,
    interval_entry_name,
    per_source_archive_name,
    shared_archive_name,
    shared_entry_name,
)
from backend.src.core.services.progress import batch_percentage, frame_fraction
from backend.src.core.services.timestamp_scheduler import (
    DEFAULT_INTERVAL_SECONDS,
    MIN_INTERVAL_SECONDS,
    TimestampScheduler,
    resolve_interval,
    resolve_snapshot_time,
)
from backend.src.core.value_objects.extraction_settings import (
    ExtractionMode,
    ExtractionSettings,
    ImageFormat,
)


def _interval(delta: float) -> ExtractionSettings:
    return ExtractionSettings(mode=ExtractionMode.INTERVAL_MULTI_ARCHIVE, time_parameter=delta)


def _single(at: float) -> ExtractionSettings:
    return ExtractionSettings(mode=ExtractionMode.SINGLE_FRAME_SHARED_ARCHIVE, time_parameter=at)


class TestTimestampScheduler:
    """Tests for TimestampScheduler."""

    @pytest.fixture
    def scheduler(self):
        return TimestampScheduler()

    def test_interval_includes_end_when_aligned(self, scheduler):
        assert list(scheduler.schedule(10.0, _interval(2.0))) == [0.0, 2.0, 4.0, 6.0, 8.0, 10.0]

    def test_interval_stops_before_end(self, scheduler):
        assert list(scheduler.schedule(5.0, _interval(2.0))) == [0.0, 2.0, 4.0]

    def test_interval_longer_than_video(self, scheduler):
        assert list(scheduler.schedule(0.5, _interval(2.0))) == [0.0]

    def test_zero_duration(self, scheduler):
        assert list(scheduler.schedule(0.0, _interval(1.0))) == [0.0]

    def test_no_accumulated_drift(self, scheduler):
        times = list(scheduler.schedule(100.0, _interval(0.1)))
        assert len(times) == 1001
        assert times[-1] == pytest.approx(100.0)
        assert times[700] == 700 * 0.1

    @pytest.mark.parametrize("delta", [0.0, -3.0, math.inf, math.nan])
    def test_invalid_interval_falls_back(self, scheduler, delta):
        times = list(scheduler.schedule(3.0, _interval(delta)))
        assert times == [0.0, 1.0, 2.0, 3.0]

    def test_tiny_interval_keeps_timestamp_tokens_distinct(self, scheduler):
        times = list(scheduler.schedule(0.05, _interval(0.004)))
        tokens = [format_timestamp_token(t) for t in times]
        assert tokens == ["0_00", "0_01", "0_02", "0_03", "0_04", "0_05"]

    def test_schedule_is_restartable(self, scheduler):
        schedule = scheduler.schedule(4.0, _interval(2.0))
        assert list(schedule) == list(schedule) == [0.0, 2.0, 4.0]
        assert len(schedule) == 3

    def test_single_frame_within_duration(self, scheduler):
        schedule = scheduler.schedule(60.0, _single(5.0))
        assert list(schedule) == [5.0]
        assert len(schedule) == 1

    def test_single_frame_past_end_uses_midpoint(self, scheduler):
        assert list(scheduler.schedule(3.0, _single(5.0))) == [1.5]

    def test_single_frame_at_exact_end(self, scheduler):
        assert list(scheduler.schedule(5.0, _single(5.0))) == [5.0]

    def test_resolve_helpers(self):
        assert resolve_interval(0.5) == 0.5
        assert resolve_interval(-1) == DEFAULT_INTERVAL_SECONDS
        assert resolve_interval(0.004) == MIN_INTERVAL_SECONDS
        assert resolve_interval(MIN_INTERVAL_SECONDS) == MIN_INTERVAL_SECONDS
        assert resolve_snapshot_time(10.0, 4.0) == 4.0
        assert resolve_snapshot_time(10.0, 12.0) == 5.0


class TestArchiveNaming:
    """Tests for archive and entry naming."""

    NOW = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "timestamp, token",
        [(0.0, "0_00"), (3.5, "3_50"), (12.0, "12_00"), (0.1 * 3, "0_30")],
    )
    def test_timestamp_token(self, timestamp, token):
        assert format_timestamp_token(timestamp) == token

    def test_interval_entry_name(self):
        video = SourceVideo(name="holiday.mp4")
        assert interval_entry_name(video, 3.5, ImageFormat.JPEG) == "holiday/frame_3_50.jpg"
        assert interval_entry_name(video, 0.0, ImageFormat.PNG) == "holiday/frame_0_00.png"

    def test_shared_entry_names_disambiguate_equal_stems(self):
        names = {
            shared_entry_name(SourceVideo(name="clip.mp4"), i, ImageFormat.PNG) for i in range(3)
        }
        assert names == {"clip_0.png", "clip_1.png", "clip_2.png"}

    def test_archive_stamp(self):
        assert archive_stamp(self.NOW) == "2024-05-01T12-30-00"

    def test_archive_names(self):
        video = SourceVideo(name="holiday.mp4")
        assert per_source_archive_name(video, 3, self.NOW) == "holiday.mp4_3_frames_2024-05-01T12-30-00.zip"
        assert per_source_archive_name(video, 0, self.NOW) != per_source_archive_name(video, 1, self.NOW)
        assert shared_archive_name(self.NOW) == "Batch_Thumbnails_2024-05-01T12-30-00.zip"


class TestProgress:
    """Tests for progress arithmetic."""

    def test_batch_percentage(self):
        assert batch_percentage(0, 4) == 0
        assert batch_percentage(1, 4) == 25
        assert batch_percentage(1, 4, 0.5) == 38
        assert batch_percentage(3, 4, 1.0) == 100

    def test_batch_percentage_clamps(self):
        assert batch_percentage(0, 0) == 0
        assert batch_percentage(5, 4, 2.0) == 100
        assert batch_percentage(0, 4, -1.0) == 0

    def test_frame_fraction(self):
        assert frame_fraction(5.0, 10.0) == 0.5
        assert frame_fraction(12.0, 10.0) == 1.0
        assert frame_fraction(1.0, 0.0) == 0.0


class TestBatchEvents:
    """Tests for event payloads."""

    def test_item_status_payload(self):
        payload = ItemStatusChanged("b1", 2, "error", "boom").to_payload()
        assert payload["type"] == "ItemStatusChanged"
        assert payload["batch_id"] == "b1"
        assert payload["index"] == 2
        assert payload["status"] == "error"
        assert payload["message"] == "boom"
        assert isinstance(payload["timestamp"], str)

    def test_progress_and_message_payloads(self):
        assert ProgressUpdated("b1", 40, "half").to_payload()["percent"] == 40
        payload = BatchMessage("b1", "completed", "All operations completed.").to_payload()
        assert payload["event"] == "completed"
        assert payload["type"] == "BatchMessage"
