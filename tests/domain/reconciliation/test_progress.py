from __future__ import annotations

import logging
import threading

import pytest

from mediasync.domain.model import MediaSource, Track
from mediasync.domain.reconciliation import (
    BackgroundProgressReporter,
    CallbackProgressReporter,
    CollectingEventSink,
    MonotonicProgress,
    NullProgressReporter,
    ProgressReporter,
    SyncProgress,
    TrackReconciler,
)
from tests.helpers.catalog import FakeCatalogRepository, RecordingProgressReporter, make_record


def test_callback_reporter_delivers_inline() -> None:
    received: list[SyncProgress] = []
    reporter = CallbackProgressReporter(received.append)

    reporter.report(0.5, "Halfway")

    assert received == [SyncProgress(fraction=0.5, stage="Halfway")]


def test_background_reporter_preserves_order_and_flushes_on_close() -> None:
    received: list[float] = []
    threads: set[str] = set()

    def consume(progress: SyncProgress) -> None:
        threads.add(threading.current_thread().name)
        received.append(progress.fraction)

    with BackgroundProgressReporter(consume) as reporter:
        for step in range(50):
            reporter.report(step / 50, "Working")

    assert received == [step / 50 for step in range(50)]
    assert threading.current_thread().name not in threads


def test_blocked_consumer_does_not_stall_reconcile() -> None:
    release = threading.Event()
    first_delivery = threading.Event()
    received: list[float] = []

    def consume(progress: SyncProgress) -> None:
        first_delivery.set()
        release.wait(timeout=10)
        received.append(progress.fraction)

    tracks = FakeCatalogRepository[Track]()
    reporter = BackgroundProgressReporter(consume)
    try:
        result = TrackReconciler(tracks, CollectingEventSink()).reconcile(
            [make_record(f"track-{index}") for index in range(20)],
            albums={},
            artists={},
            genres={},
            existing_tracks={},
            owner=MediaSource(name="home"),
            progress=reporter,
        )

        assert result.processed == 20
        assert first_delivery.wait(timeout=5)
        assert not release.is_set()
        assert received == []
    finally:
        release.set()
        reporter.close()

    assert received == sorted(received)
    assert received[-1] == 0.95


def test_background_reporter_logs_consumer_failures(caplog: pytest.LogCaptureFixture) -> None:
    received: list[float] = []

    def consume(progress: SyncProgress) -> None:
        if progress.fraction == 0.5:
            raise RuntimeError("ui went away")
        received.append(progress.fraction)

    reporter = BackgroundProgressReporter(consume)
    with caplog.at_level(logging.ERROR):
        reporter.report(0.25, "Working")
        reporter.report(0.5, "Working")
        reporter.report(0.75, "Working")
        reporter.close()

    assert received == [0.25, 0.75]
    assert "Progress consumer failed" in caplog.text


def test_background_reporter_ignores_reports_after_close() -> None:
    received: list[float] = []
    reporter = BackgroundProgressReporter(lambda progress: received.append(progress.fraction))
    reporter.close()

    reporter.report(0.9, "Late")
    reporter.close()

    assert received == []


def test_monotonic_progress_clamps_and_never_decreases() -> None:
    sink = RecordingProgressReporter()
    monitor = MonotonicProgress(sink)

    for fraction in (0.2, 0.1, 1.4, 0.95, -1.0):
        monitor.report(fraction, "Stage")

    assert sink.fractions == [0.2, 0.2, 1.0, 1.0, 1.0]
    assert monitor.last == 1.0


def test_reporters_satisfy_protocol() -> None:
    assert isinstance(NullProgressReporter(), ProgressReporter)
    assert isinstance(CallbackProgressReporter(lambda _progress: None), ProgressReporter)
    NullProgressReporter().report(0.3, "ignored")
