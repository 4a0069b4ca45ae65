"""Progress reporting for long-running sync passes.

The reconciler only ever talks to a ``ProgressReporter``; how reports reach a
consumer (inline, on a worker thread, or nowhere) is the caller's choice.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SyncProgress:
    fraction: float
    stage: str


type ProgressCallback = Callable[[SyncProgress], None]


@runtime_checkable
class ProgressReporter(Protocol):
    """Receives ``(fraction, stage)`` updates; must not block the caller for long."""

    def report(self, fraction: float, stage: str) -> None: ...


class NullProgressReporter:
    def report(self, fraction: float, stage: str) -> None:
        return None


class CallbackProgressReporter:
    """Deliver reports synchronously to ``callback`` on the calling thread."""

    def __init__(self, callback: ProgressCallback) -> None:
        self._callback = callback

    def report(self, fraction: float, stage: str) -> None:
        self._callback(SyncProgress(fraction=fraction, stage=stage))


class BackgroundProgressReporter:
    """Deliver reports on a single worker thread, preserving call order.

    ``report`` only enqueues. A consumer that raises is logged and skipped;
    the failure never reaches the sync pass.
    """

    def __init__(self, callback: ProgressCallback) -> None:
        self._callback = callback
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mediasync-progress")
        self._closed = False

    def report(self, fraction: float, stage: str) -> None:
        if self._closed:
            log.debug("Dropping progress report after close: %.3f %s", fraction, stage)
            return
        self._executor.submit(self._deliver, SyncProgress(fraction=fraction, stage=stage))

    def close(self) -> None:
        """Flush pending reports and stop the worker."""

        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=True)

    def __enter__(self) -> BackgroundProgressReporter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        self.close()
        return False

    def _deliver(self, progress: SyncProgress) -> None:
        try:
            self._callback(progress)
        except Exception:
            log.exception(
                "Progress consumer failed at %.3f (%s)", progress.fraction, progress.stage
            )


class MonotonicProgress:
    """Clamp fractions into ``[0, 1]`` and never let them go backwards."""

    def __init__(self, reporter: ProgressReporter) -> None:
        self._reporter = reporter
        self._last = 0.0

    @property
    def last(self) -> float:
        return self._last

    def report(self, fraction: float, stage: str) -> None:
        clamped = max(self._last, min(1.0, max(0.0, fraction)))
        self._last = clamped
        self._reporter.report(clamped, stage)
