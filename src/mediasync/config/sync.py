"""Synchronization defaults for catalog reconciliation."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_positive_int

DEFAULT_PROGRESS_INTERVAL = 500
DEFAULT_STAGE_LABEL = "Processing library..."


@dataclass(frozen=True, slots=True)
class SyncConfig:
    """Progress cadence and the fraction band the track pass reports into.

    The track pass is one phase of a larger import, so it reports inside
    ``[progress_start, progress_end]`` rather than ``[0, 1]``.
    """

    progress_interval: int = DEFAULT_PROGRESS_INTERVAL
    progress_start: float = 0.75
    progress_loop_end: float = 0.93
    progress_end: float = 0.95
    stage_label: str = DEFAULT_STAGE_LABEL

    def __post_init__(self) -> None:
        if self.progress_interval <= 0:
            raise ValueError("progress_interval must be positive")
        if not 0.0 <= self.progress_start <= self.progress_loop_end <= self.progress_end <= 1.0:
            raise ValueError("progress band must satisfy 0 <= start <= loop_end <= end <= 1")


def get_sync_config() -> SyncConfig:
    interval = optional_positive_int("MEDIASYNC_PROGRESS_INTERVAL")
    if interval is None:
        return SyncConfig()
    return SyncConfig(progress_interval=interval)
