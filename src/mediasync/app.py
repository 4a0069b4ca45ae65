"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from mediasync.adapters.jellyfin import parse_snapshot
from mediasync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    is_started,
    startup,
)
from mediasync.config import get_sync_config
from mediasync.domain.data_integration import ImportLibraryResult, import_library, sync_favorites
from mediasync.domain.ports.unit_of_work import CatalogUnitOfWork
from mediasync.domain.reconciliation import (
    BackgroundProgressReporter,
    LoggingEventSink,
    SyncProgress,
)

if TYPE_CHECKING:
    from pathlib import Path

UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]
ProgressCallback = Callable[[SyncProgress], None]


log = getLogger(__name__)


def import_library_snapshot(
    snapshot_path: Path,
    *,
    source_name: str,
    progress_interval: int | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    progress_callback: ProgressCallback | None = None,
) -> ImportLibraryResult:
    """Import a JSON library snapshot for ``source_name`` using the configured adapters."""

    config = get_sync_config()
    if progress_interval is not None:
        config = replace(config, progress_interval=progress_interval)

    snapshot = parse_snapshot(snapshot_path.read_bytes())
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    log.info(
        "Starting library import for %s: artists=%d, albums=%d, tracks=%d",
        source_name,
        len(snapshot.artists),
        len(snapshot.albums),
        len(snapshot.tracks),
    )

    with BackgroundProgressReporter(progress_callback or log_progress) as reporter:
        result = import_library(
            snapshot,
            source_name=source_name,
            unit_of_work_factory=effective_uow,
            progress=reporter,
            events=LoggingEventSink(),
            config=config,
        )

    log.info(
        f"Finished library import: created={result.tracks.created}, "
        f"processed={result.tracks.processed}, duplicates={result.tracks.duplicates_dropped}, "
        f"favorite_changes={len(result.tracks.favorite_changes)}"
    )
    return result


def sync_favorite_ids(
    ids_path: Path,
    *,
    source_name: str,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    """Apply the liked-track id list in ``ids_path`` (one id per line) to ``source_name``."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    liked_ids = read_id_list(ids_path.read_text(encoding="utf-8"))
    log.info("Starting favorites sync for %s: %d liked ids", source_name, len(liked_ids))

    changed = sync_favorites(
        liked_ids,
        source_name=source_name,
        unit_of_work_factory=effective_uow,
        events=LoggingEventSink(),
    )

    log.info("Finished favorites sync: changed=%d", changed)
    return changed


def read_id_list(text: str) -> set[str]:
    """Parse one id per line; blank lines and ``#`` comments are ignored."""

    ids: set[str] = set()
    for line in text.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            ids.add(stripped)
    return ids


def log_progress(progress: SyncProgress) -> None:
    log.info("%3.0f%% %s", progress.fraction * 100, progress.stage)


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyCatalogUnitOfWork
