"""Track reconciliation: merge one batch of remote records into the local catalog.

Stages, in order:
1) drop intra-batch duplicates (first occurrence wins)
2) partition into new and already-tracked external ids
3) create bare placeholders for the new ids
4) build the favorite map and the changed-favorite subset
5) update every surviving record in input order
6) apply the changed-favorite subset in one pass

Running the same batch twice leaves the store unchanged the second time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mediasync.config.sync import SyncConfig
from mediasync.domain.genres import classify_genres
from mediasync.domain.model import Track

from .conversion import parse_iso8601, ticks_to_seconds
from .deduplicate import deduplicate_records
from .events import ReconciliationEvent, ReconciliationEventKind
from .progress import MonotonicProgress
from .resolve import resolve_track_links

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mediasync.domain.model import MediaSource
    from mediasync.domain.ports.persistence import TrackRepository

    from .contracts import (
        AlbumsByExternalId,
        ArtistsByExternalId,
        GenresByNormalizedName,
        IncomingRecord,
        TracksByExternalId,
    )
    from .events import ReconciliationEventSink
    from .progress import ProgressReporter


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    """Outcome of one reconcile call."""

    processed: int
    created: int
    duplicates_dropped: int
    favorite_changes: tuple[str, ...]


class TrackReconciler:
    """Apply remote track batches to the store through a ``TrackRepository``.

    ``existing_tracks`` passed to :meth:`reconcile` is owned by the caller but
    mutated here: placeholders created for new ids are inserted into it.
    """

    def __init__(
        self,
        tracks: TrackRepository,
        events: ReconciliationEventSink,
        config: SyncConfig | None = None,
    ) -> None:
        self._tracks = tracks
        self._events = events
        self._config = config or SyncConfig()

    def reconcile(
        self,
        batch: Iterable[IncomingRecord],
        *,
        albums: AlbumsByExternalId,
        artists: ArtistsByExternalId,
        genres: GenresByNormalizedName,
        existing_tracks: TracksByExternalId,
        owner: MediaSource,
        progress: ProgressReporter,
    ) -> ReconcileResult:
        config = self._config
        monitor = MonotonicProgress(progress)

        deduplicated = deduplicate_records(batch)
        for dropped in deduplicated.dropped:
            self._emit(
                ReconciliationEventKind.DUPLICATE_DROPPED,
                external_id=dropped.external_id,
                detail=f"name={dropped.name!r}",
            )
        records = deduplicated.records
        monitor.report(config.progress_start, config.stage_label)

        new_ids = [
            record.external_id for record in records if record.external_id not in existing_tracks
        ]
        self._emit(
            ReconciliationEventKind.BATCH_PARTITIONED,
            count=len(records),
            detail=f"new={len(new_ids)} existing={len(records) - len(new_ids)}",
        )

        for external_id in new_ids:
            track = Track(external_id=external_id, source=owner)
            self._tracks.add(track)
            existing_tracks[external_id] = track
        self._emit(ReconciliationEventKind.PLACEHOLDERS_CREATED, count=len(new_ids))

        favorite_by_id = {record.external_id: bool(record.is_favorite) for record in records}
        favorite_changes = tuple(
            external_id
            for external_id, is_favorite in favorite_by_id.items()
            if existing_tracks[external_id].is_favorite != is_favorite
        )
        self._emit(ReconciliationEventKind.FAVORITES_CHANGED, count=len(favorite_changes))

        total = len(records)
        band = config.progress_loop_end - config.progress_start
        for index, record in enumerate(records):
            self._apply_record(
                existing_tracks[record.external_id],
                record,
                is_favorite=favorite_by_id[record.external_id],
                albums=albums,
                artists=artists,
                genres=genres,
            )
            if index % config.progress_interval == 0 or index == total - 1:
                monitor.report(
                    config.progress_start + (index + 1) / total * band,
                    config.stage_label,
                )

        for external_id in favorite_changes:
            existing_tracks[external_id].is_favorite = favorite_by_id[external_id]
        monitor.report(config.progress_end, config.stage_label)

        self._emit(
            ReconciliationEventKind.BATCH_COMPLETED,
            count=total,
            detail=(
                f"created={len(new_ids)} duplicates={deduplicated.dropped_count} "
                f"favorite_changes={len(favorite_changes)}"
            ),
        )
        return ReconcileResult(
            processed=total,
            created=len(new_ids),
            duplicates_dropped=deduplicated.dropped_count,
            favorite_changes=favorite_changes,
        )

    def _apply_record(
        self,
        track: Track,
        record: IncomingRecord,
        *,
        is_favorite: bool,
        albums: AlbumsByExternalId,
        artists: ArtistsByExternalId,
        genres: GenresByNormalizedName,
    ) -> None:
        links = resolve_track_links(record, albums=albums, artists=artists, genres=genres)
        classification = classify_genres(record.genres)

        track.title = record.name
        track.duration_seconds = ticks_to_seconds(record.run_time_ticks)
        if track.duration_seconds == 0.0 and record.run_time_ticks:
            self._emit(
                ReconciliationEventKind.INVALID_DURATION,
                external_id=record.external_id,
                detail=f"ticks={record.run_time_ticks!r}",
            )
        track.track_number = record.track_number if record.track_number is not None else 0
        track.disc_number = record.disc_number if record.disc_number is not None else 0
        track.play_count = record.play_count if record.play_count is not None else 0
        track.is_favorite = is_favorite
        track.container = record.container

        if record.date_created:
            date_added = parse_iso8601(record.date_created)
            if date_added is None:
                self._emit(
                    ReconciliationEventKind.UNPARSABLE_DATE,
                    external_id=record.external_id,
                    detail=f"value={record.date_created!r}",
                )
            else:
                track.date_added = date_added

        track.raw_genres = list(classification.raw)
        track.normalized_genres = list(classification.normalized)
        track.umbrella_genres = list(classification.umbrella)

        track.album = links.album
        track.artist = links.artist
        track.replace_genres(links.genres)
        if record.album_id and links.album is None:
            self._emit(
                ReconciliationEventKind.UNRESOLVED_ALBUM,
                external_id=record.external_id,
                detail=f"album_id={record.album_id}",
            )

    def _emit(
        self,
        kind: ReconciliationEventKind,
        *,
        external_id: str | None = None,
        count: int | None = None,
        detail: str | None = None,
    ) -> None:
        self._events.emit(
            ReconciliationEvent(kind=kind, external_id=external_id, count=count, detail=detail)
        )
