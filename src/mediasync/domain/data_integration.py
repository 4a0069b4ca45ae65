"""Application services for mirroring a remote media library."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from mediasync.config.sync import SyncConfig
from mediasync.domain.genres import (
    UNKNOWN_GENRE,
    UNKNOWN_NORMALIZED,
    normalize_genre,
    resolve_umbrella,
    split_genres,
)
from mediasync.domain.model import Album, Artist, Genre, MediaSource
from mediasync.domain.reconciliation import (
    LoggingEventSink,
    MonotonicProgress,
    NullProgressReporter,
    ReconciliationEvent,
    ReconciliationEventKind,
    TrackReconciler,
    find_artist_by_name,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterable

    from mediasync.domain.ports.persistence import (
        AlbumRepository,
        ArtistRepository,
        GenreRepository,
        MediaSourceRepository,
    )
    from mediasync.domain.ports.unit_of_work import CatalogUnitOfWork
    from mediasync.domain.reconciliation import (
        AlbumsByExternalId,
        ArtistsByExternalId,
        GenresByNormalizedName,
        IncomingAlbum,
        IncomingArtist,
        IncomingRecord,
        LibrarySnapshot,
        ProgressReporter,
        ReconcileResult,
        ReconciliationEventSink,
    )

log = logging.getLogger(__name__)

LOADING_STAGE = "Loading existing data..."
ARTISTS_STAGE = "Processing artists..."
ALBUMS_STAGE = "Processing albums..."
GENRES_STAGE = "Processing genres..."
SAVING_STAGE = "Saving..."
COMPLETE_STAGE = "Complete"


@dataclass(frozen=True, slots=True)
class ImportLibraryResult:
    """Outcome of a full library import."""

    source_name: str
    artists_upserted: int
    albums_upserted: int
    genres_upserted: int
    tracks: ReconcileResult


def import_library(
    snapshot: LibrarySnapshot,
    *,
    source_name: str,
    unit_of_work_factory: Callable[[], CatalogUnitOfWork],
    progress: ProgressReporter | None = None,
    events: ReconciliationEventSink | None = None,
    config: SyncConfig | None = None,
) -> ImportLibraryResult:
    """Mirror ``snapshot`` into the store for ``source_name`` and commit once.

    Artists, albums and genres are upserted first so the track pass can link
    against them. Nothing is deleted. Any store failure propagates and the unit
    of work rolls back.
    """

    reporter = progress or NullProgressReporter()
    sink = events or LoggingEventSink()
    sync_config = config or SyncConfig()
    monitor = MonotonicProgress(reporter)

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        monitor.report(0.50, LOADING_STAGE)

        source = _get_or_create_source(repositories.sources, source_name)
        artists: ArtistsByExternalId = {
            artist.external_id: artist for artist in repositories.artists.for_source(source)
        }
        albums: AlbumsByExternalId = {
            album.external_id: album for album in repositories.albums.for_source(source)
        }
        genres: GenresByNormalizedName = {
            genre.normalized_name: genre for genre in repositories.genres.for_source(source)
        }
        existing_tracks = {
            track.external_id: track for track in repositories.tracks.for_source(source)
        }

        artists_upserted = _upsert_artists(
            snapshot.artists,
            source=source,
            artists=artists,
            repository=repositories.artists,
            monitor=monitor,
            config=sync_config,
        )
        albums_upserted = _upsert_albums(
            snapshot.albums,
            source=source,
            albums=albums,
            artists=artists,
            repository=repositories.albums,
            monitor=monitor,
            config=sync_config,
        )
        genres_upserted = _upsert_genres(
            snapshot.tracks,
            source=source,
            genres=genres,
            repository=repositories.genres,
        )
        monitor.report(0.72, GENRES_STAGE)

        reconciler = TrackReconciler(repositories.tracks, sink, sync_config)
        track_result = reconciler.reconcile(
            snapshot.tracks,
            albums=albums,
            artists=artists,
            genres=genres,
            existing_tracks=existing_tracks,
            owner=source,
            progress=monitor,
        )

        source.last_full_sync = datetime.now(UTC)
        monitor.report(0.98, SAVING_STAGE)
        uow.commit()

    monitor.report(1.0, COMPLETE_STAGE)
    log.info(
        "Imported library for %s: %d artists, %d albums, %d genres, %d tracks (%d new)",
        source_name,
        artists_upserted,
        albums_upserted,
        genres_upserted,
        track_result.processed,
        track_result.created,
    )
    return ImportLibraryResult(
        source_name=source_name,
        artists_upserted=artists_upserted,
        albums_upserted=albums_upserted,
        genres_upserted=genres_upserted,
        tracks=track_result,
    )


def sync_favorites(
    liked_ids: Collection[str],
    *,
    source_name: str,
    unit_of_work_factory: Callable[[], CatalogUnitOfWork],
    events: ReconciliationEventSink | None = None,
) -> int:
    """Set ``is_favorite`` on every stored track of the source from ``liked_ids``.

    Only differing tracks are written; the unit of work commits only when at
    least one track changed. Returns the number of changed tracks.
    """

    sink = events or LoggingEventSink()
    liked = frozenset(liked_ids)
    changed = 0

    with unit_of_work_factory() as uow:
        source = uow.repositories.sources.get_by_name(source_name)
        if source is None:
            log.warning("No media source named %r; nothing to update", source_name)
            return 0

        for track in uow.repositories.tracks.for_source(source):
            is_favorite = track.external_id in liked
            if track.is_favorite != is_favorite:
                track.is_favorite = is_favorite
                changed += 1

        sink.emit(
            ReconciliationEvent(
                kind=ReconciliationEventKind.FAVORITES_CHANGED,
                count=changed,
                detail=f"source={source_name}",
            )
        )
        if changed:
            uow.commit()

    return changed


def _get_or_create_source(repository: MediaSourceRepository, name: str) -> MediaSource:
    source = repository.get_by_name(name)
    if source is None:
        source = MediaSource(name=name)
        repository.add(source)
        log.info("Registered new media source %r", name)
    return source


def _upsert_artists(
    incoming: Iterable[IncomingArtist],
    *,
    source: MediaSource,
    artists: ArtistsByExternalId,
    repository: ArtistRepository,
    monitor: MonotonicProgress,
    config: SyncConfig,
) -> int:
    items = list(incoming)
    total = len(items)
    for index, item in enumerate(items):
        artist = artists.get(item.external_id)
        if artist is None:
            artist = Artist(external_id=item.external_id, name=item.name, source=source)
            repository.add(artist)
            artists[item.external_id] = artist
        artist.name = item.name
        artist.sort_name = item.name
        _report_phase(
            monitor, index, total, start=0.52, end=0.60, stage=ARTISTS_STAGE, config=config
        )
    return total


def _upsert_albums(
    incoming: Iterable[IncomingAlbum],
    *,
    source: MediaSource,
    albums: AlbumsByExternalId,
    artists: ArtistsByExternalId,
    repository: AlbumRepository,
    monitor: MonotonicProgress,
    config: SyncConfig,
) -> int:
    items = list(incoming)
    total = len(items)
    for index, item in enumerate(items):
        album = albums.get(item.external_id)
        if album is None:
            album = Album(external_id=item.external_id, title=item.name, source=source)
            repository.add(album)
            albums[item.external_id] = album
        album.title = item.name
        album.sort_title = item.name
        album.year = item.production_year
        album.artist = _match_album_artist(item.artist_name, artists)
        _report_phase(
            monitor, index, total, start=0.60, end=0.70, stage=ALBUMS_STAGE, config=config
        )
    return total


def _match_album_artist(name: str | None, artists: ArtistsByExternalId) -> Artist | None:
    if not name:
        return None
    exact = find_artist_by_name(name, artists)
    if exact is not None:
        return exact
    folded = name.casefold()
    for artist in artists.values():
        if artist.name.casefold() == folded:
            return artist
    return None


def _upsert_genres(
    tracks: Iterable[IncomingRecord],
    *,
    source: MediaSource,
    genres: GenresByNormalizedName,
    repository: GenreRepository,
) -> int:
    seen: set[str] = set()
    for record in tracks:
        for label in split_genres(record.genres):
            key = normalize_genre(label)
            if not key or key in seen:
                continue
            seen.add(key)
            umbrella = resolve_umbrella(label) or UNKNOWN_GENRE
            genre = genres.get(key)
            if genre is None:
                genre = Genre(
                    normalized_name=key, raw_name=label, umbrella_name=umbrella, source=source
                )
                repository.add(genre)
                genres[key] = genre
            else:
                genre.umbrella_name = umbrella

    if UNKNOWN_NORMALIZED not in genres:
        unknown = Genre(
            normalized_name=UNKNOWN_NORMALIZED,
            raw_name=UNKNOWN_GENRE,
            umbrella_name=UNKNOWN_GENRE,
            source=source,
        )
        repository.add(unknown)
        genres[UNKNOWN_NORMALIZED] = unknown
    return len(seen)


def _report_phase(
    monitor: MonotonicProgress,
    index: int,
    total: int,
    *,
    start: float,
    end: float,
    stage: str,
    config: SyncConfig,
) -> None:
    if index % config.progress_interval == 0 or index == total - 1:
        monitor.report(start + (index + 1) / total * (end - start), stage)
