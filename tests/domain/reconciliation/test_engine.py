from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

import pytest

from mediasync.config import SyncConfig
from mediasync.domain.model import Album, Artist, Genre, MediaSource, Track
from mediasync.domain.reconciliation import (
    CollectingEventSink,
    IncomingRecord,
    ReconcileResult,
    ReconciliationEventKind,
    TrackReconciler,
)
from tests.helpers.catalog import (
    FakeCatalogRepository,
    RecordingProgressReporter,
    make_genre,
    make_record,
)

STAGE = "Processing library..."


@dataclass(slots=True)
class Harness:
    source: MediaSource
    tracks: FakeCatalogRepository[Track]
    events: CollectingEventSink
    progress: RecordingProgressReporter
    existing: dict[str, Track]
    albums: dict[str, Album]
    artists: dict[str, Artist]
    genres: dict[str, Genre]
    config: SyncConfig

    def reconcile(self, batch: list[IncomingRecord]) -> ReconcileResult:
        reconciler = TrackReconciler(self.tracks, self.events, self.config)
        return reconciler.reconcile(
            batch,
            albums=self.albums,
            artists=self.artists,
            genres=self.genres,
            existing_tracks=self.existing,
            owner=self.source,
            progress=self.progress,
        )


@pytest.fixture
def harness() -> Harness:
    source = MediaSource(name="home")
    artist = Artist(external_id="artist-1", name="Bonobo", source=source)
    album = Album(external_id="album-1", title="Migration", artist=artist, source=source)
    genres = {
        "downtempo": make_genre("downtempo", source=source),
        "unknown": make_genre("unknown", umbrella_name="Unknown", source=source),
    }
    return Harness(
        source=source,
        tracks=FakeCatalogRepository[Track](),
        events=CollectingEventSink(),
        progress=RecordingProgressReporter(),
        existing={},
        albums={"album-1": album},
        artists={"artist-1": artist},
        genres=genres,
        config=SyncConfig(),
    )


def _state(track: Track) -> tuple[object, ...]:
    return (
        track.title,
        track.duration_seconds,
        track.track_number,
        track.disc_number,
        track.is_favorite,
        track.play_count,
        track.container,
        track.date_added,
        tuple(track.raw_genres),
        tuple(track.normalized_genres),
        tuple(track.umbrella_genres),
        track.album,
        track.artist,
        frozenset(track.genres),
    )


def test_new_records_create_placeholders_and_fill_fields(harness: Harness) -> None:
    record = make_record(
        "track-1",
        name="Kerala",
        album_id="album-1",
        artists=("Bonobo",),
        genres=("Downtempo",),
        run_time_ticks=30_000_000,
        track_number=4,
        disc_number=1,
        play_count=7,
        is_favorite=True,
        container="flac",
        date_created="2023-05-02T08:00:00.1234567Z",
    )

    result = harness.reconcile([record])

    track = harness.existing["track-1"]
    assert harness.tracks.added == [track]
    assert track.source is harness.source
    assert track.title == "Kerala"
    assert track.duration_seconds == 3.0
    assert (track.track_number, track.disc_number, track.play_count) == (4, 1, 7)
    assert track.is_favorite is True
    assert track.container == "flac"
    assert track.date_added == datetime(2023, 5, 2, 8, 0, 0, 123456, tzinfo=UTC)
    assert track.raw_genres == ["Downtempo"]
    assert track.normalized_genres == ["downtempo"]
    assert track.umbrella_genres == ["Electronic"]
    assert track.album is harness.albums["album-1"]
    assert track.artist is harness.artists["artist-1"]
    assert track.genres == {harness.genres["downtempo"]}
    assert result == ReconcileResult(
        processed=1,
        created=1,
        duplicates_dropped=0,
        favorite_changes=("track-1",),
    )


def test_missing_optional_fields_default_to_zero(harness: Harness) -> None:
    harness.reconcile([make_record("track-1")])

    track = harness.existing["track-1"]
    assert (track.track_number, track.disc_number, track.play_count) == (0, 0, 0)
    assert track.duration_seconds == 0.0
    assert track.is_favorite is False
    assert track.date_added is None


def test_existing_tracks_are_updated_not_recreated(harness: Harness) -> None:
    existing = Track(external_id="track-1", title="Old", source=harness.source)
    harness.existing["track-1"] = existing

    result = harness.reconcile([make_record("track-1", name="New")])

    assert harness.existing["track-1"] is existing
    assert existing.title == "New"
    assert harness.tracks.added == []
    assert result.created == 0


def test_reconcile_is_idempotent(harness: Harness) -> None:
    batch = [
        make_record(
            "track-1",
            album_id="album-1",
            artists=("Nobody",),
            genres=("Downtempo, Polka",),
            run_time_ticks=30_000_000,
            is_favorite=True,
            date_created="2023-05-02T08:00:00Z",
        ),
        make_record("track-2", genres=(), run_time_ticks=-5, date_created="yesterday"),
    ]
    harness.reconcile(batch)
    first = {key: _state(track) for key, track in harness.existing.items()}

    second_result = harness.reconcile(batch)

    assert {key: _state(track) for key, track in harness.existing.items()} == first
    assert second_result.created == 0
    assert second_result.favorite_changes == ()
    assert len(harness.tracks.items) == 2


def test_duplicates_first_occurrence_wins(harness: Harness) -> None:
    batch = [
        make_record("track-1", name="First"),
        make_record("track-2"),
        make_record("track-1", name="Second"),
    ]

    result = harness.reconcile(batch)

    assert harness.existing["track-1"].title == "First"
    assert result.duplicates_dropped == 1
    assert result.processed == 2
    dropped = harness.events.of_kind(ReconciliationEventKind.DUPLICATE_DROPPED)
    assert [event.external_id for event in dropped] == ["track-1"]


@pytest.mark.parametrize(
    ("ticks", "seconds", "flagged"),
    [
        (0, 0.0, False),
        (30_000_000, 3.0, False),
        (-5, 0.0, True),
        (None, 0.0, False),
    ],
)
def test_duration_conversion(
    harness: Harness,
    ticks: int | None,
    seconds: float,
    flagged: bool,
) -> None:
    harness.reconcile([make_record("track-1", run_time_ticks=ticks)])

    assert harness.existing["track-1"].duration_seconds == seconds
    invalid = harness.events.of_kind(ReconciliationEventKind.INVALID_DURATION)
    assert bool(invalid) is flagged


def test_unparsable_date_leaves_stored_value_untouched(harness: Harness) -> None:
    stored = datetime(2020, 1, 1, tzinfo=UTC)
    harness.existing["track-1"] = Track(
        external_id="track-1", date_added=stored, source=harness.source
    )
    harness.existing["track-2"] = Track(
        external_id="track-2", date_added=stored, source=harness.source
    )

    harness.reconcile(
        [
            make_record("track-1", date_created="not a date"),
            make_record("track-2", date_created=""),
        ]
    )

    assert harness.existing["track-1"].date_added == stored
    assert harness.existing["track-2"].date_added == stored
    unparsable = harness.events.of_kind(ReconciliationEventKind.UNPARSABLE_DATE)
    assert [event.external_id for event in unparsable] == ["track-1"]


def test_date_without_fraction_is_parsed(harness: Harness) -> None:
    harness.reconcile([make_record("track-1", date_created="2023-05-02T08:00:00Z")])

    assert harness.existing["track-1"].date_added == datetime(2023, 5, 2, 8, tzinfo=UTC)


def test_unmapped_genres_fall_back_to_unknown(harness: Harness) -> None:
    harness.reconcile([make_record("track-1", genres=("Polka",))])

    track = harness.existing["track-1"]
    assert track.raw_genres == ["Polka"]
    assert track.normalized_genres == ["polka"]
    assert track.umbrella_genres == ["Unknown"]
    assert track.genres == {harness.genres["unknown"]}


def test_genre_links_are_replaced_not_merged(harness: Harness) -> None:
    harness.reconcile([make_record("track-1", genres=("Downtempo",))])
    harness.reconcile([make_record("track-1", genres=())])

    assert harness.existing["track-1"].genres == {harness.genres["unknown"]}


def test_artist_falls_back_to_album_artist(harness: Harness) -> None:
    harness.reconcile([make_record("track-1", album_id="album-1", artists=("Guest",))])

    assert harness.existing["track-1"].artist is harness.artists["artist-1"]


def test_uncredited_track_is_linked_to_album_artist(harness: Harness) -> None:
    harness.reconcile([make_record("track-1", album_id="album-1", artists=())])

    track = harness.existing["track-1"]
    assert track.album is harness.albums["album-1"]
    assert track.artist is harness.albums["album-1"].artist
    assert track.artist is not None
    assert track.artist.name == "Bonobo"


def test_unknown_album_is_reported(harness: Harness) -> None:
    harness.reconcile([make_record("track-1", album_id="album-404")])

    assert harness.existing["track-1"].album is None
    unresolved = harness.events.of_kind(ReconciliationEventKind.UNRESOLVED_ALBUM)
    assert [event.external_id for event in unresolved] == ["track-1"]


def test_favorite_flags_follow_remote_state(harness: Harness) -> None:
    liked = Track(external_id="liked", is_favorite=True, source=harness.source)
    unchanged = Track(external_id="unchanged", is_favorite=True, source=harness.source)
    untouched = Track(external_id="untouched", is_favorite=True, source=harness.source)
    harness.existing.update({"liked": liked, "unchanged": unchanged, "untouched": untouched})

    result = harness.reconcile(
        [
            make_record("liked", is_favorite=None),
            make_record("unchanged", is_favorite=True),
            make_record("new-favorite", is_favorite=True),
        ]
    )

    assert liked.is_favorite is False
    assert unchanged.is_favorite is True
    assert untouched.is_favorite is True
    assert harness.existing["new-favorite"].is_favorite is True
    assert result.favorite_changes == ("liked", "new-favorite")
    changed = harness.events.of_kind(ReconciliationEventKind.FAVORITES_CHANGED)
    assert [event.count for event in changed] == [2]


def test_progress_is_monotonic_and_ends_at_configured_end(harness: Harness) -> None:
    harness.config = SyncConfig(progress_interval=2)

    harness.reconcile([make_record(f"track-{index}") for index in range(5)])

    assert harness.progress.fractions == pytest.approx([0.75, 0.786, 0.858, 0.93, 0.95])
    assert harness.progress.fractions == sorted(harness.progress.fractions)
    assert {report.stage for report in harness.progress.reports} == {STAGE}


def test_progress_default_interval_reports_every_five_hundred(harness: Harness) -> None:
    harness.reconcile([make_record(f"track-{index}") for index in range(1200)])

    fractions = harness.progress.fractions
    assert len(fractions) == 6
    assert fractions[0] == 0.75
    assert fractions[-2] == pytest.approx(0.93)
    assert fractions[-1] == 0.95


def test_empty_batch_reports_start_and_end(harness: Harness) -> None:
    result = harness.reconcile([])

    assert harness.progress.fractions == [0.75, 0.95]
    assert result == ReconcileResult(
        processed=0, created=0, duplicates_dropped=0, favorite_changes=()
    )


def test_store_failures_propagate(harness: Harness) -> None:
    harness.tracks.fail_on_add = RuntimeError("disk full")

    with pytest.raises(RuntimeError, match="disk full"):
        harness.reconcile([make_record("track-1")])


def test_events_summarise_the_batch(harness: Harness) -> None:
    harness.existing["track-1"] = Track(external_id="track-1", source=harness.source)

    harness.reconcile([make_record("track-1"), make_record("track-2")])

    kinds = [event.kind for event in harness.events.events]
    assert kinds[0] is ReconciliationEventKind.BATCH_PARTITIONED
    assert kinds[-1] is ReconciliationEventKind.BATCH_COMPLETED
    created = harness.events.of_kind(ReconciliationEventKind.PLACEHOLDERS_CREATED)
    assert [event.count for event in created] == [1]
