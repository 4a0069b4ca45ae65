from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from mediasync.adapters.jellyfin import JellyfinTrack, LibrarySnapshotPayload


def test_payload_parses_pascal_case_fields(library_snapshot_document: dict[str, object]) -> None:
    payload = LibrarySnapshotPayload.model_validate(library_snapshot_document)

    assert [artist.name for artist in payload.artists] == ["Daft Punk", "Bonobo"]
    assert payload.albums[0].album_artist == "Daft Punk"
    assert payload.albums[0].production_year == 2001

    track = payload.tracks[0]
    assert track.id == "track-one-more-time"
    assert track.album_id == "album-discovery"
    assert track.genres == ["House, French House"]
    assert track.run_time_ticks == 3_200_000_000
    assert track.index_number == 1
    assert track.container == "flac"
    assert track.user_data is not None
    assert track.user_data.is_favorite is True


def test_missing_optional_fields_default_to_none() -> None:
    track = JellyfinTrack.model_validate({"Id": "t1"})

    assert track.name == ""
    assert track.artists == []
    assert track.user_data is None
    assert track.date_created is None


def test_unknown_fields_are_ignored() -> None:
    track = JellyfinTrack.model_validate({"Id": "t1", "Name": "Song", "LUFS": -9.5})

    assert track.name == "Song"


def test_json_document_round_trips_through_model_validate_json(
    library_snapshot_document: dict[str, object],
) -> None:
    payload = LibrarySnapshotPayload.model_validate_json(json.dumps(library_snapshot_document))

    assert len(payload.tracks) == 4


def test_malformed_payload_raises_validation_error() -> None:
    with pytest.raises(ValidationError):
        LibrarySnapshotPayload.model_validate_json('{"Tracks": [{"Name": "no id"}]}')
