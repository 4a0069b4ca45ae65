"""Translate Jellyfin payloads into reconciliation contracts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mediasync.domain.reconciliation import (
    IncomingAlbum,
    IncomingArtist,
    IncomingRecord,
    LibrarySnapshot,
)

from .schema import LibrarySnapshotPayload

if TYPE_CHECKING:
    from .schema import JellyfinAlbum, JellyfinArtist, JellyfinTrack


def translate_track(track: JellyfinTrack) -> IncomingRecord:
    user_data = track.user_data
    play_count = track.play_count
    if play_count is None and user_data is not None:
        play_count = user_data.play_count
    return IncomingRecord(
        external_id=track.id,
        name=track.name,
        album_id=track.album_id or None,
        artists=tuple(track.artists),
        genres=tuple(track.genres),
        run_time_ticks=track.run_time_ticks,
        track_number=track.index_number,
        disc_number=track.disc_number,
        play_count=play_count,
        is_favorite=user_data.is_favorite if user_data is not None else None,
        container=track.container,
        date_created=track.date_created,
    )


def translate_album(album: JellyfinAlbum) -> IncomingAlbum:
    return IncomingAlbum(
        external_id=album.id,
        name=album.name,
        artist_name=album.album_artist or None,
        production_year=album.production_year,
    )


def translate_artist(artist: JellyfinArtist) -> IncomingArtist:
    return IncomingArtist(external_id=artist.id, name=artist.name)


def translate_snapshot(payload: LibrarySnapshotPayload) -> LibrarySnapshot:
    return LibrarySnapshot(
        artists=tuple(translate_artist(artist) for artist in payload.artists),
        albums=tuple(translate_album(album) for album in payload.albums),
        tracks=tuple(translate_track(track) for track in payload.tracks),
    )


def parse_snapshot(raw: str | bytes) -> LibrarySnapshot:
    """Validate a JSON snapshot document and translate it.

    Raises ``pydantic.ValidationError`` on malformed payloads.
    """

    return translate_snapshot(LibrarySnapshotPayload.model_validate_json(raw))
