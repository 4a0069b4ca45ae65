"""Identity resolution for incoming track records.

Responsibilities of this stage:
- link a record to already-known album, artist and genre entities
- fall back to the album's artist when the credited artist is unknown
- fall back to the synthetic ``unknown`` genre when no label matches

Out of scope for this stage:
- creating entities (only track placeholders are ever created, by the engine)
- mutation of the track itself
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mediasync.domain.genres import UNKNOWN_NORMALIZED, normalize_genre, split_genres

if TYPE_CHECKING:
    from mediasync.domain.model import Album, Artist, Genre

    from .contracts import (
        AlbumsByExternalId,
        ArtistsByExternalId,
        GenresByNormalizedName,
        IncomingRecord,
    )


@dataclass(slots=True)
class TrackLinks:
    album: Album | None = None
    artist: Artist | None = None
    genres: list[Genre] = field(default_factory=list["Genre"])


def resolve_track_links(
    record: IncomingRecord,
    *,
    albums: AlbumsByExternalId,
    artists: ArtistsByExternalId,
    genres: GenresByNormalizedName,
) -> TrackLinks:
    """Resolve album, artist and genre links for ``record`` from the known maps."""

    album = albums.get(record.album_id) if record.album_id else None
    artist = find_artist_by_name(record.artists[0], artists) if record.artists else None
    if artist is None and album is not None:
        artist = album.artist
    return TrackLinks(
        album=album,
        artist=artist,
        genres=resolve_genres(record.genres, genres),
    )


def find_artist_by_name(name: str, artists: ArtistsByExternalId) -> Artist | None:
    """Exact, case-sensitive match over artist names; the first hit wins."""

    for artist in artists.values():
        if artist.name == name:
            return artist
    return None


def resolve_genres(labels: tuple[str, ...], genres: GenresByNormalizedName) -> list[Genre]:
    matched: dict[str, Genre] = {}
    for label in split_genres(labels):
        key = normalize_genre(label)
        genre = genres.get(key)
        if genre is not None and key not in matched:
            matched[key] = genre
    if matched:
        return list(matched.values())
    unknown = genres.get(UNKNOWN_NORMALIZED)
    return [unknown] if unknown is not None else []
