"""Shared reconciliation contract components.

This module holds only:
- the incoming record shapes produced by source adapters
- the ``*ByExternalId`` / ``*ByNormalizedName`` lookup aliases
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mediasync.domain.model import Album, Artist, Genre, Track


type AlbumsByExternalId = dict[str, Album]
type ArtistsByExternalId = dict[str, Artist]
type GenresByNormalizedName = dict[str, Genre]
type TracksByExternalId = dict[str, Track]


@dataclass(frozen=True, slots=True, kw_only=True)
class IncomingRecord:
    """One track as reported by the remote source.

    ``artists[0]`` is authoritative; ``genres`` holds raw, possibly composite
    labels. Every optional field may be absent in the remote payload.
    """

    external_id: str
    name: str
    album_id: str | None = None
    artists: tuple[str, ...] = ()
    genres: tuple[str, ...] = ()
    run_time_ticks: int | float | None = None
    track_number: int | None = None
    disc_number: int | None = None
    play_count: int | None = None
    is_favorite: bool | None = None
    container: str | None = None
    date_created: str | None = None

    def __post_init__(self) -> None:
        if not self.external_id:
            raise ValueError("IncomingRecord.external_id must be a non-empty string")


@dataclass(frozen=True, slots=True, kw_only=True)
class IncomingArtist:
    external_id: str
    name: str

    def __post_init__(self) -> None:
        if not self.external_id:
            raise ValueError("IncomingArtist.external_id must be a non-empty string")


@dataclass(frozen=True, slots=True, kw_only=True)
class IncomingAlbum:
    external_id: str
    name: str
    artist_name: str | None = None
    production_year: int | None = None

    def __post_init__(self) -> None:
        if not self.external_id:
            raise ValueError("IncomingAlbum.external_id must be a non-empty string")


@dataclass(frozen=True, slots=True, kw_only=True)
class LibrarySnapshot:
    """A full catalog pull from one source, in adapter-neutral form."""

    artists: tuple[IncomingArtist, ...] = ()
    albums: tuple[IncomingAlbum, ...] = ()
    tracks: tuple[IncomingRecord, ...] = ()
