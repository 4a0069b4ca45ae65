"""Catalog entities mirrored from a remote media source.

Every catalog entity belongs to exactly one ``MediaSource``; external ids are
unique per source, not globally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from mediasync.domain.model.entity import Entity
from mediasync.domain.model.enums import EntityType

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime


@dataclass(eq=False, kw_only=True)
class MediaSource(Entity):
    """A remote server whose catalog is mirrored locally."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.MEDIA_SOURCE

    name: str
    last_full_sync: datetime | None = None


@dataclass(eq=False, kw_only=True)
class Artist(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.ARTIST

    external_id: str
    name: str
    sort_name: str | None = None
    source: MediaSource | None = None


@dataclass(eq=False, kw_only=True)
class Album(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.ALBUM

    external_id: str
    title: str
    sort_title: str | None = None
    year: int | None = None
    artist: Artist | None = None
    source: MediaSource | None = None


@dataclass(eq=False, kw_only=True)
class Genre(Entity):
    """Genre keyed by its normalized name within a source."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.GENRE

    normalized_name: str
    raw_name: str
    umbrella_name: str
    source: MediaSource | None = None


@dataclass(eq=False, kw_only=True)
class Track(Entity):
    """Canonical track; created once per external id and only mutated afterwards."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.TRACK

    external_id: str
    title: str = ""
    duration_seconds: float = 0.0
    track_number: int = 0
    disc_number: int = 0
    is_favorite: bool = False
    play_count: int = 0
    container: str | None = None
    date_added: datetime | None = None

    raw_genres: list[str] = field(default_factory=list[str])
    normalized_genres: list[str] = field(default_factory=list[str])
    umbrella_genres: list[str] = field(default_factory=list[str])

    album: Album | None = None
    artist: Artist | None = None
    genres: set[Genre] = field(default_factory=set["Genre"], repr=False)
    source: MediaSource | None = None

    def replace_genres(self, genres: Iterable[Genre]) -> None:
        """Replace the linked genre set wholesale (never merged)."""
        self.genres = set(genres)
