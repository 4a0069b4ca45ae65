"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Typed-reference discriminator for catalog entities."""

    MEDIA_SOURCE = "media_source"
    ARTIST = "artist"
    ALBUM = "album"
    GENRE = "genre"
    TRACK = "track"
