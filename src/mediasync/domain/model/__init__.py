"""Public domain model surface."""

from __future__ import annotations

from mediasync.domain.model.entity import Entity
from mediasync.domain.model.enums import EntityType
from mediasync.domain.model.music import Album, Artist, Genre, MediaSource, Track

__all__ = [
    "Album",
    "Artist",
    "Entity",
    "EntityType",
    "Genre",
    "MediaSource",
    "Track",
]
