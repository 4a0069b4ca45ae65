"""Jellyfin adapter package."""

from __future__ import annotations

from .schema import (
    JellyfinAlbum,
    JellyfinArtist,
    JellyfinTrack,
    JellyfinUserData,
    LibrarySnapshotPayload,
)
from .translator import (
    parse_snapshot,
    translate_album,
    translate_artist,
    translate_snapshot,
    translate_track,
)

__all__ = [
    "JellyfinAlbum",
    "JellyfinArtist",
    "JellyfinTrack",
    "JellyfinUserData",
    "LibrarySnapshotPayload",
    "parse_snapshot",
    "translate_album",
    "translate_artist",
    "translate_snapshot",
    "translate_track",
]
