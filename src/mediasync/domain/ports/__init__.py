"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    AlbumRepository,
    ArtistRepository,
    CatalogRepository,
    GenreRepository,
    MediaSourceRepository,
    Repository,
    TrackRepository,
)
from .unit_of_work import CatalogRepositories, CatalogUnitOfWork

__all__ = [
    "AlbumRepository",
    "ArtistRepository",
    "CatalogRepositories",
    "CatalogRepository",
    "CatalogUnitOfWork",
    "GenreRepository",
    "MediaSourceRepository",
    "Repository",
    "TrackRepository",
]
