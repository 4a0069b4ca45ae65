"""Ports for persisting catalog aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from mediasync.domain.model import Album, Artist, Genre, MediaSource, Track

if TYPE_CHECKING:
    from collections.abc import Sequence


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class CatalogRepository[TCatalog](Repository[TCatalog], Protocol):
    """Repository contract for entities identified by a source-scoped external id."""

    def get_by_external_id(self, source: MediaSource, external_id: str) -> TCatalog | None: ...

    def for_source(self, source: MediaSource) -> Sequence[TCatalog]: ...


@runtime_checkable
class ArtistRepository(CatalogRepository[Artist], Protocol):
    """Repository contract for artists."""


@runtime_checkable
class AlbumRepository(CatalogRepository[Album], Protocol):
    """Repository contract for albums."""


@runtime_checkable
class TrackRepository(CatalogRepository[Track], Protocol):
    """Repository contract for tracks."""


@runtime_checkable
class GenreRepository(Repository[Genre], Protocol):
    """Repository contract for genres, keyed by normalized name within a source."""

    def get_by_normalized_name(self, source: MediaSource, normalized_name: str) -> Genre | None: ...

    def for_source(self, source: MediaSource) -> Sequence[Genre]: ...


@runtime_checkable
class MediaSourceRepository(Repository[MediaSource], Protocol):
    """Repository contract for media sources."""

    def get_by_name(self, name: str) -> MediaSource | None: ...
