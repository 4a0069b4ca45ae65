"""Unit-of-work boundary for catalog imports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from mediasync.domain.ports.persistence import (
        AlbumRepository,
        ArtistRepository,
        GenreRepository,
        MediaSourceRepository,
        TrackRepository,
    )


@dataclass(slots=True)
class CatalogRepositories:
    """Repositories required to mirror a source catalog."""

    sources: MediaSourceRepository
    artists: ArtistRepository
    albums: AlbumRepository
    genres: GenreRepository
    tracks: TrackRepository


@runtime_checkable
class CatalogUnitOfWork(Protocol):
    """One transaction over the catalog repositories.

    Leaving the block with an exception rolls back; nothing is committed
    unless ``commit`` is called inside it.
    """

    @property
    def repositories(self) -> CatalogRepositories: ...

    def __enter__(self) -> CatalogUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
