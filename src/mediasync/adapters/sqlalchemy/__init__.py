"""SQLAlchemy adapter package for mediasync."""

from __future__ import annotations

from .mappings import (
    create_all_tables,
    mapper_registry,
    start_mappers,
)
from .repositories import (
    SqlAlchemyAlbumRepository,
    SqlAlchemyArtistRepository,
    SqlAlchemyGenreRepository,
    SqlAlchemyMediaSourceRepository,
    SqlAlchemyTrackRepository,
)
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyAlbumRepository",
    "SqlAlchemyArtistRepository",
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyGenreRepository",
    "SqlAlchemyMediaSourceRepository",
    "SqlAlchemyTrackRepository",
    "StartupError",
    "create_all_tables",
    "mapper_registry",
    "shutdown",
    "startup",
    "start_mappers",
]
