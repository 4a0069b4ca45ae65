"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from mediasync.adapters.sqlalchemy.mappings import (
    album_table,
    artist_table,
    genre_table,
    media_source_table,
    track_table,
)
from mediasync.domain.model import Album, Artist, Genre, MediaSource, Track

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Table
    from sqlalchemy.orm import Session


class SqlAlchemyMediaSourceRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: MediaSource) -> None:
        self.session.add(entity)

    def get_by_name(self, name: str) -> MediaSource | None:
        stmt = select(MediaSource).where(media_source_table.c.name == name)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyCatalogRepository[TEntity: (Artist, Album, Track)]:
    """Shared helpers for repositories managing source-scoped catalog entities."""

    def __init__(self, session: Session, entity_cls: type[TEntity], table: Table) -> None:
        self.session = session
        self._entity_cls = entity_cls
        self._table = table

    def add(self, entity: TEntity) -> None:
        self.session.add(entity)

    def get_by_external_id(self, source: MediaSource, external_id: str) -> TEntity | None:
        stmt = (
            select(self._entity_cls)
            .where(self._table.c.source_id == source.id)
            .where(self._table.c.external_id == external_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def for_source(self, source: MediaSource) -> Sequence[TEntity]:
        stmt = select(self._entity_cls).where(self._table.c.source_id == source.id)
        return self.session.execute(stmt).scalars().all()


class SqlAlchemyArtistRepository(SqlAlchemyCatalogRepository[Artist]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Artist, artist_table)


class SqlAlchemyAlbumRepository(SqlAlchemyCatalogRepository[Album]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Album, album_table)


class SqlAlchemyTrackRepository(SqlAlchemyCatalogRepository[Track]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Track, track_table)


class SqlAlchemyGenreRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Genre) -> None:
        self.session.add(entity)

    def get_by_normalized_name(self, source: MediaSource, normalized_name: str) -> Genre | None:
        stmt = (
            select(Genre)
            .where(genre_table.c.source_id == source.id)
            .where(genre_table.c.normalized_name == normalized_name)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def for_source(self, source: MediaSource) -> Sequence[Genre]:
        stmt = select(Genre).where(genre_table.c.source_id == source.id)
        return self.session.execute(stmt).scalars().all()
