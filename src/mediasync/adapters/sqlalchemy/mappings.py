"""SQLAlchemy mapping metadata for the mediasync domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from mediasync.domain.model import Album, Artist, Genre, MediaSource, Track

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Core tables -----------------------------------------------------------------

media_source_table = Table(
    "media_source",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False, unique=True),
    Column("last_full_sync", UTCDateTime(), nullable=True),
)

artist_table = Table(
    "artist",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("source_id", UUIDColumnType, ForeignKey("media_source.id"), nullable=False),
    Column("external_id", String, nullable=False),
    Column("name", String, nullable=False),
    Column("sort_name", String, nullable=True),
    UniqueConstraint("source_id", "external_id"),
)

album_table = Table(
    "album",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("source_id", UUIDColumnType, ForeignKey("media_source.id"), nullable=False),
    Column("external_id", String, nullable=False),
    Column("title", String, nullable=False),
    Column("sort_title", String, nullable=True),
    Column("year", Integer, nullable=True),
    Column("artist_id", UUIDColumnType, ForeignKey("artist.id"), nullable=True),
    UniqueConstraint("source_id", "external_id"),
)

genre_table = Table(
    "genre",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("source_id", UUIDColumnType, ForeignKey("media_source.id"), nullable=False),
    Column("normalized_name", String, nullable=False),
    Column("raw_name", String, nullable=False),
    Column("umbrella_name", String, nullable=False),
    UniqueConstraint("source_id", "normalized_name"),
)

track_table = Table(
    "track",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("source_id", UUIDColumnType, ForeignKey("media_source.id"), nullable=False),
    Column("external_id", String, nullable=False),
    Column("title", String, nullable=False, default=""),
    Column("duration_seconds", Float, nullable=False, default=0.0),
    Column("track_number", Integer, nullable=False, default=0),
    Column("disc_number", Integer, nullable=False, default=0),
    Column("is_favorite", Boolean, nullable=False, default=False),
    Column("play_count", Integer, nullable=False, default=0),
    Column("container", String, nullable=True),
    Column("date_added", UTCDateTime(), nullable=True),
    Column("raw_genres", JSON, nullable=False, default=list),
    Column("normalized_genres", JSON, nullable=False, default=list),
    Column("umbrella_genres", JSON, nullable=False, default=list),
    Column("album_id", UUIDColumnType, ForeignKey("album.id"), nullable=True),
    Column("artist_id", UUIDColumnType, ForeignKey("artist.id"), nullable=True),
    UniqueConstraint("source_id", "external_id"),
)

# Associations ----------------------------------------------------------------

track_genre_table = Table(
    "track_genre",
    mapper_registry.metadata,
    Column("track_id", UUIDColumnType, ForeignKey("track.id"), primary_key=True),
    Column("genre_id", UUIDColumnType, ForeignKey("genre.id"), primary_key=True),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(MediaSource, media_source_table)

    mapper_registry.map_imperatively(
        Artist,
        artist_table,
        properties={
            "source": relationship(MediaSource),
        },
    )

    mapper_registry.map_imperatively(
        Album,
        album_table,
        properties={
            "source": relationship(MediaSource),
            "artist": relationship(Artist),
        },
    )

    mapper_registry.map_imperatively(
        Genre,
        genre_table,
        properties={
            "source": relationship(MediaSource),
        },
    )

    mapper_registry.map_imperatively(
        Track,
        track_table,
        properties={
            "source": relationship(MediaSource),
            "album": relationship(Album),
            "artist": relationship(Artist),
            "genres": relationship(
                Genre,
                secondary=track_genre_table,
                collection_class=set,
            ),
        },
    )

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
