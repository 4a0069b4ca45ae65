"""SQLAlchemy unit of work for catalog imports.

``startup()`` binds one module-level engine; every ``SqlAlchemyCatalogUnitOfWork``
opens its own session on it for the duration of a ``with`` block.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from mediasync.adapters.sqlalchemy.mappings import create_all_tables, start_mappers
from mediasync.adapters.sqlalchemy.repositories import (
    SqlAlchemyAlbumRepository,
    SqlAlchemyArtistRepository,
    SqlAlchemyGenreRepository,
    SqlAlchemyMediaSourceRepository,
    SqlAlchemyTrackRepository,
)
from mediasync.config.storage import get_database_config
from mediasync.domain.ports.unit_of_work import CatalogRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when the catalog store is used outside its started lifecycle."""


class _Store:
    engine: Engine | None = None
    session_factory: sessionmaker[Session] | None = None


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the catalog engine, map the domain model and create missing tables."""

    if _Store.engine is not None and not force:
        raise StartupError("Catalog store already started. Pass force=True to rebind it.")

    bound = engine or create_engine(database_uri or get_database_config().uri, future=True)
    start_mappers()
    create_all_tables(bound)
    _Store.engine = bound
    _Store.session_factory = sessionmaker(bind=bound, expire_on_commit=False)


def is_started() -> bool:
    return _Store.engine is not None


def shutdown() -> None:
    if _Store.engine is not None:
        _Store.engine.dispose()
    _Store.engine = None
    _Store.session_factory = None


class SqlAlchemyCatalogUnitOfWork:
    """Session-per-block access to the catalog repositories."""

    def __init__(self) -> None:
        if _Store.session_factory is None:
            raise StartupError(
                "Catalog store not started. Call "
                "mediasync.adapters.sqlalchemy.unit_of_work.startup() first."
            )
        self._session_factory = _Store.session_factory
        self._session: Session | None = None
        self._repositories: CatalogRepositories | None = None

    def __enter__(self) -> SqlAlchemyCatalogUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        session = self._session_factory()
        self._session = session
        self._repositories = CatalogRepositories(
            sources=SqlAlchemyMediaSourceRepository(session),
            artists=SqlAlchemyArtistRepository(session),
            albums=SqlAlchemyAlbumRepository(session),
            genres=SqlAlchemyGenreRepository(session),
            tracks=SqlAlchemyTrackRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session

    @property
    def repositories(self) -> CatalogRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
