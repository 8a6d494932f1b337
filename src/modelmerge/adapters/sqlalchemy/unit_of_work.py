"""SQLAlchemy-backed unit of work for merge-driven persistence."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from modelmerge.adapters.sqlalchemy.crud import SqlAlchemyMergeCrud
from modelmerge.adapters.sqlalchemy.mappings import create_all_tables, start_mappers
from modelmerge.adapters.sqlalchemy.repositories import (
    SqlAlchemyDeltaRecordRepository,
    SqlAlchemyEntityRepository,
)
from modelmerge.config import get_database_config
from modelmerge.domain.ports.unit_of_work import MergeRepositories, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

    from modelmerge.domain.model import Entity, PersistentEntity

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy adapter is used before ``startup`` or reconfigured twice."""


@dataclass(slots=True)
class _AdapterState:
    engine: AsyncEngine | None = None
    sessions: async_sessionmaker[AsyncSession] | None = None

    def bind(self, engine: AsyncEngine | None) -> None:
        self.engine = engine
        self.sessions = (
            None if engine is None else async_sessionmaker(engine, expire_on_commit=False)
        )

    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self.sessions is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Await modelmerge.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        return self.sessions


_STATE = _AdapterState()


async def startup(
    *,
    engine: AsyncEngine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Create the async engine, configure mappers, create tables, and bind sessions.

    Record types must be mapped (``map_persistent_entity``) before this runs so
    that their tables are created.
    """

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_async_engine(database_uri or get_database_config().uri)
    start_mappers()
    await create_all_tables(resolved_engine)
    _STATE.bind(resolved_engine)
    log.info("SQLAlchemy adapter started on %s", resolved_engine.url)


def configured_engine() -> AsyncEngine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


async def shutdown() -> None:
    """Dispose the managed engine and forget it."""

    if _STATE.engine is not None:
        await _STATE.engine.dispose()
    _STATE.bind(None)


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """One ``AsyncSession`` per ``async with`` block, with pluggable repositories.

    An exception inside the block rolls back and propagates; leaving without
    ``commit`` discards the work when the session closes.
    """

    def __init__(self) -> None:
        self.session_factory = _STATE.session_factory()
        self._session: AsyncSession | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: AsyncSession) -> TRepositories: ...

    async def __aenter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = self.session_factory()
        self._repositories = self._build_repositories(self._session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                await session.rollback()
        finally:
            await session.close()
            self._session = None
            self._repositories = None
        return False

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session


class SqlAlchemyUnitOfWork(BaseSqlAlchemyUnitOfWork[MergeRepositories]):
    """Unit of work handing out merge CRUDs that share one session."""

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        await super().__aenter__()
        return self

    def _build_repositories(self, session: AsyncSession) -> MergeRepositories:
        return MergeRepositories(deltas=SqlAlchemyDeltaRecordRepository(session))

    def crud[TModel: PersistentEntity](
        self,
        model_type: type[TModel],
        *,
        hard_delete: bool = False,
    ) -> SqlAlchemyMergeCrud[TModel]:
        """Return a CRUD for ``model_type`` that records deltas in this unit of work."""

        return SqlAlchemyMergeCrud(
            self.session,
            model_type,
            deltas=self.repositories.deltas,
            hard_delete=hard_delete,
        )

    def repository[TEntity: Entity](
        self,
        entity_type: type[TEntity],
    ) -> SqlAlchemyEntityRepository[TEntity]:
        return SqlAlchemyEntityRepository(self.session, entity_type)


if TYPE_CHECKING:
    from modelmerge.domain.ports.unit_of_work import MergeUnitOfWork

    _uow_check: MergeUnitOfWork = SqlAlchemyUnitOfWork()
