"""Merge-backed CRUD over SQLAlchemy async sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import class_mapper

from modelmerge.domain.lifecycle import MergeCrud
from modelmerge.domain.model import DeltaRecord, PersistentEntity, soft_delete

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from modelmerge.domain.merge import ModelDelta
    from modelmerge.domain.ports.persistence import DeltaRecordRepository

log = logging.getLogger(__name__)


class SqlAlchemyMergeCrud[TModel: PersistentEntity](MergeCrud[TModel, UUID]):
    """CRUD for one mapped persistent entity type.

    Every database round trip is awaited on the ``AsyncSession``, so a read
    (including the one in front of each update) suspends instead of blocking
    the event loop. New records are added to the session and updates mutate
    the stored instance; committing is left to the owning unit of work.
    Deletes are soft unless ``hard_delete`` is set, and soft-deleted records
    are hidden from ``read_all_async``. When a delta repository is given,
    every create and update appends its deltas as ``DeltaRecord`` rows.
    """

    def __init__(
        self,
        session: AsyncSession,
        model_type: type[TModel],
        *,
        deltas: DeltaRecordRepository | None = None,
        hard_delete: bool = False,
    ) -> None:
        super().__init__(model_type)
        self.session = session
        self.deltas = deltas
        self.hard_delete = hard_delete
        self._columns = class_mapper(model_type).columns

    async def create_async(self, model: TModel | None) -> TModel:
        created = await super().create_async(model)
        self.session.add(created)
        return created

    async def create_many_async(self, models: Iterable[TModel | None]) -> list[TModel]:
        created = await super().create_many_async(models)
        self.session.add_all(created)
        log.debug("Added %d new %s record(s)", len(created), self.model_type.__name__)
        return created

    async def read_async(self, key: UUID) -> TModel | None:
        return await self.session.get(self.model_type, key)

    async def read_all_async(self) -> Sequence[TModel]:
        stmt = select(self.model_type).where(self._columns["deleted_utc"].is_(None))
        result = await self.session.scalars(stmt)
        return list(result.all())

    async def read_by_universal_id_async(self, universal_id: str) -> TModel | None:
        if "universal_id" not in self._columns:
            raise TypeError(f"{self.model_type.__name__} has no universal id")
        stmt = (
            select(self.model_type)
            .where(self._columns["universal_id"] == universal_id)
            .limit(1)
        )
        result = await self.session.scalars(stmt)
        return result.one_or_none()

    async def delete_async(self, key: UUID) -> None:
        model = await self.read_async(key)
        if model is None:
            log.debug("Nothing to delete for %s %s", self.model_type.__name__, key)
            return
        if self.hard_delete:
            await self.session.delete(model)
        else:
            soft_delete(model)

    async def delete_many_async(self, keys: Iterable[UUID]) -> None:
        for key in keys:
            await self.delete_async(key)

    def record_deltas(self, model: TModel, deltas: Sequence[ModelDelta[Any]]) -> None:
        if self.deltas is None:
            super().record_deltas(model, deltas)
            return
        self.deltas.add_many(DeltaRecord.from_delta(delta, entity_id=model.id) for delta in deltas)


if TYPE_CHECKING:
    from modelmerge.domain.model import PersistentUniversalEntity
    from modelmerge.domain.ports.crud import Crud, ReadsByUniversalId

    _session_stub = cast("AsyncSession", object())
    _crud_check: Crud[PersistentEntity, UUID] = SqlAlchemyMergeCrud(_session_stub, PersistentEntity)
    _universal_check: ReadsByUniversalId[PersistentUniversalEntity] = SqlAlchemyMergeCrud(
        _session_stub, PersistentUniversalEntity
    )
