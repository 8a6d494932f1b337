"""Repository implementations backed by SQLAlchemy async sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import select

from modelmerge.adapters.sqlalchemy.mappings import delta_record_table
from modelmerge.domain.model import DeltaRecord, Entity

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession


class SqlAlchemyEntityRepository[TEntity: Entity]:
    """Keyed access to one mapped entity type."""

    def __init__(self, session: AsyncSession, entity_cls: type[TEntity]) -> None:
        self.session = session
        self._entity_cls = entity_cls

    def add(self, entity: TEntity) -> None:
        self.session.add(entity)

    async def get(self, key: UUID) -> TEntity | None:
        return await self.session.get(self._entity_cls, key)

    async def list_all(self) -> list[TEntity]:
        result = await self.session.scalars(select(self._entity_cls))
        return list(result.all())

    async def remove(self, entity: TEntity) -> None:
        await self.session.delete(entity)


class SqlAlchemyDeltaRecordRepository:
    """Append-only delta history.

    Appends only stage rows on the session, so they can be made from the
    synchronous delta hook of a CRUD; reading the history awaits the database.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def add(self, entity: DeltaRecord) -> None:
        self.session.add(entity)

    def add_many(self, records: Iterable[DeltaRecord]) -> None:
        self.session.add_all(list(records))

    async def for_entity(self, object_type_name: str, entity_id: UUID) -> list[DeltaRecord]:
        stmt = (
            select(DeltaRecord)
            .where(delta_record_table.c.object_type_name == object_type_name)
            .where(delta_record_table.c.entity_id == entity_id)
            .order_by(delta_record_table.c.recorded_at)
        )
        result = await self.session.scalars(stmt)
        return list(result.all())


if TYPE_CHECKING:
    from modelmerge.domain.ports.persistence import DeltaRecordRepository, EntityRepository

    _session_stub = cast("AsyncSession", object())
    _delta_repo: DeltaRecordRepository = SqlAlchemyDeltaRecordRepository(_session_stub)
    _entity_repo: EntityRepository[Entity] = SqlAlchemyEntityRepository(_session_stub, Entity)
