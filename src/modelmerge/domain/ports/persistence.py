"""Ports for persisting records and their change history."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from modelmerge.domain.model import DeltaRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class EntityRepository[TEntity](Repository[TEntity], Protocol):
    """Keyed access to records of one type."""

    async def get(self, key: UUID) -> TEntity | None: ...

    async def list_all(self) -> Sequence[TEntity]: ...

    async def remove(self, entity: TEntity) -> None: ...


@runtime_checkable
class DeltaRecordRepository(Repository[DeltaRecord], Protocol):
    """Append-only store for merge deltas.

    Appending only stages records; they are written when the owning unit of
    work commits.
    """

    def add_many(self, records: Iterable[DeltaRecord]) -> None: ...

    async def for_entity(
        self,
        object_type_name: str,
        entity_id: UUID,
    ) -> Sequence[DeltaRecord]: ...
