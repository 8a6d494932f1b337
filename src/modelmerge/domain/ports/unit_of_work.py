"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from modelmerge.domain.ports.persistence import DeltaRecordRepository


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection.

    Used as ``async with uow: ...``; leaving the block without ``commit``
    discards the work.
    """

    @property
    def repositories(self) -> TRepositories: ...

    async def __aenter__(self) -> UnitOfWork[TRepositories]: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


@dataclass(slots=True)
class MergeRepositories(RepositoryCollection):
    """Repositories shared by every merge-backed CRUD."""

    deltas: DeltaRecordRepository


type MergeUnitOfWork = UnitOfWork[MergeRepositories]
