"""Asynchronous CRUD contracts over a collection of records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


@runtime_checkable
class Creates[TModel](Protocol):
    async def create_async(self, model: TModel) -> TModel:
        """Create a new record using ``model`` as a template."""
        ...

    async def create_many_async(self, models: Iterable[TModel | None]) -> list[TModel]: ...


@runtime_checkable
class Reads[TModel, TKey](Protocol):
    async def read_async(self, key: TKey) -> TModel | None:
        """Return the record stored under ``key``, or None if there is none."""
        ...


@runtime_checkable
class ReadsAll[TModel](Protocol):
    async def read_all_async(self) -> Sequence[TModel]: ...


@runtime_checkable
class Updates[TModel](Protocol):
    async def update_async(self, model: TModel) -> TModel:
        """Update the stored record matching ``model`` and return the stored instance."""
        ...


@runtime_checkable
class Deletes[TKey](Protocol):
    async def delete_async(self, key: TKey) -> None: ...

    async def delete_many_async(self, keys: Iterable[TKey]) -> None: ...


@runtime_checkable
class Crud[TModel, TKey](
    Creates[TModel],
    Reads[TModel, TKey],
    ReadsAll[TModel],
    Updates[TModel],
    Deletes[TKey],
    Protocol,
):
    """Create, read, update and delete records of one type keyed by ``TKey``."""


@runtime_checkable
class ReadsByUniversalId[TModel](Protocol):
    async def read_by_universal_id_async(self, universal_id: str) -> TModel | None: ...
