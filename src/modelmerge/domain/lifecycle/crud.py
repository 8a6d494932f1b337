"""Generic create/update orchestration built on the merge engine."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from modelmerge.domain.merge import MissingModelError

from .operations import create_with_deltas, update_with_deltas

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from modelmerge.domain.merge import ModelDelta
    from modelmerge.domain.model import Identifiable

log = logging.getLogger(__name__)


class ModelNotFoundError(LookupError):
    """Raised when an update targets a key with no stored record."""

    def __init__(self, model_type: type, key: object) -> None:
        super().__init__(f"No {model_type.__name__} found for key {key!r}")
        self.model_type = model_type
        self.key = key


class MergeCrud[TModel: Identifiable[Any], TKey](ABC):
    """CRUD base that creates and updates records through policy-driven merges.

    Creates merge under ``MergeMode.CREATE`` onto a fresh ``model_type()``;
    updates read the stored record and merge under ``MergeMode.UPDATE``.
    Subclasses bring the storage: reads, deletes, and persisting what
    ``create_async`` returns.
    """

    def __init__(self, model_type: type[TModel]) -> None:
        self.model_type = model_type

    def create(self, model: TModel | None) -> TModel:
        outcome = create_with_deltas(self.model_type, model)
        self.record_deltas(outcome.model, outcome.deltas)
        return outcome.model

    def create_many(self, models: Iterable[TModel | None]) -> Iterator[TModel]:
        return (self.create(model) for model in models if model is not None)

    def update(self, existing: TModel | None, model: TModel | None) -> TModel:
        outcome = update_with_deltas(existing, model)
        self.record_deltas(outcome.model, outcome.deltas)
        return outcome.model

    def record_deltas(self, model: TModel, deltas: Sequence[ModelDelta[Any]]) -> None:
        """Hook receiving the deltas of every create and update."""

        _ = model
        for delta in deltas:
            log.debug(delta.description)

    async def create_async(self, model: TModel | None) -> TModel:
        return self.create(model)

    async def create_many_async(self, models: Iterable[TModel | None]) -> list[TModel]:
        return list(self.create_many(models))

    async def update_async(self, model: TModel | None) -> TModel:
        if model is None:
            raise MissingModelError("source")
        existing = await self.read_async(model.id)
        if existing is None:
            raise ModelNotFoundError(self.model_type, model.id)
        return self.update(existing, model)

    @abstractmethod
    async def read_async(self, key: TKey) -> TModel | None: ...

    @abstractmethod
    async def read_all_async(self) -> Sequence[TModel]: ...

    @abstractmethod
    async def delete_async(self, key: TKey) -> None: ...

    @abstractmethod
    async def delete_many_async(self, keys: Iterable[TKey]) -> None: ...
