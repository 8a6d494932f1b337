"""Create/update lifecycle for records: merge, then stamp capability fields."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from modelmerge.domain.merge import MergeMode, MissingModelError, ModelDelta, merge_properties
from modelmerge.domain.model import (
    Auditable,
    SoftDeletable,
    Universal,
    generate_universal_id,
    set_created_utc,
    set_modified_utc,
    soft_restore,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MergeOutcome[TModel]:
    """A created or updated record together with the deltas its merge produced."""

    model: TModel
    deltas: tuple[ModelDelta[Any], ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.deltas)


def set_create_properties(model: object) -> None:
    """Stamp the capability fields of a freshly created record."""

    if isinstance(model, Auditable):
        set_created_utc(model)
    if isinstance(model, Universal) and not model.universal_id:
        generate_universal_id(model)
    if isinstance(model, SoftDeletable):
        soft_restore(model)


def set_update_properties(model: object) -> None:
    """Stamp the modification time, whether or not the merge changed anything."""

    if isinstance(model, Auditable):
        set_modified_utc(model)


def create_with_deltas[TModel](
    model_type: type[TModel],
    source: TModel | None,
) -> MergeOutcome[TModel]:
    if source is None:
        raise MissingModelError("source")
    new_model = model_type()
    deltas = merge_properties(new_model, source, MergeMode.CREATE)
    set_create_properties(new_model)
    log.debug("Created %s with %d merged field(s)", model_type.__name__, len(deltas))
    return MergeOutcome(model=new_model, deltas=tuple(deltas))


def create_model[TModel](model_type: type[TModel], source: TModel | None) -> TModel:
    """Build a new ``model_type`` from the create-permitted fields of ``source``."""

    return create_with_deltas(model_type, source).model


def create_models[TModel](
    model_type: type[TModel],
    sources: Iterable[TModel | None],
) -> Iterator[TModel]:
    """Lazily create one record per non-None source, preserving order."""

    return (create_model(model_type, source) for source in sources if source is not None)


def update_with_deltas[TModel](
    existing: TModel | None,
    source: TModel | None,
) -> MergeOutcome[TModel]:
    if existing is None:
        raise MissingModelError("existing")
    if source is None:
        raise MissingModelError("source")
    deltas = merge_properties(existing, source, MergeMode.UPDATE)
    set_update_properties(existing)
    return MergeOutcome(model=existing, deltas=tuple(deltas))


def update_model[TModel](existing: TModel | None, source: TModel | None) -> TModel:
    """Merge the update-permitted fields of ``source`` onto ``existing`` in place."""

    return update_with_deltas(existing, source).model
