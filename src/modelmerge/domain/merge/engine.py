"""Policy-driven merging of field values from one record onto another."""

from __future__ import annotations

import logging
from typing import Any

from .delta import ModelDelta
from .errors import MissingModelError
from .naming import model_type_name
from .policy import MergeField, MergeMode, merge_fields, offers_field

log = logging.getLogger(__name__)


def is_empty(value: object) -> bool:
    """None and the empty string both count as "no value"."""

    return value is None or (isinstance(value, str) and not value)


def merge_properties(
    target: object,
    source: object,
    mode: MergeMode = MergeMode.ALL,
) -> list[ModelDelta[Any]]:
    """Copy permitted field values from ``source`` onto ``target`` in place.

    Only fields that carry a merge policy on the target type and exist by name
    on the source are considered. ``mode`` decides which policy flag gates the
    write; write-once fields are never overwritten once they hold a value.

    Returns one delta per changed field, in the target's field declaration
    order. The source is never mutated.
    """

    if target is None:
        raise MissingModelError("target")
    if source is None:
        raise MissingModelError("source")
    mode = MergeMode(mode)

    deltas: list[ModelDelta[Any]] = []
    for merge_field in merge_fields(target.__class__):
        if not offers_field(source, merge_field.name):
            continue
        if not merge_field.policy.permits(mode):
            continue
        delta = _merge_field(target, source, merge_field)
        if delta is not None:
            deltas.append(delta)

    log.debug(
        "Merged %s onto %s (mode=%s): %d change(s)",
        model_type_name(source),
        model_type_name(target),
        mode,
        len(deltas),
    )
    return deltas


def _merge_field(
    target: object,
    source: object,
    merge_field: MergeField[Any],
) -> ModelDelta[Any] | None:
    old_value = getattr(target, merge_field.name)
    new_value = getattr(source, merge_field.name)

    # staying empty
    if is_empty(old_value) and is_empty(new_value):
        return None
    if merge_field.policy.allow_once and not is_empty(old_value):
        return None
    if old_value is not None and new_value is not None and old_value == new_value:
        return None

    delta = ModelDelta(
        object_type_name=model_type_name(target),
        field_name=merge_field.display_name,
        old_value=_stringify(old_value),
        new_value=_stringify(new_value),
        change_category=merge_field.policy.change_category,
    )
    setattr(target, merge_field.name, new_value)
    return delta


def _stringify(value: object) -> str | None:
    if value is None:
        return None
    return str(value)
