"""Per-field merge policy, declared once per record type through dataclass metadata."""

from __future__ import annotations

from dataclasses import MISSING, dataclass, field, fields, is_dataclass
from enum import StrEnum
from functools import cache
from inspect import getattr_static
from typing import TYPE_CHECKING, Any, Final

from .naming import DISPLAY_NAME_KEY, display_name

if TYPE_CHECKING:
    from collections.abc import Callable
    from dataclasses import Field

MERGE_POLICY_KEY: Final[str] = "merge_policy"


class MergeMode(StrEnum):
    """Selects which policy flags gate a write during a merge."""

    ALL = "all"  # every participating field, ignoring allow_create/allow_update
    CREATE = "create"
    UPDATE = "update"


@dataclass(frozen=True, slots=True)
class MergePolicy[TCategory]:
    """Declarative merge rules for one field.

    ``allow_once`` is checked after the mode has permitted the write and cannot
    be overridden by the mode. ``change_category`` is opaque to the engine and
    copied verbatim into every delta produced for the field.
    """

    participates: bool = True
    allow_create: bool = True
    allow_update: bool = True
    allow_once: bool = False
    change_category: TCategory | None = None

    def permits(self, mode: MergeMode) -> bool:
        if not self.participates:
            return False
        match mode:
            case MergeMode.ALL:
                return True
            case MergeMode.CREATE:
                return self.allow_create
            case MergeMode.UPDATE:
                return self.allow_update


@dataclass(frozen=True, slots=True)
class MergeField[TCategory]:
    """A participating field of a record type together with its policy."""

    name: str
    display_name: str
    policy: MergePolicy[TCategory]


def merged[TCategory](
    *,
    default: Any = MISSING,
    default_factory: Callable[[], Any] | Any = MISSING,
    allow_create: bool = True,
    allow_update: bool = True,
    allow_once: bool = False,
    change_category: TCategory | None = None,
    display_name: str | None = None,
    participates: bool = True,
    **field_kwargs: Any,
) -> Any:
    """Declare a dataclass field that takes part in merges.

    Wraps ``dataclasses.field``; extra keyword arguments (``repr``, ``compare``,
    ...) are passed through.
    """

    metadata: dict[str, object] = {
        MERGE_POLICY_KEY: MergePolicy(
            participates=participates,
            allow_create=allow_create,
            allow_update=allow_update,
            allow_once=allow_once,
            change_category=change_category,
        )
    }
    if display_name is not None:
        metadata[DISPLAY_NAME_KEY] = display_name
    return field(
        default=default,
        default_factory=default_factory,
        metadata=metadata,
        **field_kwargs,
    )


def policy_for(model_field: Field[Any]) -> MergePolicy[Any] | None:
    policy = model_field.metadata.get(MERGE_POLICY_KEY)
    if isinstance(policy, MergePolicy):
        return policy
    return None


@cache
def merge_fields(model_type: type) -> tuple[MergeField[Any], ...]:
    """Return the participating fields of ``model_type`` in declaration order.

    Types that are not dataclasses declare no policies and yield an empty tuple.
    """

    if not is_dataclass(model_type):
        return ()
    result: list[MergeField[Any]] = []
    for model_field in fields(model_type):
        policy = policy_for(model_field)
        if policy is None or not policy.participates:
            continue
        result.append(
            MergeField(
                name=model_field.name,
                display_name=display_name(model_field),
                policy=policy,
            )
        )
    return tuple(result)


@cache
def _dataclass_field_names(model_type: type) -> tuple[str, ...]:
    return tuple(model_field.name for model_field in fields(model_type))


def field_names(model: object) -> tuple[str, ...]:
    """Return the field names of a record in declaration order.

    Dataclass instances report their declared fields; other objects report the
    attributes in their instance ``__dict__``.
    """

    model_type = model.__class__
    if is_dataclass(model_type):
        return _dataclass_field_names(model_type)
    try:
        return tuple(vars(model))
    except TypeError:
        return ()


_ABSENT: Final = object()


def offers_field(model: object, name: str) -> bool:
    """Whether ``model`` exposes a value under ``name``.

    Declared dataclass fields, instance attributes, slots and properties all
    count. Nothing is evaluated, so an unset slot still counts and fails when
    it is read.
    """

    if is_dataclass(model.__class__) and name in _dataclass_field_names(model.__class__):
        return True
    return getattr_static(model, name, _ABSENT) is not _ABSENT
