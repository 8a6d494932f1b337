"""Policy-free shallow copies between records."""

from __future__ import annotations

from .errors import MissingModelError
from .policy import field_names, offers_field


def copy_fields(source: object, target: object) -> list[str]:
    """Copy every same-named field from ``source`` onto ``target``.

    Merge policies are ignored and no deltas are produced. Returns the copied
    field names in the target's declaration order.
    """

    if source is None:
        raise MissingModelError("source")
    if target is None:
        raise MissingModelError("target")

    copied: list[str] = []
    for name in field_names(target):
        if not offers_field(source, name):
            continue
        setattr(target, name, getattr(source, name))
        copied.append(name)
    return copied
