"""Change records produced by merges."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ModelDelta[TCategory]:
    """One observed field change.

    One instance is produced per changed field per merge call. Values are
    stringified at construction time; ``None`` stays ``None``.
    """

    object_type_name: str
    field_name: str
    old_value: str | None
    new_value: str | None
    change_category: TCategory | None = None

    @property
    def description(self) -> str:
        return (
            f"{self.object_type_name} field '{self.field_name}' was changed "
            f"from '{self.old_value}' to '{self.new_value}'"
        )
