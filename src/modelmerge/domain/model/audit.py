"""Audit records for field changes observed during merges."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from .entity import Entity

if TYPE_CHECKING:
    from uuid import UUID

    from modelmerge.domain.merge import ModelDelta


@dataclass(eq=False, kw_only=True)
class DeltaRecord(Entity):
    """Persistable form of a single ``ModelDelta``."""

    object_type_name: str
    field_name: str
    entity_id: UUID | None = None
    old_value: str | None = None
    new_value: str | None = None
    change_category: str | None = None
    recorded_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @classmethod
    def from_delta(cls, delta: ModelDelta[Any], *, entity_id: UUID | None = None) -> DeltaRecord:
        category = delta.change_category
        return cls(
            object_type_name=delta.object_type_name,
            field_name=delta.field_name,
            entity_id=entity_id,
            old_value=delta.old_value,
            new_value=delta.new_value,
            change_category=None if category is None else str(category),
        )

    @property
    def description(self) -> str:
        return (
            f"{self.object_type_name} field '{self.field_name}' was changed "
            f"from '{self.old_value}' to '{self.new_value}'"
        )
