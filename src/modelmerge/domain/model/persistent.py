"""Base records for entities persisted across systems and time."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from modelmerge.domain.merge import display_metadata, merged

from .entity import Entity

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(eq=False, kw_only=True)
class PersistentEntity(Entity):
    """Auditable, soft-deletable entity.

    The lifecycle timestamps carry no merge policy: they are stamped by the
    create/update lifecycle and never copied from incoming values.
    """

    created_utc: datetime | None = field(default=None, metadata=display_metadata("Created Date"))
    updated_utc: datetime | None = field(
        default=None, metadata=display_metadata("Modified Date")
    )
    deleted_utc: datetime | None = field(default=None, metadata=display_metadata("Deleted Date"))


@dataclass(eq=False, kw_only=True)
class PersistentUniversalEntity(PersistentEntity):
    """Persistent entity with a cross-system identifier (32 hex characters).

    The identifier may be supplied on create but is never changed by updates.
    """

    universal_id: str | None = merged(default=None, allow_update=False, display_name="Universal ID")


@dataclass(eq=False, kw_only=True)
class PersistentConcurrentUniversalEntity(PersistentUniversalEntity):
    """Universal entity guarded by an optimistic concurrency token.

    ``version`` is assigned and bumped by the store on every write; a write
    based on a stale version is rejected. It is never merged.
    """

    version: int | None = field(default=None, metadata=display_metadata("Concurrency Token"))
