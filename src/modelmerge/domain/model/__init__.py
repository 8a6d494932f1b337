"""Public domain model surface."""

from __future__ import annotations

from modelmerge.domain.model.audit import DeltaRecord
from modelmerge.domain.model.capabilities import (
    Auditable,
    Concurrent,
    Identifiable,
    SoftDeletable,
    Universal,
    generate_guid_string,
    generate_universal_id,
    has_been_modified,
    has_been_soft_deleted,
    set_created_utc,
    set_modified_utc,
    soft_delete,
    soft_restore,
    utc_now,
)
from modelmerge.domain.model.entity import Entity, new_id
from modelmerge.domain.model.persistent import (
    PersistentConcurrentUniversalEntity,
    PersistentEntity,
    PersistentUniversalEntity,
)

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "new_id",
    "PersistentEntity",
    "PersistentUniversalEntity",
    "PersistentConcurrentUniversalEntity",
    # capabilities
    "Auditable",
    "Concurrent",
    "Identifiable",
    "SoftDeletable",
    "Universal",
    "generate_guid_string",
    "generate_universal_id",
    "has_been_modified",
    "has_been_soft_deleted",
    "set_created_utc",
    "set_modified_utc",
    "soft_delete",
    "soft_restore",
    "utc_now",
    # audit
    "DeltaRecord",
]
