"""SQLAlchemy adapter package for modelmerge."""

from __future__ import annotations

from .crud import SqlAlchemyMergeCrud
from .mappings import (
    UTCDateTime,
    create_all_tables,
    delta_record_table,
    map_persistent_entity,
    mapper_registry,
    persistent_columns,
    persistent_table,
    start_mappers,
)
from .repositories import SqlAlchemyDeltaRecordRepository, SqlAlchemyEntityRepository
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyDeltaRecordRepository",
    "SqlAlchemyEntityRepository",
    "SqlAlchemyMergeCrud",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "UTCDateTime",
    "configured_engine",
    "create_all_tables",
    "delta_record_table",
    "is_started",
    "map_persistent_entity",
    "mapper_registry",
    "persistent_columns",
    "persistent_table",
    "shutdown",
    "start_mappers",
    "startup",
]
