"""SQLAlchemy mapping metadata for merge audit records and persistent entities."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    Uuid,
    inspect,
    orm,
)

from modelmerge.domain.model import (
    DeltaRecord,
    PersistentConcurrentUniversalEntity,
    PersistentEntity,
    PersistentUniversalEntity,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]
UNIVERSAL_ID_LENGTH = 32


class UTCDateTime(TypeDecorator[datetime]):
    """Store aware datetimes in UTC; naive values are assumed to already be UTC."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

delta_record_table = Table(
    "delta_record",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("object_type_name", String, nullable=False),
    Column("entity_id", UUIDColumnType, nullable=True),
    Column("field_name", String, nullable=False),
    Column("old_value", String, nullable=True),
    Column("new_value", String, nullable=True),
    Column("change_category", String, nullable=True),
    Column("recorded_at", UTCDateTime, nullable=False),
    Index("ix_delta_record_owner", "object_type_name", "entity_id"),
)


def persistent_columns(
    *,
    universal: bool = False,
    concurrent: bool = False,
) -> list[Column[Any]]:
    """Columns backing the fields of ``PersistentEntity`` and its optional extensions."""

    columns: list[Column[Any]] = [
        Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
        Column("created_utc", UTCDateTime, nullable=True),
        Column("updated_utc", UTCDateTime, nullable=True),
        Column("deleted_utc", UTCDateTime, nullable=True),
    ]
    if universal:
        columns.append(
            Column("universal_id", String(UNIVERSAL_ID_LENGTH), nullable=True, unique=True)
        )
    if concurrent:
        columns.append(Column("version", Integer, nullable=False))
    return columns


def persistent_table(
    name: str,
    *columns: Column[Any],
    universal: bool = False,
    concurrent: bool = False,
) -> Table:
    """Return the table ``name``, defining it with the persistent columns if needed."""

    existing = mapper_registry.metadata.tables.get(name)
    if existing is not None:
        return existing
    return Table(
        name,
        mapper_registry.metadata,
        *persistent_columns(universal=universal, concurrent=concurrent),
        *columns,
    )


def is_mapped(cls: type) -> bool:
    return inspect(cls, raiseerr=False) is not None


def map_persistent_entity(
    entity_cls: type[PersistentEntity],
    name: str,
    *columns: Column[Any],
) -> Table:
    """Map a caller-defined persistent record type onto table ``name``.

    ``columns`` describe the type's own fields; the persistent columns are
    added automatically. Concurrent entities get their ``version`` column
    wired as the mapper's version counter, so a flush based on a stale
    version raises ``StaleDataError``. Mapping the same class again returns
    its table.
    Map entity types before ``create_all_tables`` (or ``startup``) runs.
    """

    if is_mapped(entity_cls):
        return inspect(entity_cls).local_table  # pyright: ignore[reportReturnType]

    universal = issubclass(entity_cls, PersistentUniversalEntity)
    concurrent = issubclass(entity_cls, PersistentConcurrentUniversalEntity)
    table = persistent_table(name, *columns, universal=universal, concurrent=concurrent)
    if concurrent:
        mapper_registry.map_imperatively(entity_cls, table, version_id_col=table.c.version)
    else:
        mapper_registry.map_imperatively(entity_cls, table)
    log.info("Mapped %s onto table %s", entity_cls.__name__, name)
    return table


def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the merge audit model."""

    if is_mapped(DeltaRecord):
        return mapper_registry

    log.info("Starting SQLAlchemy mappers")
    mapper_registry.map_imperatively(DeltaRecord, delta_record_table)
    return mapper_registry


async def create_all_tables(engine: AsyncEngine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    async with engine.begin() as connection:
        await connection.run_sync(mapper_registry.metadata.create_all)
