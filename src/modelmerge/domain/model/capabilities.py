"""Optional record capabilities understood by the create/update lifecycle.

A record type may satisfy none, one or several of these protocols. The
lifecycle checks them with ``isinstance`` and stamps the matching fields.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol, runtime_checkable
from uuid import uuid4


@runtime_checkable
class Identifiable[TKey](Protocol):
    """A record with a unique key enforced by whatever persists it."""

    id: TKey


@runtime_checkable
class Auditable(Protocol):
    """A record that tracks when it was created and last modified."""

    created_utc: datetime | None
    updated_utc: datetime | None


@runtime_checkable
class Universal(Protocol):
    """A record with an immutable identifier that is unique across systems."""

    universal_id: str | None


@runtime_checkable
class Concurrent(Protocol):
    """A record carrying an optimistic concurrency token maintained by its store."""

    version: int | None


@runtime_checkable
class SoftDeletable(Protocol):
    """A record that is flagged as deleted instead of being removed."""

    deleted_utc: datetime | None


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def generate_guid_string() -> str:
    """Return a new GUID as 32 lowercase hex characters."""

    return uuid4().hex


def set_created_utc(record: Auditable) -> None:
    record.created_utc = utc_now()


def set_modified_utc(record: Auditable) -> None:
    record.updated_utc = utc_now()


def has_been_modified(record: Auditable) -> bool:
    return record.updated_utc is not None


def generate_universal_id(record: Universal) -> None:
    record.universal_id = generate_guid_string()


def soft_delete(record: SoftDeletable) -> None:
    record.deleted_utc = utc_now()


def soft_restore(record: SoftDeletable) -> None:
    record.deleted_utc = None


def has_been_soft_deleted(record: SoftDeletable) -> bool:
    return record.deleted_utc is not None
