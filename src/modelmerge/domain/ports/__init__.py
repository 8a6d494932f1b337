"""Domain port definitions for adapters."""

from __future__ import annotations

from .crud import Creates, Crud, Deletes, Reads, ReadsAll, ReadsByUniversalId, Updates
from .persistence import DeltaRecordRepository, EntityRepository, Repository
from .unit_of_work import MergeRepositories, MergeUnitOfWork, RepositoryCollection, UnitOfWork

__all__ = [
    "Creates",
    "Crud",
    "Deletes",
    "DeltaRecordRepository",
    "EntityRepository",
    "MergeRepositories",
    "MergeUnitOfWork",
    "Reads",
    "ReadsAll",
    "ReadsByUniversalId",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
    "Updates",
]
