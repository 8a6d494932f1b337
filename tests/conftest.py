from __future__ import annotations

import asyncio
import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from modelmerge.adapters.sqlalchemy import create_all_tables, start_mappers
from modelmerge.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, shutdown, startup
from tests.helpers.models import map_test_entities

os.environ.setdefault("DATABASE_URI", "sqlite+aiosqlite:///:memory:")

start_mappers()
map_test_entities()

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession


@pytest.fixture
def sqlite_engine(tmp_path: Path) -> Iterator[AsyncEngine]:
    # One file per test; NullPool keeps no connection alive between asyncio.run calls.
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'modelmerge.db'}",
        poolclass=NullPool,
    )
    asyncio.run(create_all_tables(engine))
    try:
        yield engine
    finally:
        asyncio.run(engine.dispose())


@pytest.fixture
def session_factory(sqlite_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(sqlite_engine, expire_on_commit=False)


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: AsyncEngine,
) -> Iterator[Callable[[], SqlAlchemyUnitOfWork]]:
    asyncio.run(startup(engine=sqlite_engine, force=True))

    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork()

    try:
        yield factory
    finally:
        asyncio.run(shutdown())
