from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from modelmerge.adapters.sqlalchemy import SqlAlchemyMergeCrud
from modelmerge.domain.lifecycle import ModelNotFoundError
from modelmerge.domain.ports import Crud, ReadsByUniversalId
from tests.helpers.models import Memo, Note, Tag

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from modelmerge.adapters.sqlalchemy import SqlAlchemyUnitOfWork
    from modelmerge.domain.model import DeltaRecord

pytestmark = pytest.mark.integration

type UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]


def test_crud_satisfies_ports(session_factory: async_sessionmaker[AsyncSession]) -> None:
    crud = SqlAlchemyMergeCrud(session_factory(), Note)

    assert isinstance(crud, Crud)
    assert isinstance(crud, ReadsByUniversalId)


def test_create_then_read_in_new_unit_of_work(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    async def scenario() -> tuple[Note, Note | None]:
        async with sqlite_unit_of_work() as uow:
            created = await uow.crud(Note).create_async(Note(title="hello", pinned=True))
            await uow.commit()
        async with sqlite_unit_of_work() as uow:
            return created, await uow.crud(Note).read_async(created.id)

    created, stored = asyncio.run(scenario())

    assert stored is not None
    assert stored is not created
    assert stored.title == "hello"
    assert stored.pinned is False
    assert stored.created_utc is not None
    assert stored.universal_id == created.universal_id


def test_create_and_update_record_deltas(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    async def scenario() -> tuple[Note, list[DeltaRecord], Note | None]:
        async with sqlite_unit_of_work() as uow:
            created = await uow.crud(Note).create_async(Note(title="draft", author="ann"))
            await uow.commit()

        incoming = Note(id=created.id, title="final", author="bob", pinned=True)
        async with sqlite_unit_of_work() as uow:
            updated = await uow.crud(Note).update_async(incoming)
            await uow.commit()

        async with sqlite_unit_of_work() as uow:
            history = await uow.repositories.deltas.for_entity("Note", created.id)
            stored = await uow.crud(Note).read_async(created.id)
        return updated, history, stored

    updated, history, stored = asyncio.run(scenario())

    assert updated.author == "ann"
    changes = {(record.field_name, record.old_value, record.new_value) for record in history}
    assert changes == {
        ("title", None, "draft"),
        ("Author", None, "ann"),
        ("title", "draft", "final"),
        ("pinned", "False", "True"),
    }
    categories = {record.field_name: record.change_category for record in history}
    assert categories["title"] == "content"
    assert categories["pinned"] is None
    assert stored is not None
    assert stored.updated_utc is not None
    assert stored.title == "final"


def test_create_many_async(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    async def scenario() -> tuple[list[Tag], list[Tag]]:
        async with sqlite_unit_of_work() as uow:
            created = await uow.crud(Tag).create_many_async([Tag(name="a"), None, Tag(name="b")])
            await uow.commit()
        async with sqlite_unit_of_work() as uow:
            return created, list(await uow.crud(Tag).read_all_async())

    created, stored = asyncio.run(scenario())

    assert [tag.name for tag in created] == ["a", "b"]
    assert {tag.name for tag in stored} == {"a", "b"}


def test_update_unknown_record_raises(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    async def scenario() -> None:
        async with sqlite_unit_of_work() as uow:
            await uow.crud(Tag).update_async(Tag(name="ghost"))

    with pytest.raises(ModelNotFoundError):
        asyncio.run(scenario())


def test_soft_delete_hides_record_from_read_all(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    async def scenario() -> tuple[Tag, list[Tag], Tag | None]:
        async with sqlite_unit_of_work() as uow:
            kept, dropped = await uow.crud(Tag).create_many_async(
                [Tag(name="kept"), Tag(name="dropped")]
            )
            await uow.commit()

        async with sqlite_unit_of_work() as uow:
            await uow.crud(Tag).delete_async(dropped.id)
            await uow.commit()

        async with sqlite_unit_of_work() as uow:
            crud = uow.crud(Tag)
            return kept, list(await crud.read_all_async()), await crud.read_async(dropped.id)

    kept, remaining, soft_deleted = asyncio.run(scenario())

    assert [tag.id for tag in remaining] == [kept.id]
    assert soft_deleted is not None
    assert soft_deleted.deleted_utc is not None


def test_hard_delete_removes_rows(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    async def scenario() -> list[Tag]:
        async with sqlite_unit_of_work() as uow:
            created = await uow.crud(Tag).create_many_async([Tag(name="a"), Tag(name="b")])
            await uow.commit()

        async with sqlite_unit_of_work() as uow:
            crud = uow.crud(Tag, hard_delete=True)
            await crud.delete_many_async([tag.id for tag in created])
            await uow.commit()

        async with sqlite_unit_of_work() as uow:
            return await uow.repository(Tag).list_all()

    assert asyncio.run(scenario()) == []


def test_delete_missing_key_is_a_noop(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    async def scenario() -> list[Tag]:
        async with sqlite_unit_of_work() as uow:
            await uow.crud(Tag).delete_async(Tag().id)
            await uow.commit()
            return await uow.repository(Tag).list_all()

    assert asyncio.run(scenario()) == []


def test_read_by_universal_id(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    async def scenario() -> tuple[Note, Note | None, Note | None]:
        async with sqlite_unit_of_work() as uow:
            created = await uow.crud(Note).create_async(Note(title="hello"))
            await uow.commit()

        assert created.universal_id is not None
        async with sqlite_unit_of_work() as uow:
            crud = uow.crud(Note)
            found = await crud.read_by_universal_id_async(created.universal_id)
            missing = await crud.read_by_universal_id_async("0" * 32)
        return created, found, missing

    created, found, missing = asyncio.run(scenario())

    assert found is not None
    assert found.id == created.id
    assert missing is None


def test_read_by_universal_id_requires_universal_entity(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    crud = SqlAlchemyMergeCrud(session_factory(), Tag)

    with pytest.raises(TypeError, match="Tag"):
        asyncio.run(crud.read_by_universal_id_async("x"))


def test_universal_ids_are_unique(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    shared = "f" * 32

    async def scenario() -> None:
        async with sqlite_unit_of_work() as uow:
            await uow.crud(Note).create_many_async(
                [Note(universal_id=shared), Note(universal_id=shared)]
            )
            await uow.commit()

    with pytest.raises(IntegrityError):
        asyncio.run(scenario())


def test_crud_without_delta_repository_only_logs(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    async def scenario() -> tuple[SqlAlchemyMergeCrud[Tag], Tag, Tag | None]:
        async with session_factory() as session:
            crud = SqlAlchemyMergeCrud(session, Tag)
            created = await crud.create_async(Tag(name="solo"))
            await session.commit()
            return crud, created, await session.get(Tag, created.id)

    crud, created, stored = asyncio.run(scenario())

    assert stored is created
    assert crud.deltas is None


def test_reads_suspend_instead_of_blocking_the_loop(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    async def scenario() -> int:
        async with sqlite_unit_of_work() as uow:
            created = await uow.crud(Tag).create_async(Tag(name="a"))
            await uow.commit()

        ticks = 0
        stop = asyncio.Event()

        async def ticker() -> None:
            nonlocal ticks
            while not stop.is_set():
                ticks += 1
                await asyncio.sleep(0)

        task = asyncio.create_task(ticker())
        async with sqlite_unit_of_work() as uow:
            await uow.crud(Tag).read_async(created.id)
            observed = ticks
        stop.set()
        await task
        return observed

    assert asyncio.run(scenario()) > 0


def test_update_bumps_concurrency_token_without_merging_it(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    async def scenario() -> tuple[int | None, Memo, Memo | None]:
        async with sqlite_unit_of_work() as uow:
            created = await uow.crud(Memo).create_async(Memo(text="first"))
            await uow.commit()
            initial = created.version

        async with sqlite_unit_of_work() as uow:
            updated = await uow.crud(Memo).update_async(
                Memo(id=created.id, text="second", version=99)
            )
            await uow.commit()

        async with sqlite_unit_of_work() as uow:
            history = await uow.repositories.deltas.for_entity("Memo", created.id)
            assert {record.field_name for record in history} == {"text"}
            return initial, updated, await uow.crud(Memo).read_async(created.id)

    initial, updated, stored = asyncio.run(scenario())

    assert initial == 1
    assert updated.version == 2
    assert stored is not None
    assert stored.text == "second"
    assert stored.version == 2


def test_stale_concurrency_token_rejects_update(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    memo = Memo(text="original")

    async def scenario() -> None:
        async with session_factory() as session:
            session.add(memo)
            await session.commit()

        async with session_factory() as first, session_factory() as second:
            mine = await first.get(Memo, memo.id)
            theirs = await second.get(Memo, memo.id)
            assert mine is not None
            assert theirs is not None

            theirs.text = "theirs"
            await second.commit()

            mine.text = "mine"
            await first.commit()

    with pytest.raises(StaleDataError):
        asyncio.run(scenario())
