"""
Tests for the SQLite log store.
"""

import pytest
from sqlalchemy import select
from unittest.mock import AsyncMock, MagicMock

from rageshake.core.exceptions import StoreOperationError, StoreUnavailableError
from rageshake.features.retention import RetentionManager
from rageshake.features.store import LogChunk, SQLAlchemyLogStore

CURRENT = "instance-0000000000300-current"


async def all_chunks(store: SQLAlchemyLogStore):
    async with store.db.get_session() as session:
        result = await session.execute(
            select(LogChunk).order_by(LogChunk.session_id, LogChunk.sequence)
        )
        return [(c.session_id, c.sequence, c.lines) for c in result.scalars().all()]


async def test_open_writes_sentinel_once(database_url):
    """Test the creation marker is written only when the database is new."""
    first = SQLAlchemyLogStore(CURRENT, database_url)
    await first.open()
    await first.open()  # already open, no-op
    chunks = await all_chunks(first)
    await first.close()

    assert len(chunks) == 1
    session_id, sequence, lines = chunks[0]
    assert (session_id, sequence) == (CURRENT, 0)
    assert lines.endswith("::: Log database was created.\n")

    second = SQLAlchemyLogStore("instance-0000000000400-other", database_url)
    await second.open()
    chunks = await all_chunks(second)
    await second.close()

    assert len(chunks) == 1


async def test_open_unavailable(tmp_path):
    """Test a medium that cannot be opened raises StoreUnavailableError."""
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    store = SQLAlchemyLogStore(CURRENT, f"sqlite+aiosqlite:///{blocker}/logs.db")

    with pytest.raises(StoreUnavailableError):
        await store.open()

    assert store.available is False


async def test_operations_before_open_raise():
    """Test using an unopened store reports it as unavailable."""
    store = SQLAlchemyLogStore(CURRENT, "sqlite+aiosqlite:///unused.db")

    with pytest.raises(StoreUnavailableError):
        await store.append(CURRENT, "line\n")
    with pytest.raises(StoreUnavailableError):
        await store.list_session_ids()


async def test_append_and_read_in_order(store):
    """Test chunks of a session read back as one text in sequence order."""
    await store.append("s1", "A\n")
    await store.append("s1", "B\n")

    assert await store.read_session("s1") == "A\nB\n"


async def test_append_empty_is_noop(store):
    """Test empty text never creates a chunk."""
    await store.append("s1", "")

    assert await store.read_session("s1") == ""
    assert "s1" not in await store.list_session_ids()


async def test_read_orders_by_sequence_not_insertion(store):
    """Test reading sorts by sequence even when rows were written out of order."""
    async with store.db.get_session() as session:
        session.add(LogChunk(session_id="s2", sequence=2, lines="C\n"))
        session.add(LogChunk(session_id="s2", sequence=0, lines="A\n"))
        session.add(LogChunk(session_id="s2", sequence=1, lines="B\n"))
        await session.commit()

    assert await store.read_session("s2") == "A\nB\nC\n"


async def test_sequence_continues_existing_session(store, database_url):
    """Test a new handle appends after the chunks already stored."""
    await store.append("s3", "one\n")
    await store.append("s3", "two\n")

    other = SQLAlchemyLogStore("instance-0000000000500-x", database_url)
    await other.open()
    try:
        await other.append("s3", "three\n")
    finally:
        await other.close()

    chunks = [c for c in await all_chunks(store) if c[0] == "s3"]
    assert [c[1] for c in chunks] == [0, 1, 2]
    assert await store.read_session("s3") == "one\ntwo\nthree\n"


async def test_list_session_ids_newest_first(store):
    """Test sessions are listed newest first by their timestamp."""
    await store.append("instance-0000000000100-aaaa", "old\n")
    await store.append("instance-0000000000200-bbbb", "mid\n")
    await store.append("instance-0000000000200-bbbb", "more\n")

    assert await store.list_session_ids() == [
        CURRENT,
        "instance-0000000000200-bbbb",
        "instance-0000000000100-aaaa",
    ]


async def test_list_requires_first_chunk(store):
    """Test sessions without a sequence-0 chunk are not listed."""
    async with store.db.get_session() as session:
        session.add(LogChunk(session_id="orphan", sequence=3, lines="x\n"))
        await session.commit()

    assert "orphan" not in await store.list_session_ids()


async def test_delete_session(store):
    """Test deleting a session leaves other sessions intact."""
    await store.append("s1", "A\n")
    await store.append("s1", "B\n")
    await store.append("s2", "keep\n")

    await store.delete_session("s1")

    assert await store.read_session("s1") == ""
    assert await store.read_session("s2") == "keep\n"
    assert "s1" not in await store.list_session_ids()


async def test_delete_unknown_session_is_noop(store):
    """Test deleting a session with no chunks succeeds."""
    await store.delete_session("never-written")


async def test_delete_restarts_sequence(store):
    """Test a session keeps being listed after its chunks were cleared."""
    await store.append(CURRENT, "before\n")
    await store.delete_session(CURRENT)
    await store.append(CURRENT, "after\n")

    assert CURRENT in await store.list_session_ids()
    assert await store.read_session(CURRENT) == "after\n"


async def test_failed_append_raises_operation_error(store):
    """Test a failing insert surfaces as StoreOperationError without a gap."""
    from sqlalchemy.exc import OperationalError

    real_db = store.db
    broken_session = MagicMock()
    broken_session.add = MagicMock()
    broken_session.execute = AsyncMock(
        return_value=MagicMock(scalar_one_or_none=MagicMock(return_value=0))
    )
    broken_session.commit = AsyncMock(
        side_effect=OperationalError("INSERT", {}, Exception("disk I/O error"))
    )
    broken_cm = MagicMock()
    broken_cm.__aenter__ = AsyncMock(return_value=broken_session)
    broken_cm.__aexit__ = AsyncMock(return_value=False)

    await store.append("s4", "first\n")
    store.db = MagicMock(get_session=MagicMock(return_value=broken_cm))
    try:
        with pytest.raises(StoreOperationError) as exc_info:
            await store.append("s4", "lost\n")
    finally:
        store.db = real_db

    assert exc_info.value.operation == "append"
    await store.append("s4", "second\n")
    chunks = [c for c in await all_chunks(store) if c[0] == "s4"]
    assert [c[1] for c in chunks] == [0, 1]


async def test_session_cleared_by_other_handle_restarts_at_zero(store, database_url):
    """Test a session deleted through another handle is listed again once it writes."""
    writer = SQLAlchemyLogStore("instance-0000000000600-writer", database_url)
    await writer.open()
    try:
        await writer.append(writer.session_id, "w0\n")
        await writer.append(writer.session_id, "w1\n")

        await RetentionManager(store).prune(0, include_current_session=True)
        await writer.append(writer.session_id, "w2\n")

        assert writer.session_id in await store.list_session_ids()
        chunks = [c for c in await all_chunks(store) if c[0] == writer.session_id]
        assert [c[1] for c in chunks] == [0]

        await RetentionManager(store).prune(0, include_current_session=True)
        assert await store.read_session(writer.session_id) == ""
    finally:
        await writer.close()
