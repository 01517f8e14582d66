"""
Tests for the world-state implementations.

Both implementations must honour the same contract, so most tests run
against each of them:
1. Point reads, writes and deletes
2. Range scans in byte order of the key, with open-ended bounds
3. Cursor release
4. All-or-nothing invocations
"""

from collections.abc import Generator

import pytest
from sqlalchemy import inspect

from library_ledger.errors import NotFoundError, StorageError
from library_ledger.world_state import (
    LedgerDatabase,
    MemoryWorldState,
    SqlWorldState,
    StateEntry,
    WorldState,
)


@pytest.fixture
def sql_db() -> Generator[LedgerDatabase, None, None]:
    db = LedgerDatabase("sqlite:///:memory:")
    db.init_database()
    yield db
    db.close()


@pytest.fixture(params=["memory", "sql"])
def state(request, sql_db) -> Generator[WorldState, None, None]:
    """Provide each world-state implementation in turn."""
    if request.param == "memory":
        yield MemoryWorldState()
    else:
        with sql_db.session_scope() as session:
            yield SqlWorldState(session)


def keys_of(entries) -> list[str]:
    return [entry.key for entry in entries]


class TestPointOperations:
    """get_state / put_state / del_state."""

    def test_missing_key_reads_none(self, state):
        assert state.get_state("book1") is None

    def test_put_then_get(self, state):
        state.put_state("book1", b"one")
        assert state.get_state("book1") == b"one"

    def test_put_overwrites(self, state):
        state.put_state("book1", b"one")
        state.put_state("book1", b"two")
        assert state.get_state("book1") == b"two"

    def test_delete(self, state):
        state.put_state("book1", b"one")
        state.del_state("book1")
        assert state.get_state("book1") is None

    def test_delete_missing_key(self, state):
        with pytest.raises(NotFoundError) as exc_info:
            state.del_state("book1")
        assert exc_info.value.key == "book1"

    def test_empty_key_rejected(self, state):
        with pytest.raises(StorageError):
            state.put_state("", b"x")


class TestRangeScans:
    """get_state_by_range."""

    @pytest.fixture
    def filled(self, state) -> WorldState:
        for key in ["c", "book2", "a", "book10", "b"]:
            state.put_state(key, key.encode())
        return state

    def test_full_scan_is_key_ordered(self, filled):
        with filled.get_state_by_range("", "") as entries:
            assert keys_of(entries) == ["a", "b", "book10", "book2", "c"]

    def test_entries_carry_values(self, filled):
        with filled.get_state_by_range("a", "b") as entries:
            assert list(entries) == [StateEntry("a", b"a")]

    def test_start_inclusive_end_exclusive(self, filled):
        with filled.get_state_by_range("b", "c") as entries:
            assert keys_of(entries) == ["b", "book10", "book2"]

    def test_open_start(self, filled):
        with filled.get_state_by_range("", "b") as entries:
            assert keys_of(entries) == ["a"]

    def test_open_end(self, filled):
        with filled.get_state_by_range("book2", "") as entries:
            assert keys_of(entries) == ["book2", "c"]

    def test_empty_range(self, state):
        with state.get_state_by_range("", "") as entries:
            assert list(entries) == []

    def test_closed_iterator_cannot_advance(self, filled):
        iterator = filled.get_state_by_range("", "")
        next(iterator)
        iterator.close()

        assert iterator.closed
        with pytest.raises(StorageError):
            next(iterator)

    def test_context_manager_closes_on_error(self, filled):
        with pytest.raises(RuntimeError):
            with filled.get_state_by_range("", "") as entries:
                next(entries)
                raise RuntimeError("consumer failed")

        assert entries.closed


class TestMemoryTransactions:
    """MemoryWorldState.transaction()."""

    def test_commit(self):
        state = MemoryWorldState()
        with state.transaction():
            state.put_state("book1", b"one")
        assert state.get_state("book1") == b"one"

    def test_rollback_discards_every_write(self):
        state = MemoryWorldState({"book1": b"one"})

        with pytest.raises(RuntimeError):
            with state.transaction():
                state.put_state("book1", b"changed")
                state.put_state("r1", b"record")
                state.del_state("book1")
                raise RuntimeError("invocation failed")

        assert state.get_state("book1") == b"one"
        assert "r1" not in state
        assert len(state) == 1

    def test_open_iterators_are_counted(self):
        state = MemoryWorldState({"a": b"1"})
        iterator = state.get_state_by_range("", "")
        assert state.open_iterators == 1
        iterator.close()
        iterator.close()
        assert state.open_iterators == 0


class TestSqlWorldState:
    """Behaviour specific to the SQL-backed world state."""

    def test_table_created(self, sql_db):
        assert "world_state" in inspect(sql_db.engine).get_table_names()

    def test_commit_persists_across_sessions(self, sql_db):
        with sql_db.session_scope() as session:
            SqlWorldState(session).put_state("book1", b"one")

        with sql_db.session_scope() as session:
            assert SqlWorldState(session).get_state("book1") == b"one"

    def test_rollback_discards_every_write(self, sql_db):
        with sql_db.session_scope() as session:
            SqlWorldState(session).put_state("book1", b"one")

        with pytest.raises(RuntimeError):
            with sql_db.session_scope() as session:
                state = SqlWorldState(session)
                state.put_state("book1", b"changed")
                state.put_state("r1", b"record")
                raise RuntimeError("invocation failed")

        with sql_db.session_scope() as session:
            state = SqlWorldState(session)
            assert state.get_state("book1") == b"one"
            assert state.get_state("r1") is None

    def test_writes_visible_to_scans_in_same_session(self, sql_db):
        with sql_db.session_scope() as session:
            state = SqlWorldState(session)
            state.put_state("book1", b"one")
            with state.get_state_by_range("", "") as entries:
                assert keys_of(entries) == ["book1"]

    def test_driver_errors_become_storage_errors(self, sql_db):
        with sql_db.engine.begin() as conn:
            conn.exec_driver_sql("DROP TABLE world_state")

        with sql_db.session_scope() as session:
            with pytest.raises(StorageError, match="failed to read from world state"):
                SqlWorldState(session).get_state("book1")

    def test_verify_connection(self, sql_db):
        assert sql_db.verify_connection() is True
