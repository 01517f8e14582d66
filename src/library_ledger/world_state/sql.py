"""
SQL-backed world state.

SqlWorldState adapts one SQLAlchemy session to the world-state contract. It
never commits: the session belongs to the invocation's session_scope(), which
decides whether all of the invocation's writes are kept.
"""

import logging

from sqlalchemy import Result, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import NotFoundError, StorageError
from .base import StateEntry, StateIterator, WorldState
from .schema import WorldStateEntry
from .session import safe_state_call

logger = logging.getLogger(__name__)


class SqlStateIterator(StateIterator):
    """Cursor over the rows of one range query."""

    def __init__(self, result: Result):
        super().__init__()
        self._result = result

    def _next_entry(self) -> StateEntry | None:
        try:
            row = self._result.fetchone()
        except SQLAlchemyError as e:
            raise StorageError(f"failed to read from world state: {e!s}") from e
        if row is None:
            return None
        return StateEntry(row.key, bytes(row.value))

    def _release(self) -> None:
        self._result.close()


class SqlWorldState(WorldState):
    """World state stored in the ``world_state`` table of one session."""

    def __init__(self, session: Session):
        self.session = session

    def _get_entry(self, key: str) -> WorldStateEntry | None:
        return safe_state_call(
            lambda: self.session.get(WorldStateEntry, key),
            "failed to read from world state",
            key=key,
        )

    def get_state(self, key: str) -> bytes | None:
        entry = self._get_entry(key)
        return None if entry is None else bytes(entry.value)

    def put_state(self, key: str, value: bytes) -> None:
        self._check_key(key)
        entry = self._get_entry(key)
        if entry is None:
            self.session.add(WorldStateEntry(key=key, value=bytes(value)))
        else:
            entry.value = bytes(value)
        # Flush so later reads and scans in the same invocation see the write
        safe_state_call(self.session.flush, "failed to put to world state", key=key)

    def del_state(self, key: str) -> None:
        entry = self._get_entry(key)
        if entry is None:
            raise NotFoundError(f"the key {key} does not exist", key=key)
        self.session.delete(entry)
        safe_state_call(self.session.flush, "failed to delete from world state", key=key)

    def get_state_by_range(self, start_key: str, end_key: str) -> StateIterator:
        query = select(WorldStateEntry.key, WorldStateEntry.value).order_by(WorldStateEntry.key)
        if start_key:
            query = query.where(WorldStateEntry.key >= start_key)
        if end_key:
            query = query.where(WorldStateEntry.key < end_key)

        result = safe_state_call(
            lambda: self.session.execute(query), "failed to open range query"
        )
        logger.debug("Opened range scan [%r, %r)", start_key, end_key)
        return SqlStateIterator(result)
